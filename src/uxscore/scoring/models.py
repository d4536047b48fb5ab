# models.py
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


Answers = Mapping[str, Any]
Interval = Tuple[float, float]


class Polarity(Enum):
    # Whether the raw answer runs in the positive direction of the construct.
    DIRECT = "direct"
    REVERSED = "reversed"


@dataclass(frozen=True)
class Scale:
    # Closed interval of valid raw answers. Sentinels (e.g. DEEP's "not
    # applicable" 0) must lie outside [low, high].
    low: float
    high: float
    # Subtracted after reversal so the scale is centred where the instrument expects.
    origin: float = 0.0

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def normalize(self, value: float, polarity: Polarity) -> float:
        if polarity is Polarity.REVERSED:
            value = self.low + self.high - value
        return value - self.origin


@dataclass(frozen=True)
class Item:
    item_id: str
    polarity: Polarity = Polarity.DIRECT


@dataclass(frozen=True)
class Questionnaire:
    key: str
    scale: Scale
    # dimension name -> items, in administration order
    dimensions: Mapping[str, Tuple[Item, ...]]
    # derived dimension name -> base dimensions pooled per respondent
    composites: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def items(self) -> Tuple[Item, ...]:
        return tuple(item for items in self.dimensions.values() for item in items)

    @property
    def item_ids(self) -> Tuple[str, ...]:
        return tuple(item.item_id for item in self.items)

    def read(self, answers: Answers, item: Item) -> Optional[float]:
        # Normalized value of one item, or None when it cannot be scored.
        raw = read_answer(answers, item.item_id)
        if raw is None or not self.scale.contains(raw):
            return None
        return self.scale.normalize(raw, item.polarity)


def read_answer(answers: Answers, item_id: str) -> Optional[float]:
    # Finite real number or None. bool is an int subclass and is rejected.
    if not isinstance(answers, Mapping):
        return None
    value = answers.get(item_id)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class StatsSummary:
    mean: float
    sd: float
    ci90: Interval
    ci95: Interval
    ci99: Interval

    @staticmethod
    def zero() -> "StatsSummary":
        return StatsSummary.point(0.0)

    @staticmethod
    def point(m: float) -> "StatsSummary":
        return StatsSummary(mean=m, sd=0.0, ci90=(m, m), ci95=(m, m), ci99=(m, m))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "sd": self.sd,
            "ci90": list(self.ci90),
            "ci95": list(self.ci95),
            "ci99": list(self.ci99),
        }


@dataclass(frozen=True)
class QuestionnaireResult:
    questionnaire: str
    n: int
    dimensions: Mapping[str, StatsSummary]
    # respondents contributing to each dimension
    dimension_n: Mapping[str, int]
    grade: Optional[str] = None

    def __post_init__(self) -> None:
        # Freeze the mappings as well as the attributes.
        object.__setattr__(self, "dimensions", MappingProxyType(dict(self.dimensions)))
        object.__setattr__(self, "dimension_n", MappingProxyType(dict(self.dimension_n)))

    def __getitem__(self, dimension: str) -> StatsSummary:
        return self.dimensions[dimension]

    @property
    def summary(self) -> StatsSummary:
        # Convenience for single-score instruments (SUS, UMUX).
        if len(self.dimensions) != 1:
            raise AttributeError(f"{self.questionnaire} has {len(self.dimensions)} dimensions")
        return next(iter(self.dimensions.values()))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "questionnaire": self.questionnaire,
            "n": self.n,
            "dimensions": {
                name: dict(summary.to_dict(), n=self.dimension_n.get(name, 0))
                for name, summary in self.dimensions.items()
            },
        }
        if self.grade is not None:
            out["grade"] = self.grade
        return out
