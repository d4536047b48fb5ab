# instruments.py
from __future__ import annotations

from typing import Dict, Iterable, Tuple

from .models import Item, Polarity, Questionnaire, Scale


D = Polarity.DIRECT
R = Polarity.REVERSED

# DEEP answer meaning "not applicable"; outside the valid 1..5 interval.
DEEP_NOT_APPLICABLE = 0


def _items(ids: Iterable[str], reversed_ids: Iterable[str] = ()) -> Tuple[Item, ...]:
    flipped = set(reversed_ids)
    return tuple(Item(i, R if i in flipped else D) for i in ids)


def _q(numbers: Iterable[int]) -> Tuple[str, ...]:
    return tuple(f"Q{n}" for n in numbers)


# -------------------------
# SUS: 10 items, 0..4; even items are negatively worded
# -------------------------

SUS = Questionnaire(
    key="sus",
    scale=Scale(0, 4),
    dimensions={"SCORE": _items(_q(range(1, 11)), reversed_ids=_q(range(2, 11, 2)))},
)

SUS_MULTIPLIER = 2.5

# Lower bounds of the curved grading scale, best grade first.
SUS_GRADES: Tuple[Tuple[float, str], ...] = (
    (84.1, "A+"),
    (80.8, "A"),
    (78.9, "A-"),
    (77.2, "B+"),
    (74.1, "B"),
    (72.6, "B-"),
    (71.1, "C+"),
    (65.0, "C"),
    (62.7, "C-"),
    (51.7, "D"),
)
SUS_FAIL_GRADE = "F"


# -------------------------
# UMUX / UMUX-Lite: 0..6; Q2 and Q4 negatively worded
# -------------------------

UMUX = Questionnaire(
    key="umux",
    scale=Scale(0, 6),
    dimensions={"SCORE": _items(_q(range(1, 5)), reversed_ids=("Q2", "Q4"))},
)

# UMUX-Lite keeps the usefulness (Q1) and ease-of-use (Q3) items of the UMUX pool.
UMUX_LITE = Questionnaire(
    key="umux_lite",
    scale=Scale(0, 6),
    dimensions={
        "USEFULNESS": _items(("Q1",)),
        "USABILITY": _items(("Q3",)),
    },
)


# -------------------------
# UEQ: 26 bipolar items, 1..7 centred on 4
# -------------------------

# Items whose positive term sits on the left, low raw values are good.
_UEQ_POSITIVE_LEFT = _q((3, 4, 5, 9, 10, 12, 17, 18, 19, 21, 23, 24, 25))

UEQ = Questionnaire(
    key="ueq",
    scale=Scale(1, 7, origin=4),
    dimensions={
        "ATT": _items(_q((1, 12, 14, 16, 24, 25)), _UEQ_POSITIVE_LEFT),
        "PERSP": _items(_q((2, 4, 13, 21)), _UEQ_POSITIVE_LEFT),
        "EFF": _items(_q((9, 20, 22, 23)), _UEQ_POSITIVE_LEFT),
        "DEP": _items(_q((8, 11, 17, 19)), _UEQ_POSITIVE_LEFT),
        "STIM": _items(_q((5, 6, 7, 18)), _UEQ_POSITIVE_LEFT),
        "NOV": _items(_q((3, 10, 15, 26)), _UEQ_POSITIVE_LEFT),
    },
    composites={"GLOBAL": ("ATT", "PERSP", "EFF", "DEP", "STIM", "NOV")},
)

UEQ_S = Questionnaire(
    key="ueq_s",
    scale=Scale(1, 7, origin=4),
    dimensions={
        "PRAG": _items(_q(range(1, 5))),
        "HED": _items(_q(range(5, 9))),
    },
    composites={"GLOBAL": ("PRAG", "HED")},
)


# -------------------------
# DEEP: 19 items, 1..5, 0 = not applicable
# -------------------------

DEEP = Questionnaire(
    key="deep",
    scale=Scale(1, 5),
    dimensions={
        "G1": _items(_q((1, 2, 3, 4))),
        "G2": _items(_q((5, 6, 7))),
        "G3": _items(_q((8, 9, 10))),
        "G4": _items(_q((11, 12, 13)), reversed_ids=("Q12",)),
        "G5": _items(_q((14, 15, 16)), reversed_ids=("Q15",)),
        "G6": _items(_q((17, 18, 19))),
    },
)


# -------------------------
# AttrakDiff: bipolar -3..+3
# -------------------------

# Pairs printed with the positive term on the left in the paper administration
# (e.g. "humain - technique"); their raw sign is flipped before scoring.
ATTRAKDIFF_REVERSED = frozenset(
    {
        "QP1", "QP2", "QP3", "QP5",
        "QHI2", "QHI3", "QHI6",
        "QHS1", "QHS3", "QHS4", "QHS7",
        "ATT1", "ATT3", "ATT5", "ATT7",
    }
)

ATTRAKDIFF_BASE_DIMENSIONS = ("QP", "QHS", "QHI", "ATT")


def _attrakdiff(key: str, numbers: Dict[str, Tuple[int, ...]]) -> Questionnaire:
    return Questionnaire(
        key=key,
        scale=Scale(-3, 3),
        dimensions={
            dim: _items((f"{dim}{n}" for n in numbers[dim]), ATTRAKDIFF_REVERSED)
            for dim in ATTRAKDIFF_BASE_DIMENSIONS
        },
        composites={"QH": ("QHS", "QHI")},
    )


ATTRAKDIFF = _attrakdiff(
    "attrakdiff",
    {dim: tuple(range(1, 8)) for dim in ATTRAKDIFF_BASE_DIMENSIONS},
)

ATTRAKDIFF_ABRIDGED = _attrakdiff(
    "attrakdiff_abridged",
    {"QP": (2, 3, 5, 6), "QHS": (2, 5), "QHI": (3, 4), "ATT": (2, 5)},
)


QUESTIONNAIRES: Dict[str, Questionnaire] = {
    q.key: q for q in (SUS, DEEP, UMUX, UMUX_LITE, UEQ, UEQ_S, ATTRAKDIFF, ATTRAKDIFF_ABRIDGED)
}
