# report.py
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from uxscore.app.errors import UnknownQuestionnaire

from .instruments import QUESTIONNAIRES
from .models import Answers, QuestionnaireResult
from .scorers import (
    compute_attrakdiff_stats,
    compute_deep_stats,
    compute_sus_stats,
    compute_ueq_s_stats,
    compute_ueq_stats,
    compute_umux_lite_stats,
    compute_umux_stats,
    compute_word_pair_averages,
)


# Checked in order: the first needle found in the normalized label wins.
_LABEL_RULES = (
    (("sus",), "sus"),
    (("deep",), "deep"),
    (("umuxlite",), "umux_lite"),
    (("umux",), "umux"),
    (("ueqs", "ueqshort", "userexperiencequestionnaireshort"), "ueq_s"),
    (("ueq", "userexperiencequestionnaire"), "ueq"),
    (("abrege", "abrige", "abridged"), "attrakdiff_abridged"),
    (("attrakdiff",), "attrakdiff"),
)


def _normalize_label(label: str) -> str:
    # Lower-case, strip accents, keep [a-z0-9] only.
    decomposed = unicodedata.normalize("NFD", label.lower())
    without_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "", without_accents)


def resolve_questionnaire_id(label: Optional[str]) -> Optional[str]:
    """
    Maps a free-text questionnaire type ("UEQ-S", "AttrakDiff (abrégé)", ...)
    to a questionnaire id, or None when nothing matches.
    """
    if not label:
        return None
    normalized = _normalize_label(label)
    for needles, qid in _LABEL_RULES:
        if any(needle in normalized for needle in needles):
            return qid
    return None


@dataclass(frozen=True)
class QuestionnaireReport:
    questionnaire: str
    result: Optional[QuestionnaireResult]
    word_pairs: Optional[Dict[str, float]] = None

    @property
    def has_data(self) -> bool:
        return self.result is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "questionnaire": self.questionnaire,
            "result": self.result.to_dict() if self.result is not None else None,
        }
        if self.word_pairs is not None:
            out["word_pairs"] = dict(self.word_pairs)
        return out


_SCORERS: Dict[str, Callable[[Sequence[Answers]], Optional[QuestionnaireResult]]] = {
    "sus": compute_sus_stats,
    "deep": compute_deep_stats,
    "umux": compute_umux_stats,
    "umux_lite": compute_umux_lite_stats,
    "ueq": compute_ueq_stats,
    "ueq_s": compute_ueq_s_stats,
    "attrakdiff": lambda responses: compute_attrakdiff_stats(responses, abridged=False),
    "attrakdiff_abridged": lambda responses: compute_attrakdiff_stats(responses, abridged=True),
}


def compute_questionnaire_stats(questionnaire_id: str, responses: Sequence[Answers]) -> QuestionnaireReport:
    scorer = _SCORERS.get(questionnaire_id)
    if scorer is None:
        raise UnknownQuestionnaire(f"Unsupported questionnaire: {questionnaire_id!r}")

    word_pairs = None
    if questionnaire_id in {"attrakdiff", "attrakdiff_abridged"}:
        word_pairs = compute_word_pair_averages(responses, abridged=questionnaire_id == "attrakdiff_abridged")

    return QuestionnaireReport(
        questionnaire=questionnaire_id,
        result=scorer(responses),
        word_pairs=word_pairs,
    )


RESULT_COLUMNS = [
    "dimension", "n", "mean", "sd",
    "ci90_low", "ci90_high", "ci95_low", "ci95_high", "ci99_low", "ci99_high",
]


def results_frame(result: Optional[QuestionnaireResult]) -> pd.DataFrame:
    # One row per dimension; an empty frame with the same columns for "no data".
    rows: List[Dict[str, Any]] = []
    if result is not None:
        for name, s in result.dimensions.items():
            rows.append(
                {
                    "dimension": name,
                    "n": result.dimension_n.get(name, 0),
                    "mean": s.mean,
                    "sd": s.sd,
                    "ci90_low": s.ci90[0],
                    "ci90_high": s.ci90[1],
                    "ci95_low": s.ci95[0],
                    "ci95_high": s.ci95[1],
                    "ci99_low": s.ci99[0],
                    "ci99_high": s.ci99[1],
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def supported_questionnaires() -> List[str]:
    return list(QUESTIONNAIRES)
