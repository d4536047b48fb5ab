# metrics.py
from __future__ import annotations

from typing import Any, Dict, Optional

from uxscore.app.errors import UnknownQuestionnaire

from .instruments import DEEP, DEEP_NOT_APPLICABLE, QUESTIONNAIRES, SUS, UMUX, UMUX_LITE
from .models import Answers, read_answer
from .scorers import (
    complete_items,
    respondent_dimension_means,
    sus_grade,
    sus_score,
    umux_lite_scores,
    umux_score,
)
from .stats import round_half_away


MetricValue = Optional[Any]


def _rounded(value: Optional[float]) -> Optional[float]:
    return None if value is None else round_half_away(value)


def respondent_metrics(questionnaire_id: str, answers: Optional[Answers]) -> Dict[str, MetricValue]:
    """
    Scores of a single respondent, as listed next to each response.

    Returns an empty dict for a missing answer record. Scores that cannot be
    computed from this record are None (strict instruments) or absent
    (dimensions with no valid item).
    """
    q = QUESTIONNAIRES.get(questionnaire_id)
    if q is None:
        raise UnknownQuestionnaire(f"Unsupported questionnaire: {questionnaire_id!r}")
    if answers is None:
        return {}

    if q is SUS:
        values = complete_items(SUS, answers)
        score = sus_score(values) if values is not None else None
        return {
            "score": _rounded(score),
            "grade": sus_grade(score) if score is not None else None,
        }

    if q is UMUX:
        values = complete_items(UMUX, answers)
        return {"score": _rounded(umux_score(values)) if values is not None else None}

    if q is UMUX_LITE:
        values = complete_items(UMUX_LITE, answers)
        scores = umux_lite_scores(values[0], values[1]) if values is not None else {}
        return {
            "global": _rounded(scores.get("GLOBAL")),
            "usability": _rounded(scores.get("USABILITY")),
            "usefulness": _rounded(scores.get("USEFULNESS")),
        }

    metrics: Dict[str, MetricValue] = {
        dim: round_half_away(m) for dim, m in respondent_dimension_means(q, answers).items()
    }
    if q is DEEP:
        metrics["na_count"] = sum(
            1 for item_id in DEEP.item_ids if read_answer(answers, item_id) == DEEP_NOT_APPLICABLE
        )
    return metrics
