# scorers.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .instruments import (
    ATTRAKDIFF,
    ATTRAKDIFF_ABRIDGED,
    ATTRAKDIFF_BASE_DIMENSIONS,
    DEEP,
    SUS,
    SUS_FAIL_GRADE,
    SUS_GRADES,
    SUS_MULTIPLIER,
    UEQ,
    UEQ_S,
    UMUX,
    UMUX_LITE,
)
from .models import Answers, Questionnaire, QuestionnaireResult, read_answer
from .stats import compute_stats_summary, mean, round_half_away


logger = logging.getLogger(__name__)


def sus_grade(score: float) -> str:
    for threshold, grade in SUS_GRADES:
        if score >= threshold:
            return grade
    return SUS_FAIL_GRADE


# -------------------------
# Strict instruments: every item is required
# -------------------------

def complete_items(q: Questionnaire, answers: Answers) -> Optional[List[float]]:
    # All normalized items, or None as soon as one is missing or out of range.
    values: List[float] = []
    for item in q.items:
        v = q.read(answers, item)
        if v is None:
            return None
        values.append(v)
    return values


def _strict_scores(
    q: Questionnaire,
    responses: Sequence[Answers],
    score: Callable[[List[float]], Dict[str, float]],
) -> Dict[str, List[float]]:
    per_dim: Dict[str, List[float]] = {}
    skipped = 0
    for answers in responses:
        values = complete_items(q, answers)
        if values is None:
            skipped += 1
            continue
        for dim, s in score(values).items():
            per_dim.setdefault(dim, []).append(s)
    if skipped:
        logger.debug("%s: skipped %d incomplete respondent(s)", q.key, skipped)
    return per_dim


def _single_score_result(q: Questionnaire, scores: List[float], grade: bool = False) -> Optional[QuestionnaireResult]:
    if not scores:
        return None
    n = len(scores)
    summary = compute_stats_summary(scores, n)
    return QuestionnaireResult(
        questionnaire=q.key,
        n=n,
        dimensions={"SCORE": summary},
        dimension_n={"SCORE": n},
        grade=sus_grade(summary.mean) if grade else None,
    )


def sus_score(values: Sequence[float]) -> float:
    # values are already reversal-corrected 0..4 contributions.
    return SUS_MULTIPLIER * sum(values)


def compute_sus_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    per_dim = _strict_scores(SUS, responses, lambda v: {"SCORE": sus_score(v)})
    return _single_score_result(SUS, per_dim.get("SCORE", []), grade=True)


def umux_score(values: Sequence[float]) -> float:
    return 100.0 * sum(values) / 24.0


def compute_umux_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    per_dim = _strict_scores(UMUX, responses, lambda v: {"SCORE": umux_score(v)})
    return _single_score_result(UMUX, per_dim.get("SCORE", []))


def umux_lite_scores(usefulness: float, usability: float) -> Dict[str, float]:
    return {
        "GLOBAL": 100.0 * (usefulness + usability) / 12.0,
        "USABILITY": 100.0 * usability / 6.0,
        "USEFULNESS": 100.0 * usefulness / 6.0,
    }


def compute_umux_lite_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    # Item order in the table is (Q1 usefulness, Q3 usability).
    per_dim = _strict_scores(UMUX_LITE, responses, lambda v: umux_lite_scores(v[0], v[1]))
    if not per_dim:
        return None
    n = len(per_dim["GLOBAL"])
    return QuestionnaireResult(
        questionnaire=UMUX_LITE.key,
        n=n,
        dimensions={dim: compute_stats_summary(per_dim[dim], n) for dim in ("GLOBAL", "USABILITY", "USEFULNESS")},
        dimension_n={dim: n for dim in ("GLOBAL", "USABILITY", "USEFULNESS")},
    )


# -------------------------
# Dimensional instruments: partial answers allowed
# -------------------------

def respondent_dimension_means(q: Questionnaire, answers: Answers) -> Dict[str, float]:
    """
    Per-respondent mean of the valid normalized items of each dimension.

    Dimensions (and composites) with no valid item are absent from the result.
    A composite is the mean of all valid items pooled from its base dimensions,
    not the mean of the base dimension means.
    """
    valid: Dict[str, List[float]] = {}
    for dim, items in q.dimensions.items():
        values = [v for v in (q.read(answers, item) for item in items) if v is not None]
        if values:
            valid[dim] = values

    means = {dim: mean(values) for dim, values in valid.items()}
    for composite, bases in q.composites.items():
        pooled = [v for base in bases for v in valid.get(base, [])]
        if pooled:
            means[composite] = mean(pooled)
    return means


def _dimensional_result(
    q: Questionnaire,
    responses: Sequence[Answers],
    overall_n: Callable[[int, Dict[str, int]], int],
) -> Optional[QuestionnaireResult]:
    names = list(q.dimensions) + list(q.composites)
    per_dim: Dict[str, List[float]] = {name: [] for name in names}
    contributing = 0

    for answers in responses:
        means = respondent_dimension_means(q, answers)
        if not means:
            continue
        contributing += 1
        for dim, m in means.items():
            per_dim[dim].append(m)

    dimension_n = {name: len(per_dim[name]) for name in names}
    n = overall_n(contributing, dimension_n)
    logger.debug(
        "%s: %d of %d respondent(s) contributed", q.key, contributing, len(responses),
    )
    if n == 0:
        return None

    return QuestionnaireResult(
        questionnaire=q.key,
        n=n,
        dimensions={name: compute_stats_summary(per_dim[name], dimension_n[name]) for name in names},
        dimension_n=dimension_n,
    )


def _any_contribution(contributing: int, dimension_n: Dict[str, int]) -> int:
    return contributing


def _max_base_dimension(contributing: int, dimension_n: Dict[str, int]) -> int:
    return max(dimension_n[dim] for dim in ATTRAKDIFF_BASE_DIMENSIONS)


def compute_ueq_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    return _dimensional_result(UEQ, responses, _any_contribution)


def compute_ueq_s_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    return _dimensional_result(UEQ_S, responses, _any_contribution)


def compute_deep_stats(responses: Sequence[Answers]) -> Optional[QuestionnaireResult]:
    return _dimensional_result(DEEP, responses, _any_contribution)


def attrakdiff_questionnaire(abridged: bool = False) -> Questionnaire:
    return ATTRAKDIFF_ABRIDGED if abridged else ATTRAKDIFF


def compute_attrakdiff_stats(responses: Sequence[Answers], abridged: bool = False) -> Optional[QuestionnaireResult]:
    return _dimensional_result(attrakdiff_questionnaire(abridged), responses, _max_base_dimension)


def compute_word_pair_averages(responses: Sequence[Answers], abridged: bool = False) -> Dict[str, float]:
    """
    Mean raw answer per AttrakDiff word pair, for positioning on the pair chart.

    Raw values are used as given (no reversal): the chart shows where
    respondents sat between the two printed words. Each pair is averaged over
    the respondents who gave it a valid answer; pairs nobody answered are 0.
    """
    q = attrakdiff_questionnaire(abridged)
    out: Dict[str, float] = {}
    for item_id in q.item_ids:
        raw = [read_answer(answers, item_id) for answers in responses]
        values = [v for v in raw if v is not None and q.scale.contains(v)]
        out[item_id] = round_half_away(mean(values))
    return out
