# src/uxscore/scoring/stats.py
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Tuple

from .models import StatsSummary


# Confidence levels reported for every dimension.
CONFIDENCE_LEVELS: Tuple[float, float, float] = (0.90, 0.95, 0.99)

# Above this sample size the normal quantile replaces Student-t.
NORMAL_APPROXIMATION_MIN_N = 60

# Degrees of freedom at which the t correction is dropped.
NORMAL_DF = 1000

DECIMALS = 2

# Abramowitz & Stegun 26.2.23 coefficients.
_C0, _C1, _C2 = 2.515517, 0.802853, 0.010328
_D1, _D2, _D3 = 1.432788, 0.189269, 0.001308


def round_half_away(value: float, decimals: int = DECIMALS) -> float:
    # Decimal(str(x)) keeps the shortest repr, so 2.675 rounds to 2.68.
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    # "+ 0.0" folds -0.0 into 0.0.
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)) + 0.0


def mean(xs: Sequence[float]) -> float:
    # 0 for an empty input; callers guard before treating it as meaningful.
    if not xs:
        return 0.0
    return math.fsum(xs) / len(xs)


def sample_std_dev(xs: Sequence[float], m: Optional[float] = None) -> float:
    if len(xs) <= 1:
        return 0.0
    avg = mean(xs) if m is None else m
    variance = math.fsum((x - avg) ** 2 for x in xs) / (len(xs) - 1)
    return math.sqrt(variance)


def _normal_upper_tail(a: float) -> float:
    # Positive z such that P(Z > z) = a, for 0 < a <= 0.5.
    t = math.sqrt(math.log(1.0 / (a * a)))
    num = _C0 + _C1 * t + _C2 * t * t
    den = 1.0 + _D1 * t + _D2 * t * t + _D3 * t * t * t
    return t - num / den


def student_t_quantile(p: float, df: float) -> float:
    """
    Quantile of Student's t distribution with `df` degrees of freedom.

    The standard-normal quantile comes from the Abramowitz & Stegun rational
    approximation (26.2.23). It is then corrected toward the heavier t tails
    with Hill's expansion (ACM Algorithm 396), which is exact for df = 1 and
    df = 2. From `NORMAL_DF` degrees of freedom on, the normal value is used
    unchanged.

    Args:
        p: Cumulative probability, 0 < p < 1 (0.975 gives the two-sided 95% value).
        df: Degrees of freedom, > 0.

    Returns:
        float: t such that P(T <= t) = p. Negative for p < 0.5.
    """
    if not 0.0 < p < 1.0:
        raise ValueError(f"p must be in (0, 1), got {p}")
    if df <= 0:
        raise ValueError(f"df must be positive, got {df}")
    if p == 0.5:
        return 0.0

    sign = 1.0 if p > 0.5 else -1.0
    tail = 1.0 - p if p > 0.5 else p

    if df >= NORMAL_DF:
        return sign * _normal_upper_tail(tail)

    # Two-sided tail probability.
    two_tail = 2.0 * tail

    if abs(df - 2.0) < 1e-9:
        return sign * math.sqrt(2.0 / (two_tail * (2.0 - two_tail)) - 2.0)
    if abs(df - 1.0) < 1e-9:
        return sign / math.tan(two_tail * math.pi / 2.0)

    a = 1.0 / (df - 0.5)
    b = 48.0 / (a * a)
    c = ((20700.0 * a / b - 98.0) * a - 16.0) * a + 96.36
    d = ((94.5 / (b + c) - 3.0) / b + 1.0) * math.sqrt(a * math.pi / 2.0) * df
    y = (d * two_tail) ** (2.0 / df)

    if (df < 2.1 and two_tail > 0.5) or y > 0.05 + a:
        # Asymptotic expansion about the normal quantile.
        x = -_normal_upper_tail(two_tail / 2.0)
        y = x * x
        if df < 5:
            c += 0.3 * (df - 4.5) * (x + 0.6)
        c = (((0.05 * d * x - 5.0) * x - 7.0) * x - 2.0) * x + b + c
        y = (((((0.4 * y + 6.3) * y + 36.0) * y + 94.5) / c - y - 3.0) / b + 1.0) * x
        y = math.expm1(a * y * y)
    else:
        y = (
            (1.0 / (((df + 6.0) / (df * y) - 0.089 * d - 0.822) * (df + 2.0) * 3.0) + 0.5 / (df + 4.0)) * y - 1.0
        ) * (df + 1.0) / (df + 2.0) + 1.0 / y

    return sign * math.sqrt(df * y)


def normal_quantile(p: float) -> float:
    return student_t_quantile(p, 10000)


def confidence_interval(m: float, sd: float, n: int, quantile: float) -> Tuple[float, float]:
    # Infinite population: no finite-population correction.
    se = sd / math.sqrt(n)
    half_width = quantile * se
    return (m - half_width, m + half_width)


def _two_sided(level: float) -> float:
    return 1.0 - (1.0 - level) / 2.0


def compute_stats_summary(values: Sequence[float], n: int) -> StatsSummary:
    """
    Mean, sample SD and 90/95/99% confidence intervals for one dimension.

    Args:
        values: Already-normalized observations (one per respondent for
            per-respondent aggregated instruments).
        n: Effective sample size (respondents contributing to the dimension).

    Returns:
        StatsSummary rounded half away from zero at 2 decimals.
    """
    if not values or n == 0:
        return StatsSummary.zero()

    m = mean(values)
    if n <= 1 or len(values) <= 1:
        return StatsSummary.point(round_half_away(m))

    s = sample_std_dev(values, m)

    if n > NORMAL_APPROXIMATION_MIN_N:
        quantiles = [normal_quantile(_two_sided(level)) for level in CONFIDENCE_LEVELS]
    else:
        quantiles = [student_t_quantile(_two_sided(level), n - 1) for level in CONFIDENCE_LEVELS]

    ci90, ci95, ci99 = (
        tuple(round_half_away(bound) for bound in confidence_interval(m, s, n, q))
        for q in quantiles
    )

    return StatsSummary(
        mean=round_half_away(m),
        sd=round_half_away(s),
        ci90=ci90,
        ci95=ci95,
        ci99=ci99,
    )
