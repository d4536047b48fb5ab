# tests/test_stats.py
"""Tests for the statistical primitives and the summary builder."""

import math

import pytest
from scipy import stats as sps

from uxscore.scoring.models import StatsSummary
from uxscore.scoring.stats import (
    compute_stats_summary,
    confidence_interval,
    mean,
    normal_quantile,
    round_half_away,
    sample_std_dev,
    student_t_quantile,
)


def _width(interval):
    return interval[1] - interval[0]


class TestMeanAndStdDev:
    """Tests for mean and sample_std_dev."""

    def test_mean_of_empty_is_zero(self):
        assert mean([]) == 0.0

    def test_mean(self):
        assert mean([1, 2, 3, 4]) == pytest.approx(2.5)

    def test_std_dev_single_value_is_zero(self):
        assert sample_std_dev([7.0]) == 0.0
        assert sample_std_dev([]) == 0.0

    def test_std_dev_uses_bessel_correction(self):
        # Population SD of this set is 2.0; sample SD is sqrt(32 / 7).
        xs = [2, 4, 4, 4, 5, 5, 7, 9]
        assert sample_std_dev(xs) == pytest.approx(math.sqrt(32 / 7))


class TestStudentTQuantile:
    """Tests for the t / normal quantile approximation."""

    @pytest.mark.parametrize(
        "df, expected",
        [(1, 12.706), (5, 2.571), (10, 2.228), (30, 2.042), (60, 2.000), (120, 1.980)],
    )
    def test_matches_published_95_percent_table(self, df, expected):
        assert student_t_quantile(0.975, df) == pytest.approx(expected, abs=0.01)

    @pytest.mark.parametrize("p", [0.90, 0.95, 0.975, 0.995])
    @pytest.mark.parametrize("df", [1, 2, 3, 4, 5, 7, 10, 15, 20, 30, 45, 60, 90, 120, 200])
    def test_matches_scipy(self, p, df):
        assert student_t_quantile(p, df) == pytest.approx(sps.t.ppf(p, df), abs=0.01)

    def test_symmetric(self):
        assert student_t_quantile(0.025, 10) == pytest.approx(-student_t_quantile(0.975, 10))

    def test_median_is_zero(self):
        assert student_t_quantile(0.5, 8) == 0.0

    def test_large_df_is_normal(self):
        assert student_t_quantile(0.975, 1000) == normal_quantile(0.975)

    @pytest.mark.parametrize("p", [0.90, 0.95, 0.975, 0.995])
    def test_normal_quantile(self, p):
        assert normal_quantile(p) == pytest.approx(sps.norm.ppf(p), abs=1e-3)

    def test_heavier_tails_than_normal(self):
        assert student_t_quantile(0.975, 5) > student_t_quantile(0.975, 50) > normal_quantile(0.975)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.1, 1.5])
    def test_rejects_probability_outside_open_interval(self, p):
        with pytest.raises(ValueError):
            student_t_quantile(p, 10)


class TestConfidenceInterval:
    """Tests for confidence_interval."""

    def test_symmetric_around_mean(self):
        low, high = confidence_interval(10.0, 2.0, 4, 1.5)
        # se = 2 / sqrt(4) = 1
        assert (low, high) == pytest.approx((8.5, 11.5))


class TestRoundHalfAway:
    """Tests for the 2-decimal display rounding."""

    @pytest.mark.parametrize(
        "value, expected",
        [(2.675, 2.68), (-2.675, -2.68), (0.125, 0.13), (1.005, 1.01), (3.14159, 3.14), (-0.001, 0.0)],
    )
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_away(value) == expected

    def test_no_negative_zero(self):
        assert math.copysign(1.0, round_half_away(-0.001)) == 1.0


class TestComputeStatsSummary:
    """Tests for compute_stats_summary."""

    def test_empty_values(self):
        assert compute_stats_summary([], 5) == StatsSummary.zero()

    def test_zero_n(self):
        assert compute_stats_summary([1.0, 2.0], 0) == StatsSummary.zero()

    @pytest.mark.parametrize("n", [0, 1])
    def test_degenerate_sizes_have_no_spread(self, n):
        summary = compute_stats_summary([4.0], n)
        assert summary.sd == 0
        assert summary.ci90 == summary.ci95 == summary.ci99 == (summary.mean, summary.mean)

    def test_single_observation_is_point(self):
        summary = compute_stats_summary([3.456], 1)
        assert summary == StatsSummary.point(3.46)

    def test_small_sample_uses_student_t(self):
        # mean 2, sd 1, se 1/sqrt(3); df = 2 quantiles are 2.920, 4.303, 9.925.
        summary = compute_stats_summary([1.0, 2.0, 3.0], 3)
        assert summary.mean == 2.0
        assert summary.sd == 1.0
        assert summary.ci90 == (0.31, 3.69)
        assert summary.ci95 == (-0.48, 4.48)
        assert summary.ci99 == (-3.73, 7.73)

    def test_large_sample_uses_normal(self):
        values = [0.0, 10.0] * 40
        n = len(values)
        summary = compute_stats_summary(values, n)
        se = sample_std_dev(values) / math.sqrt(n)
        half = normal_quantile(0.975) * se
        assert summary.ci95 == (round_half_away(5.0 - half), round_half_away(5.0 + half))

    def test_sixty_respondents_still_use_student_t(self):
        values = [0.0, 10.0] * 30
        summary = compute_stats_summary(values, 60)
        se = sample_std_dev(values) / math.sqrt(60)
        half = student_t_quantile(0.995, 59) * se
        assert summary.ci99 == (round_half_away(5.0 - half), round_half_away(5.0 + half))

    @pytest.mark.parametrize(
        "values",
        [[1, 2], [1, 2, 3, 4, 5], [10, 20, 35, 40, 41, 60], [0.5, -1.5, 2.25] * 30],
    )
    def test_intervals_nested_by_level(self, values):
        summary = compute_stats_summary(values, len(values))
        assert summary.sd > 0
        assert _width(summary.ci90) <= _width(summary.ci95) <= _width(summary.ci99)
        assert summary.ci99[0] <= summary.ci95[0] <= summary.ci90[0] <= summary.mean
        assert summary.mean <= summary.ci90[1] <= summary.ci95[1] <= summary.ci99[1]

    def test_deterministic(self):
        values = [0.1, 0.7, 0.35, 0.9, 0.2]
        assert compute_stats_summary(values, 5) == compute_stats_summary(list(values), 5)
