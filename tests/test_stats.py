"""시계열 통계 테스트"""

import math

import pytest

from conftest import build_series, linear_series, zigzag_series
from fum_ai.models import MS_PER_DAY
from fum_ai.stats import (
    calculate_average_annual_return,
    calculate_max_drawdown,
    calculate_volatility,
    has_history,
    summarize,
)


class TestHasHistory:
    """has_history 테스트"""

    @pytest.mark.parametrize("series", [None, [], [(0, 100.0)]])
    def test_insufficient(self, series):
        assert has_history(series) is False

    def test_two_points(self):
        assert has_history(build_series([100, 101])) is True


class TestVolatility:
    """calculate_volatility 테스트"""

    def test_constant_prices(self):
        assert calculate_volatility(build_series([100] * 30)) == 0.0

    def test_population_std_annualized(self):
        # 수익률 +10%, -10% → 모집단 표준편차 0.1
        series = build_series([100, 110, 99])
        assert calculate_volatility(series) == pytest.approx(0.1 * math.sqrt(365))

    def test_insufficient_data(self):
        assert calculate_volatility([(0, 100.0)]) == 0.0

    def test_zigzag_is_high(self):
        assert calculate_volatility(zigzag_series()) > 0.8


class TestMaxDrawdown:
    """calculate_max_drawdown 테스트"""

    def test_peak_to_trough(self):
        assert calculate_max_drawdown(build_series([100, 120, 60, 90])) == pytest.approx(0.5)

    def test_monotonic_increase(self):
        assert calculate_max_drawdown(build_series([100, 110, 120, 130])) == 0.0

    def test_range(self):
        drawdown = calculate_max_drawdown(zigzag_series())
        assert 0.0 <= drawdown <= 1.0

    def test_insufficient_data(self):
        assert calculate_max_drawdown(None) == 0.0


class TestAverageAnnualReturn:
    """calculate_average_annual_return 테스트"""

    def test_one_year(self):
        series = [(0, 100.0), (365 * MS_PER_DAY, 110.0)]
        assert calculate_average_annual_return(series) == pytest.approx(0.1)

    def test_annualized_from_short_window(self):
        series = [(0, 100.0), (73 * MS_PER_DAY, 110.0)]
        assert calculate_average_annual_return(series) == pytest.approx(0.5)

    def test_clamped_high(self):
        series = [(0, 100.0), (365 * MS_PER_DAY, 1000.0)]
        assert calculate_average_annual_return(series) == 2.0

    def test_clamped_low(self):
        series = [(0, 100.0), (365 * MS_PER_DAY, 10.0)]
        assert calculate_average_annual_return(series) == -0.5

    def test_zero_elapsed_time(self):
        assert calculate_average_annual_return([(5, 100.0), (5, 200.0)]) == 0.1

    def test_default_without_history(self):
        assert calculate_average_annual_return([]) == 0.1


class TestSummarize:
    """summarize 테스트"""

    def test_linear_growth(self):
        stats = summarize(linear_series(100, 110))

        assert stats.points == 366
        assert stats.average_annual_return == pytest.approx(0.1)
        assert stats.max_drawdown == 0.0
        assert stats.volatility < 0.4

    def test_empty(self):
        stats = summarize(None)

        assert stats.points == 0
        assert stats.volatility == 0.0
        assert stats.average_annual_return == 0.1


class TestNonPositivePrices:
    """0 이하 가격 포함 시계열 테스트"""

    def test_zero_first_price_is_skipped(self):
        series = build_series([0.0, 1.0, 2.0])

        # (1 → 2) 1일 경과, +100% → 상한 2.0
        assert calculate_average_annual_return(series) == 2.0

    def test_all_finite(self):
        series = build_series([100.0, 0.0, 110.0, -5.0, 99.0])
        stats = summarize(series)

        assert stats.points == 3
        assert math.isfinite(stats.volatility)
        assert math.isfinite(stats.max_drawdown)
        assert math.isfinite(stats.average_annual_return)
        assert stats.volatility == pytest.approx(calculate_volatility(build_series([100, 110, 99])))

    def test_single_valid_point_has_no_history(self):
        series = build_series([0.0] + [0.0] * 10 + [5.0])

        assert has_history(series) is False
        assert calculate_volatility(series) == 0.0
        assert calculate_max_drawdown(series) == 0.0
        assert calculate_average_annual_return(series) == 0.1
