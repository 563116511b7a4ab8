import pytest

from eiim.collectors import price_statistics
from eiim.collectors.analysis import classify_trend, regression_slope


def test_needs_two_points():
    assert price_statistics("eu_ets", []) is None
    assert price_statistics("eu_ets", [85.0]) is None


def test_basic_statistics():
    stats = price_statistics("eu_ets", [10.0, 12.0, 14.0], period_days=7)
    assert stats.data_points == 3
    assert stats.average == 12.0
    assert stats.minimum == 10.0
    assert stats.maximum == 14.0
    # population standard deviation of 10, 12, 14
    assert stats.volatility == pytest.approx(1.63, abs=0.01)
    assert stats.slope == pytest.approx(2.0)
    assert stats.trend == "increasing"
    assert stats.change_percent == 40.0
    assert stats.period_days == 7


def test_decreasing_trend():
    stats = price_statistics("rggi", [14.0, 13.0, 12.0])
    assert stats.trend == "decreasing"


def test_flat_series_is_stable():
    stats = price_statistics("rggi", [13.45, 13.45, 13.45, 13.45])
    assert stats.trend == "stable"
    assert stats.volatility == 0.0
    assert stats.change_percent == 0.0


def test_regression_slope_matches_least_squares():
    assert regression_slope([1.0, 3.0, 2.0, 4.0]) == pytest.approx(0.8)


@pytest.mark.parametrize("slope,expected", [(0.02, "increasing"), (-0.02, "decreasing"), (0.01, "stable"), (-0.005, "stable")])
def test_trend_thresholds(slope, expected):
    assert classify_trend(slope) == expected
