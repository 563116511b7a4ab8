import pendulum
import pytest

from eiim.collectors import reporting_period


NOW = pendulum.datetime(2024, 5, 17, 15, 30, tz="UTC")


def test_daily_period():
    start, end = reporting_period("daily", NOW)
    assert start == pendulum.datetime(2024, 5, 17, tz="UTC")
    assert end == pendulum.datetime(2024, 5, 18, tz="UTC")


def test_monthly_period():
    start, end = reporting_period("monthly", NOW)
    assert start == pendulum.datetime(2024, 5, 1, tz="UTC")
    assert end == pendulum.datetime(2024, 6, 1, tz="UTC")


def test_monthly_period_december_rolls_year():
    start, end = reporting_period("monthly", pendulum.datetime(2024, 12, 31, 23, 59, tz="UTC"))
    assert start == pendulum.datetime(2024, 12, 1, tz="UTC")
    assert end == pendulum.datetime(2025, 1, 1, tz="UTC")


@pytest.mark.parametrize(
    "month,quarter_start,quarter_end",
    [
        (1, (2024, 1, 1), (2024, 4, 1)),
        (5, (2024, 4, 1), (2024, 7, 1)),
        (9, (2024, 7, 1), (2024, 10, 1)),
        (12, (2024, 10, 1), (2025, 1, 1)),
    ],
)
def test_quarterly_period(month, quarter_start, quarter_end):
    start, end = reporting_period("quarterly", pendulum.datetime(2024, month, 15, 12, tz="UTC"))
    assert start == pendulum.datetime(*quarter_start, tz="UTC")
    assert end == pendulum.datetime(*quarter_end, tz="UTC")


def test_annual_period():
    start, end = reporting_period("annual", NOW)
    assert start == pendulum.datetime(2024, 1, 1, tz="UTC")
    assert end == pendulum.datetime(2025, 1, 1, tz="UTC")


def test_period_uses_configured_timezone():
    # 23:30 UTC on the 17th is already the 18th in Tokyo.
    late = pendulum.datetime(2024, 5, 17, 23, 30, tz="UTC")
    start, end = reporting_period("daily", late, tz="Asia/Tokyo")
    assert start == pendulum.datetime(2024, 5, 18, tz="Asia/Tokyo")
    assert end == pendulum.datetime(2024, 5, 19, tz="Asia/Tokyo")


def test_same_period_for_two_times_in_it():
    morning = reporting_period("monthly", pendulum.datetime(2024, 5, 2, 8, tz="UTC"))
    evening = reporting_period("monthly", pendulum.datetime(2024, 5, 30, 20, tz="UTC"))
    assert morning == evening


def test_unknown_frequency():
    with pytest.raises(ValueError):
        reporting_period("weekly", NOW)
