"""Descriptive statistics over a price history."""

import math
from typing import Optional, Sequence

from pydantic import BaseModel, Field

TREND_THRESHOLD = 0.01


class PriceStatistics(BaseModel):
    """Summary of a market's recent prices."""

    market: str
    period_days: int = Field(..., description="Look-back window in days")
    data_points: int
    average: float
    minimum: float
    maximum: float
    volatility: float = Field(..., description="Population standard deviation")
    slope: float = Field(..., description="Least-squares slope per observation")
    trend: str = Field(..., description="increasing, decreasing or stable")
    change_percent: float = Field(..., description="(max - min) / min, in percent")


def regression_slope(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index."""
    n = len(values)
    sum_x = n * (n - 1) / 2
    sum_xx = (n - 1) * n * (2 * n - 1) / 6
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def classify_trend(slope: float, threshold: float = TREND_THRESHOLD) -> str:
    if slope > threshold:
        return "increasing"
    if slope < -threshold:
        return "decreasing"
    return "stable"


def price_statistics(market: str, prices: Sequence[float], period_days: int = 30) -> Optional[PriceStatistics]:
    """Statistics for prices ordered oldest first; None with fewer than two points."""
    if len(prices) < 2:
        return None

    n = len(prices)
    average = sum(prices) / n
    minimum = min(prices)
    maximum = max(prices)
    volatility = math.sqrt(sum((p - average) ** 2 for p in prices) / n)
    slope = regression_slope(prices)
    change = (maximum - minimum) / minimum * 100 if minimum else 0.0

    return PriceStatistics(
        market=market,
        period_days=period_days,
        data_points=n,
        average=round(average, 2),
        minimum=minimum,
        maximum=maximum,
        volatility=round(volatility, 2),
        slope=slope,
        trend=classify_trend(slope),
        change_percent=round(change, 2),
    )
