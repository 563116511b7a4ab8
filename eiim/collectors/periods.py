"""Reporting period boundaries for metric frequencies."""

from typing import Optional, Tuple

import pendulum


def reporting_period(
    frequency: str,
    now: Optional[pendulum.DateTime] = None,
    tz: str = "UTC",
) -> Tuple[pendulum.DateTime, pendulum.DateTime]:
    """
    Half-open [start, end) period containing now, in the given timezone.

    daily: midnight to next midnight; monthly: 1st to 1st of next month;
    quarterly: quarter start plus three months; annual: Jan 1 to next Jan 1.
    """
    now = (now or pendulum.now(tz)).in_timezone(tz)

    if frequency == "daily":
        start = now.start_of("day")
        return start, start.add(days=1)
    if frequency == "monthly":
        start = now.start_of("month")
        return start, start.add(months=1)
    if frequency == "quarterly":
        start = now.first_of("quarter").start_of("day")
        return start, start.add(months=3)
    if frequency == "annual":
        start = now.start_of("year")
        return start, start.add(years=1)

    raise ValueError(f"Unknown frequency: {frequency}")
