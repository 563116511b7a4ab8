"""Wall-clock job triggers."""

import logging
from typing import Callable, Dict, List, Optional

import pendulum

logger = logging.getLogger(__name__)


class IntervalTrigger:
    """Fires every N minutes, aligned to midnight (60 → every hour at :00)."""

    def __init__(self, minutes: int) -> None:
        if minutes < 1:
            raise ValueError("Interval must be at least one minute")
        self.minutes = minutes

    def next_after(self, now: pendulum.DateTime) -> pendulum.DateTime:
        midnight = now.start_of("day")
        elapsed = int((now - midnight).total_seconds() // 60)
        slots = elapsed // self.minutes + 1
        return midnight.add(minutes=slots * self.minutes)

    def __repr__(self) -> str:
        return f"every {self.minutes} min"


class DailyTrigger:
    """Fires once a day at hour:minute."""

    def __init__(self, hour: int, minute: int = 0) -> None:
        self.hour = hour
        self.minute = minute

    def next_after(self, now: pendulum.DateTime) -> pendulum.DateTime:
        candidate = now.start_of("day").add(hours=self.hour, minutes=self.minute)
        if candidate <= now:
            candidate = candidate.add(days=1)
        return candidate

    def __repr__(self) -> str:
        return f"daily at {self.hour:02d}:{self.minute:02d}"


class ScheduledJob:
    """A named job with its trigger and next fire time."""

    def __init__(self, name: str, trigger, next_run: pendulum.DateTime) -> None:
        self.name = name
        self.trigger = trigger
        self.next_run = next_run


class Scheduler:
    """
    Tracks when each job is next due.

    due() returns every job whose fire time has passed and moves it to its
    next fire time after now, so a late wake-up fires a job once, not once
    per missed slot.
    """

    def __init__(self, tz: str = "UTC", clock: Optional[Callable[[], pendulum.DateTime]] = None) -> None:
        self.tz = tz
        self.clock = clock or (lambda: pendulum.now(tz))
        self.jobs: Dict[str, ScheduledJob] = {}

    def add_job(self, name: str, trigger) -> ScheduledJob:
        now = self.clock().in_timezone(self.tz)
        job = ScheduledJob(name, trigger, trigger.next_after(now))
        self.jobs[name] = job
        logger.info("Scheduled %s %r, next run %s", name, trigger, job.next_run.to_datetime_string())
        return job

    def due(self, now: Optional[pendulum.DateTime] = None) -> List[ScheduledJob]:
        now = (now or self.clock()).in_timezone(self.tz)
        ready = []
        for job in self.jobs.values():
            if job.next_run <= now:
                ready.append(job)
                job.next_run = job.trigger.next_after(now)
        return ready

    def seconds_until_next(self, now: Optional[pendulum.DateTime] = None) -> Optional[float]:
        if not self.jobs:
            return None
        now = (now or self.clock()).in_timezone(self.tz)
        soonest = min(job.next_run for job in self.jobs.values())
        return max(0.0, (soonest - now).total_seconds())
