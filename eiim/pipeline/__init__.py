"""Scheduling, orchestration and brief assembly."""

from .briefs import BriefAssembler
from .orchestrator import JOB_NAMES, Orchestrator
from .scheduler import DailyTrigger, IntervalTrigger, Scheduler

__all__ = [
    "BriefAssembler",
    "DailyTrigger",
    "IntervalTrigger",
    "JOB_NAMES",
    "Orchestrator",
    "Scheduler",
]
