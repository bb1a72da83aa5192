"""Workflow orchestration: dedup gate, runs, statistics and scheduling."""

from .dedup import DedupGate
from .scheduler import SchedulerState, WorkflowScheduler, seconds_until
from .stats import compute_stats
from .workflow import WorkflowOrchestrator, contributing_sources

__all__ = [
    "DedupGate",
    "SchedulerState",
    "WorkflowOrchestrator",
    "WorkflowScheduler",
    "compute_stats",
    "contributing_sources",
    "seconds_until",
]
