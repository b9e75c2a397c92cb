# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Reversible jobs executed by a seqrun Runner.

This module defines the `Job` class pairing a forward operation with its
compensation, the `JobSettings` dataclass used for explicit construction,
and the `JobState` enum describing a job's progress within a run.
"""

from .job import CompensateFn, ExecuteFn, Job, JobSettings, noop_compensate
from .states import JobState

__all__ = [
    "CompensateFn",
    "ExecuteFn",
    "Job",
    "JobSettings",
    "JobState",
    "noop_compensate",
]
