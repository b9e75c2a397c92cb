# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Saga-style sequential execution of reversible jobs.

This package provides the `Job` abstraction pairing a forward operation with
its compensation, the `Runner` executing queued jobs strictly in order and
compensating committed jobs in reverse order on failure, and a command-line
interface running YAML plans of shell jobs.
"""

from .core.error import (
    JobFailedError,
    JobNotConfiguredError,
    PlanError,
    RunnerStateError,
    SeqRunError,
)
from .job import Job, JobSettings, JobState, noop_compensate
from .runner import Runner, RunnerSettings, RunResult
from .seqrun import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "Job",
    "JobFailedError",
    "JobNotConfiguredError",
    "JobSettings",
    "JobState",
    "PlanError",
    "RunResult",
    "Runner",
    "RunnerSettings",
    "RunnerStateError",
    "SeqRunError",
    "noop_compensate",
]
