# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout seqrun.

`SeqRunError` is the common base. Configuration errors (a job used without
an implementation) and runner misuse are kept apart from ordinary job
failures so that diagnostics can tell a programming mistake from a failed
operation. Each exception carries an exit code used by the seqrun command.
"""

from .config import CFG


class SeqRunError(Exception):
    """Common exception type for all seqrun errors."""

    exit_code = CFG.exit_codes.default


class JobNotConfiguredError(SeqRunError):
    """Raised when `execute` or `compensate` of a job has no implementation."""

    pass


class RunnerStateError(SeqRunError):
    """Raised when a runner is modified or started while it is already running."""

    pass


class JobFailedError(SeqRunError):
    """Raised by a job whose underlying operation reported a failure."""

    exit_code = CFG.exit_codes.job_failed


class PlanError(SeqRunError):
    """Raised when a plan file cannot be loaded or is invalid."""

    pass
