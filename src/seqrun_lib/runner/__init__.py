# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Sequential saga-style runner.

The `Runner` executes queued jobs one at a time and, when a job fails,
compensates every committed job in reverse order before reporting the
original failure in a `RunResult`.
"""

from .runner import (
    RollbackErrorHook,
    RunCallback,
    Runner,
    RunnerSettings,
    RunResult,
    forward_rollback_error,
)

__all__ = [
    "RollbackErrorHook",
    "RunCallback",
    "RunResult",
    "Runner",
    "RunnerSettings",
    "forward_rollback_error",
]
