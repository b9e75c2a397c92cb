# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Plans of shell jobs.

This module loads YAML plans describing shell commands and their rollback
commands, turns them into `ShellJob`s queued in a `Runner`, and presents
the outcome of a run.
"""

from .plan import Plan, PlanStep
from .presenter import RunPresenter
from .shell import ShellJob

__all__ = [
    "Plan",
    "PlanStep",
    "RunPresenter",
    "ShellJob",
]
