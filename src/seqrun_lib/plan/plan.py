# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Plans of shell jobs loaded from YAML files.

A plan file lists the jobs to run in order:

    jobs:
      - name: create directory
        exec: mkdir build
        rollback: rmdir build
      - name: list directory
        exec: ls build
        rollback: false
        timeout: 10

`exec` is mandatory. `rollback` is either a command, `false` (the job needs
no rollback) or missing (the job has no rollback configured and the plan
refuses to run). Optional `cwd` is resolved relative to the plan file and
`timeout` limits each command of the job in seconds.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import yaml

from seqrun_lib.core.common import load_yaml_loader
from seqrun_lib.core.error import PlanError
from seqrun_lib.core.logger import get_logger
from seqrun_lib.runner import RollbackErrorHook, Runner

from .shell import ShellJob

logger = get_logger(__name__)


@dataclass
class PlanStep:
    """A single job of a plan."""

    # Name of the job.
    name: str
    # Command executed in the forward phase.
    command: str
    # Command reversing `command`. False disables rollback, None leaves it unconfigured.
    rollback: str | bool | None = None
    # Working directory of the commands.
    cwd: Path | None = None
    # Timeout of each command in seconds.
    timeout: float | None = None

    def toJob(self, index: int) -> ShellJob:
        """
        Build the shell job described by this step.

        Args:
            index (int): Position of the job in the plan.

        Returns:
            ShellJob: The job.
        """
        job = ShellJob(
            self.command,
            self.rollback if isinstance(self.rollback, str) else None,
            name=self.name,
            index=index,
            cwd=self.cwd,
            timeout=self.timeout,
        )
        if self.rollback is False:
            job.disableRollback()
        return job


class Plan:
    """
    Ordered list of shell jobs.

    Attributes:
        steps (list[PlanStep]): Steps of the plan in execution order.
        source (Path | None): File the plan was loaded from.
    """

    def __init__(self, steps: list[PlanStep], source: Path | None = None):
        self.steps = steps
        self.source = source

    @classmethod
    def fromFile(cls, file: Path) -> Self:
        """
        Load a plan from a YAML file.

        Args:
            file (Path): Path to the plan file.

        Returns:
            Plan: The loaded plan.

        Raises:
            PlanError: If the file does not exist, cannot be read or parsed,
                or is not a valid plan.
        """
        logger.debug(f"Loading plan from '{file}'.")
        if not file.is_file():
            raise PlanError(f"Plan file '{file}' does not exist.")

        try:
            with file.open("r", encoding="utf-8") as input:
                data = yaml.load(input, Loader=load_yaml_loader())
        except (OSError, UnicodeDecodeError) as e:
            raise PlanError(f"Could not read the plan file '{file}': {e}.") from e
        except yaml.YAMLError as e:
            raise PlanError(f"Could not parse the plan file '{file}': {e}.") from e

        try:
            return cls.fromDict(data, base_dir=file.resolve().parent, source=file)
        except PlanError as e:
            raise PlanError(f"Invalid plan file '{file}': {e}") from e

    @classmethod
    def fromDict(
        cls,
        data: Any,
        base_dir: Path | None = None,
        source: Path | None = None,
    ) -> Self:
        """
        Construct a plan from parsed YAML data.

        Args:
            data (Any): Parsed content of a plan file.
            base_dir (Path | None): Directory against which relative `cwd` values are resolved.
            source (Path | None): File the data was read from.

        Returns:
            Plan: The constructed plan.

        Raises:
            PlanError: If the data do not describe a valid plan.
        """
        if not isinstance(data, dict) or "jobs" not in data:
            raise PlanError("a plan must be a mapping with a 'jobs' list.")

        jobs = data["jobs"]
        if not isinstance(jobs, list) or not jobs:
            raise PlanError("'jobs' must be a non-empty list.")

        return cls(
            [_parseStep(i, raw, base_dir) for i, raw in enumerate(jobs)], source
        )

    def toJobs(self) -> list[ShellJob]:
        """Build the jobs of the plan in execution order."""
        return [step.toJob(i) for i, step in enumerate(self.steps)]

    def toRunner(self, on_rollback_error: RollbackErrorHook | None = None) -> Runner:
        """
        Build a runner with all jobs of the plan queued.

        Args:
            on_rollback_error (RollbackErrorHook | None): Hook receiving rollback errors.

        Returns:
            Runner: The runner.
        """
        return Runner(self.toJobs(), on_rollback_error=on_rollback_error)

    def __len__(self) -> int:
        return len(self.steps)


def _parseStep(index: int, raw: Any, base_dir: Path | None) -> PlanStep:
    """
    Validate and convert a single entry of the 'jobs' list.

    Raises:
        PlanError: If the entry is invalid.
    """
    where = f"job #{index + 1}"
    if not isinstance(raw, dict):
        raise PlanError(f"{where} must be a mapping.")

    command = raw.get("exec")
    if not isinstance(command, str) or not command.strip():
        raise PlanError(f"{where} must define a non-empty 'exec' command.")

    rollback = raw.get("rollback")
    if rollback is True or not isinstance(rollback, str | bool | None):
        raise PlanError(f"'rollback' of {where} must be a command or 'false'.")

    name = raw.get("name", f"job {index + 1}")
    if not isinstance(name, str):
        raise PlanError(f"'name' of {where} must be a string.")

    cwd = None
    if (raw_cwd := raw.get("cwd")) is not None:
        if not isinstance(raw_cwd, str):
            raise PlanError(f"'cwd' of {where} must be a path.")
        cwd = Path(raw_cwd)
        if base_dir is not None and not cwd.is_absolute():
            cwd = base_dir / cwd

    timeout = raw.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool)
        or not isinstance(timeout, int | float)
        or timeout <= 0
    ):
        raise PlanError(f"'timeout' of {where} must be a positive number of seconds.")

    return PlanStep(name, command, rollback, cwd, timeout)
