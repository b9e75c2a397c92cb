# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from seqrun_lib.core.config import CFG
from seqrun_lib.core.error import JobFailedError
from seqrun_lib.core.logger import get_logger
from seqrun_lib.job import Job

logger = get_logger(__name__)


class ShellJob(Job):
    """
    Job running a shell command forward and another shell command as its rollback.

    The result of the job is the stripped standard output of its command.
    The result of the previously committed job is exported to the command
    in the `SEQRUN_PREVIOUS` environment variable.

    Attributes:
        command (str): Command executed in the forward phase.
        rollback_command (str | None): Command reversing `command`.
        index (int): Position of the job in its plan.
        cwd (Path | None): Working directory of the commands.
        timeout (float | None): Timeout of a single command in seconds.
    """

    def __init__(
        self,
        command: str,
        rollback_command: str | None = None,
        *,
        name: str | None = None,
        index: int = 0,
        cwd: Path | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the shell job.

        A job without a `rollback_command` has no compensation configured;
        call `disableRollback` if the command needs no reversal.
        """
        super().__init__(
            execute=self._runForward,
            compensate=self._runRollback if rollback_command is not None else None,
            name=name or command,
        )
        self.command = command
        self.rollback_command = rollback_command
        self.index = index
        self.cwd = cwd
        self.timeout = timeout if timeout is not None else CFG.shell.timeout

    def _runForward(self, context: Sequence[Any]) -> str:
        env = self._environment()
        if context:
            env[CFG.env_vars.previous_result] = str(context[-1])
        return self._runCommand(self.command, env)

    def _runRollback(self) -> None:
        # only reachable if a rollback command was provided
        assert self.rollback_command is not None
        self._runCommand(self.rollback_command, self._environment())

    def _environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env[CFG.env_vars.job_index] = str(self.index)
        return env

    def _runCommand(self, command: str, env: dict[str, str]) -> str:
        """
        Run a command using the configured shell interpreter.

        Args:
            command (str): The command to run.
            env (dict[str, str]): Environment of the command.

        Returns:
            str: Standard output of the command without surrounding whitespace.

        Raises:
            JobFailedError: If the command cannot be started, times out
                or exits with a non-zero exit code.
        """
        logger.debug(f"Job '{self.name}': running '{command}'.")
        try:
            completed = subprocess.run(
                [CFG.shell.interpreter, "-c", command],
                capture_output=True,
                text=True,
                cwd=self.cwd,
                env=env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise JobFailedError(
                f"Command '{command}' of job '{self.name}' timed out after {self.timeout} seconds."
            ) from e
        except OSError as e:
            raise JobFailedError(
                f"Could not run command '{command}' of job '{self.name}': {e}."
            ) from e

        if completed.returncode != 0:
            raise JobFailedError(
                f"Command '{command}' of job '{self.name}' exited with code {completed.returncode}: {completed.stderr.strip()}"
            )

        return completed.stdout.strip()
