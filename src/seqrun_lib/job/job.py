# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Reversible units of work.

A `Job` pairs a forward operation (`execute`) with a compensating operation
(`compensate`). Jobs are passive: they know nothing about their position in
a run or about other jobs. Operations that were never supplied raise
`JobNotConfiguredError`, which signals a programming mistake rather than a
failure of the operation itself.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Self

from seqrun_lib.core.error import JobNotConfiguredError
from seqrun_lib.core.logger import get_logger

logger = get_logger(__name__)

# forward operation; receives the results of all previously committed jobs
ExecuteFn = Callable[[Sequence[Any]], Any]
# compensating operation
CompensateFn = Callable[[], Any]


def noop_compensate() -> None:
    """Compensation that does nothing and always succeeds."""
    return None


@dataclass(frozen=True)
class JobSettings:
    """Operations and metadata used to construct a Job."""

    # Forward operation. If None, executing the job raises JobNotConfiguredError.
    execute: ExecuteFn | None = None
    # Compensating operation. If None, compensating the job raises JobNotConfiguredError.
    compensate: CompensateFn | None = None
    # Name used in logs and summaries.
    name: str | None = None


class Job:
    """
    A unit of forward work paired with its compensating action.

    Attributes:
        name (str): Human-readable name of the job.
    """

    def __init__(
        self,
        execute: ExecuteFn | None = None,
        compensate: CompensateFn | None = None,
        name: str | None = None,
    ):
        """
        Initialize the job.

        Args:
            execute (ExecuteFn | None): Forward operation called with the ordered
                sequence of results of the previously committed jobs.
            compensate (CompensateFn | None): Operation reversing the effect of `execute`.
            name (str | None): Name of the job. Defaults to the name of `execute`.
        """
        self._execute = execute
        self._compensate = compensate
        self.name = name or _nameOf(execute)

    @classmethod
    def fromSettings(cls, settings: JobSettings) -> Self:
        """
        Construct a job from a settings object.

        Args:
            settings (JobSettings): Operations and name of the job.

        Returns:
            Job: The constructed job.
        """
        return cls(
            execute=settings.execute,
            compensate=settings.compensate,
            name=settings.name,
        )

    def execute(self, context: Sequence[Any] = ()) -> Any:
        """
        Perform the forward operation.

        Args:
            context (Sequence[Any]): Results of previously committed jobs, in commit order.

        Returns:
            Any: The result of the operation.

        Raises:
            JobNotConfiguredError: If no forward operation was supplied.
        """
        if self._execute is None:
            raise JobNotConfiguredError(
                f"Job '{self.name}' has no execute operation configured."
            )
        return self._execute(context)

    def compensate(self) -> Any:
        """
        Reverse the effect of a previous successful `execute`.

        Raises:
            JobNotConfiguredError: If no compensating operation was supplied
                and rollback was not disabled.
        """
        if self._compensate is None:
            raise JobNotConfiguredError(
                f"Job '{self.name}' has no rollback operation configured."
            )
        return self._compensate()

    def disableRollback(self) -> Self:
        """
        Replace the compensating operation with a no-op.

        Meant for jobs whose forward action does not need to be reversed
        (e.g., pure reads) or cannot be reversed.

        Returns:
            Job: This job.
        """
        logger.debug(f"Disabling rollback of job '{self.name}'.")
        self._compensate = noop_compensate
        return self

    def hasExecute(self) -> bool:
        """Check whether a forward operation was supplied."""
        return self._execute is not None

    def hasCompensate(self) -> bool:
        """Check whether a compensating operation was supplied or rollback was disabled."""
        return self._compensate is not None

    def isRollbackDisabled(self) -> bool:
        """Check whether the compensating operation is the no-op."""
        return self._compensate is noop_compensate

    def isConfigured(self) -> bool:
        """
        Check whether both operations of the job are available.

        Returns:
            bool: True if the job can be both executed and compensated.
        """
        return self.hasExecute() and self.hasCompensate()

    def __repr__(self) -> str:
        return f"Job(name={self.name!r})"


def _nameOf(execute: ExecuteFn | None) -> str:
    # lambdas and other anonymous callables are named '<lambda>' etc.
    name = getattr(execute, "__name__", None)
    if not name or name.startswith("<"):
        return "job"
    return name
