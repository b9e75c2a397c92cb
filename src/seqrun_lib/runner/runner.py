# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Sequential execution of reversible jobs with compensation on failure.

`Runner` executes its queued jobs strictly one at a time in enqueue order.
When a job fails, no further jobs are executed and every job that already
committed is compensated in reverse commit order. Errors raised while
compensating never replace the error that triggered the rollback: they are
handed to a replaceable hook, and the run reports the original failure.
"""

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Self

from seqrun_lib.core.error import (
    JobNotConfiguredError,
    RunnerStateError,
    SeqRunError,
)
from seqrun_lib.core.logger import get_logger
from seqrun_lib.job import Job, JobState

logger = get_logger(__name__)

# receives the error of the rollback phase
RollbackErrorHook = Callable[[Exception], Any]
# receives the forward-phase error (or None) and the collected results
RunCallback = Callable[[Exception | None, list[Any]], Any]


def forward_rollback_error(error: Exception) -> None:
    """
    Default rollback error hook.

    Passes the error through to the log and returns, so the run
    completes with the original error.
    """
    logger.warning(f"Rollback finished with errors: {error}")


@dataclass(frozen=True)
class RunnerSettings:
    """Settings used to construct a Runner."""

    # Called once with the error of a rollback phase that did not fully succeed.
    on_rollback_error: RollbackErrorHook = forward_rollback_error


@dataclass
class RunResult:
    """
    Outcome of a single run.

    Attributes:
        error (Exception | None): Error of the job that failed in the forward phase,
            or None if all jobs were executed.
        results (list[Any]): Results of the committed jobs, in commit order.
    """

    error: Exception | None = None
    results: list[Any] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True if every queued job was executed."""
        return self.error is None

    def raiseForError(self) -> None:
        """
        Re-raise the forward-phase error of a failed run.

        Raises:
            Exception: The error of the job that failed.
        """
        if self.error is not None:
            raise self.error


class Runner:
    """
    Executes queued jobs in order and rolls back committed jobs on failure.

    Attributes:
        queue (list[Job]): Jobs to execute, in execution order.
        committed (list[Job]): Jobs committed during the current (or last) run,
            in commit order.
        on_rollback_error (RollbackErrorHook): Hook receiving rollback-phase errors.
    """

    def __init__(
        self,
        jobs: Iterable[Job] | None = None,
        *,
        on_rollback_error: RollbackErrorHook | None = None,
    ):
        """
        Initialize the runner.

        Args:
            jobs (Iterable[Job] | None): Jobs to queue initially.
            on_rollback_error (RollbackErrorHook | None): Hook receiving rollback-phase
                errors. Defaults to `forward_rollback_error`.
        """
        self.queue: list[Job] = list(jobs) if jobs is not None else []
        self.committed: list[Job] = []
        self.on_rollback_error: RollbackErrorHook = (
            on_rollback_error or forward_rollback_error
        )

        self._committed_indices: list[int] = []
        self._states: list[JobState] = []
        self._running = False

    @classmethod
    def fromSettings(
        cls, settings: RunnerSettings, jobs: Iterable[Job] | None = None
    ) -> Self:
        """
        Construct a runner from a settings object.

        Args:
            settings (RunnerSettings): Settings of the runner.
            jobs (Iterable[Job] | None): Jobs to queue initially.

        Returns:
            Runner: The constructed runner.
        """
        return cls(jobs, on_rollback_error=settings.on_rollback_error)

    @property
    def states(self) -> list[tuple[Job, JobState]]:
        """
        States of the queued jobs in the current (or last) run.
        Jobs queued after the last run are reported as pending.
        """
        states = self._states + [JobState.PENDING] * (
            len(self.queue) - len(self._states)
        )
        return list(zip(self.queue, states))

    def isRunning(self) -> bool:
        """Check whether a run is in progress."""
        return self._running

    def enqueue(self, job: Job) -> Self:
        """
        Append a job to the tail of the queue.

        Args:
            job (Job): The job to append.

        Returns:
            Runner: This runner.

        Raises:
            RunnerStateError: If a run is in progress.
        """
        self._ensureNotRunning("enqueue a job")
        self.queue.append(job)
        return self

    def enqueueAll(self, jobs: Iterable[Job]) -> Self:
        """
        Append jobs to the tail of the queue, preserving their order.

        Args:
            jobs (Iterable[Job]): The jobs to append.

        Returns:
            Runner: This runner.

        Raises:
            RunnerStateError: If a run is in progress.
        """
        self._ensureNotRunning("enqueue jobs")
        self.queue.extend(jobs)
        return self

    def setErrorHook(self, hook: RollbackErrorHook) -> Self:
        """
        Replace the hook receiving rollback-phase errors.

        Args:
            hook (RollbackErrorHook): Callable receiving the rollback error.

        Returns:
            Runner: This runner.
        """
        self.on_rollback_error = hook
        return self

    def run(self, callback: RunCallback | None = None) -> RunResult:
        """
        Execute all queued jobs in order, rolling back on the first failure.

        Each job receives the results of the previously committed jobs. If a job
        raises, no further jobs are executed and every committed job is
        compensated in reverse commit order. The rollback continues past
        failing compensations; their error is passed once to the rollback
        error hook and never reported to the caller.

        Jobs returning awaitables must be run using `runAsync`.

        Args:
            callback (RunCallback | None): Optional callable invoked as
                `callback(error, results)` once the run completes.

        Returns:
            RunResult: The forward-phase error (or None) and the collected results.

        Raises:
            JobNotConfiguredError: If any queued job lacks an operation.
                No job is executed in that case.
            RunnerStateError: If a run is already in progress.
        """
        self._start()
        try:
            results: list[Any] = []
            error = None
            for index, job in enumerate(self.queue):
                logger.debug(self._describe(index, job, "Executing"))
                try:
                    result = _refuseAwaitable(job.execute(tuple(results)), job)
                except Exception as e:
                    error = self._markFailed(index, job, e)
                    break
                self._markCommitted(index, job, result, results)

            if error is not None and (rollback_error := self._rollback()):
                self._reportRollbackError(rollback_error)
        finally:
            self._running = False

        outcome = RunResult(error, results)
        if callback is not None:
            callback(outcome.error, list(outcome.results))
        return outcome

    async def runAsync(self, callback: RunCallback | None = None) -> RunResult:
        """
        Execute all queued jobs in order, awaiting asynchronous operations.

        Has the same semantics as `run`. Any awaitable returned by a job's
        operation, by the rollback error hook or by the callback is awaited
        before the runner proceeds, so operations never overlap.

        Args:
            callback (RunCallback | None): Optional callable invoked as
                `callback(error, results)` once the run completes.

        Returns:
            RunResult: The forward-phase error (or None) and the collected results.

        Raises:
            JobNotConfiguredError: If any queued job lacks an operation.
            RunnerStateError: If a run is already in progress.
        """
        self._start()
        try:
            results: list[Any] = []
            error = None
            for index, job in enumerate(self.queue):
                logger.debug(self._describe(index, job, "Executing"))
                try:
                    result = await _resolve(job.execute(tuple(results)))
                except Exception as e:
                    error = self._markFailed(index, job, e)
                    break
                self._markCommitted(index, job, result, results)

            if error is not None and (rollback_error := await self._rollbackAsync()):
                await self._reportRollbackErrorAsync(rollback_error)
        finally:
            self._running = False

        outcome = RunResult(error, results)
        if callback is not None:
            await _resolve(callback(outcome.error, list(outcome.results)))
        return outcome

    def _start(self) -> None:
        """
        Check that the runner can start a run and reset the run-scoped state.

        Raises:
            RunnerStateError: If a run is already in progress.
            JobNotConfiguredError: If any queued job lacks an operation.
        """
        self._ensureNotRunning("start a run")

        if unconfigured := [job.name for job in self.queue if not job.isConfigured()]:
            raise JobNotConfiguredError(
                f"Cannot run: jobs {', '.join(repr(x) for x in unconfigured)} are not fully configured."
            )

        self.committed = []
        self._committed_indices = []
        self._states = [JobState.PENDING] * len(self.queue)
        self._running = True
        logger.debug(f"Starting a run of {len(self.queue)} job(s).")

    def _rollback(self) -> Exception | None:
        """
        Compensate all committed jobs in reverse commit order.

        Returns:
            Exception | None: The combined error of the failed compensations, if any.
        """
        errors: list[Exception] = []
        for index, job in self._rollbackOrder():
            logger.debug(self._describe(index, job, "Compensating"))
            try:
                _refuseAwaitable(job.compensate(), job)
            except Exception as e:
                errors.append(self._markCompensationFailed(index, job, e))
            else:
                self._states[index] = JobState.COMPENSATED

        return _combineErrors(errors)

    async def _rollbackAsync(self) -> Exception | None:
        """Asynchronous counterpart of `_rollback`."""
        errors: list[Exception] = []
        for index, job in self._rollbackOrder():
            logger.debug(self._describe(index, job, "Compensating"))
            try:
                await _resolve(job.compensate())
            except Exception as e:
                errors.append(self._markCompensationFailed(index, job, e))
            else:
                self._states[index] = JobState.COMPENSATED

        return _combineErrors(errors)

    def _reportRollbackError(self, error: Exception) -> None:
        """Hand the rollback error to the hook. Errors of the hook itself are only logged."""
        try:
            result = self.on_rollback_error(error)
            if inspect.isawaitable(result):
                _discard(result)
                logger.warning(
                    "Rollback error hook returned an awaitable which was not awaited. Use 'runAsync' for asynchronous hooks."
                )
        except Exception as e:
            logger.error(f"Rollback error hook raised an exception: {e}", exc_info=True)

    async def _reportRollbackErrorAsync(self, error: Exception) -> None:
        """Asynchronous counterpart of `_reportRollbackError`."""
        try:
            await _resolve(self.on_rollback_error(error))
        except Exception as e:
            logger.error(f"Rollback error hook raised an exception: {e}", exc_info=True)

    def _rollbackOrder(self) -> list[tuple[int, Job]]:
        return list(reversed(list(zip(self._committed_indices, self.committed))))

    def _markCommitted(
        self, index: int, job: Job, result: Any, results: list[Any]
    ) -> None:
        results.append(result)
        self.committed.append(job)
        self._committed_indices.append(index)
        self._states[index] = JobState.COMMITTED

    def _markFailed(self, index: int, job: Job, error: Exception) -> Exception:
        self._states[index] = JobState.FAILED
        for skipped in range(index + 1, len(self.queue)):
            self._states[skipped] = JobState.SKIPPED

        logger.warning(
            f"Job '{job.name}' failed: {error}. Rolling back {len(self.committed)} committed job(s)."
        )
        return error

    def _markCompensationFailed(
        self, index: int, job: Job, error: Exception
    ) -> Exception:
        self._states[index] = JobState.COMPENSATION_FAILED
        logger.debug(f"Rollback of job '{job.name}' failed: {error}.")
        return error

    def _describe(self, index: int, job: Job, action: str) -> str:
        return f"{action} job '{job.name}' ({index + 1}/{len(self.queue)})."

    def _ensureNotRunning(self, action: str) -> None:
        if self._running:
            raise RunnerStateError(f"Cannot {action}: the runner is already running.")


def _combineErrors(errors: list[Exception]) -> Exception | None:
    """
    Merge the errors of a rollback phase into a single error.

    A single error is returned as is, several errors are wrapped
    in an ExceptionGroup in rollback order.
    """
    if not errors:
        return None
    if len(errors) == 1:
        return errors[0]
    return ExceptionGroup(f"{len(errors)} compensations failed during rollback", errors)


def _refuseAwaitable(value: Any, job: Job) -> Any:
    """
    Reject awaitables returned to the synchronous runner.

    Raises:
        SeqRunError: If `value` is awaitable.
    """
    if inspect.isawaitable(value):
        _discard(value)
        raise SeqRunError(
            f"Job '{job.name}' returned an awaitable. Use 'runAsync' to run asynchronous jobs."
        )
    return value


def _discard(awaitable: Any) -> None:
    # prevents 'coroutine was never awaited' warnings
    if inspect.iscoroutine(awaitable):
        awaitable.close()


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
