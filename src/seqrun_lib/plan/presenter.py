# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from seqrun_lib.core.common import truncate
from seqrun_lib.core.config import CFG
from seqrun_lib.job import JobState
from seqrun_lib.runner import Runner, RunResult


class RunPresenter:
    """
    Presents the states and results of the jobs of a runner.
    """

    def __init__(self, runner: Runner, result: RunResult | None = None):
        """
        Initialize the presenter.

        Args:
            runner (Runner): Runner whose jobs are presented.
            result (RunResult | None): Outcome of the last run of the runner.
                If None, the jobs are presented as not yet run.
        """
        self._runner = runner
        self._result = result

    def createSummaryPanel(self) -> Panel:
        """
        Create a Rich panel summarizing the run.

        Returns:
            Panel: Panel containing the table of jobs.
        """
        return Panel(
            self._createJobsTable(),
            title=Text(self._title(), style=CFG.presenter.title_style),
            border_style=CFG.presenter.border_style,
            width=CFG.presenter.max_width,
            expand=False,
        )

    def printSummary(self, console: Console | None = None) -> None:
        """
        Print the summary panel.

        Args:
            console (Console | None): Console to print to. If None, a new Console is created.
        """
        console = console or Console()
        console.print(self.createSummaryPanel())

    def _title(self) -> str:
        if self._result is None:
            return "PLAN"
        return "RUN SUCCEEDED" if self._result.succeeded else "RUN FAILED"

    def _createJobsTable(self) -> Table:
        table = Table(box=None, header_style=CFG.presenter.headers_style)
        table.add_column("#", justify="right")
        table.add_column("Job")
        table.add_column("State")
        table.add_column("Result")

        results = self._result.results if self._result else []
        for i, (job, state) in enumerate(self._runner.states):
            result = results[i] if i < len(results) else None
            table.add_row(
                Text(str(i + 1), style=CFG.presenter.main_style),
                Text(job.name, style=CFG.presenter.main_style),
                RunPresenter._formatState(state),
                RunPresenter._formatResult(result),
            )

        return table

    @staticmethod
    def _formatState(state: JobState) -> Text:
        return Text(str(state), style=state.color)

    @staticmethod
    def _formatResult(result: object) -> Text:
        if result is None:
            return Text("")
        return Text(
            truncate(str(result), CFG.presenter.max_result_length),
            style=CFG.presenter.main_style,
        )
