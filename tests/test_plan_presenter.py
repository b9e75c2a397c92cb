# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from io import StringIO
from unittest.mock import Mock

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from seqrun_lib.core.config import CFG
from seqrun_lib.job import Job, JobState
from seqrun_lib.plan.presenter import RunPresenter
from seqrun_lib.runner import Runner


def _runner_after_failure():
    runner = Runner(
        [
            Job(execute=lambda context: "first result", compensate=Mock(), name="first"),
            Job(execute=Mock(side_effect=RuntimeError("E")), compensate=Mock(), name="second"),
            Job(execute=lambda context: None, compensate=Mock(), name="third"),
        ]
    )
    return runner, runner.run()


def test_run_presenter_format_state_uses_state_color():
    text = RunPresenter._formatState(JobState.FAILED)

    assert isinstance(text, Text)
    assert text.plain == "failed"
    assert text.style == CFG.state_colors.failed


def test_run_presenter_format_result_truncates(monkeypatch):
    monkeypatch.setattr(CFG.presenter, "max_result_length", 5)

    text = RunPresenter._formatResult("long result")

    assert text.plain == "long…"


def test_run_presenter_format_result_none_is_empty():
    assert RunPresenter._formatResult(None).plain == ""


def test_run_presenter_jobs_table_rows():
    runner, result = _runner_after_failure()

    table = RunPresenter(runner, result)._createJobsTable()

    assert isinstance(table, Table)
    assert table.row_count == 3
    assert [column.header for column in table.columns] == ["#", "Job", "State", "Result"]

    states = [cell.plain for cell in table.columns[2]._cells]
    results = [cell.plain for cell in table.columns[3]._cells]
    assert states == ["compensated", "failed", "skipped"]
    assert results == ["first result", "", ""]


def test_run_presenter_summary_panel_title():
    runner, result = _runner_after_failure()

    panel = RunPresenter(runner, result).createSummaryPanel()

    assert isinstance(panel, Panel)
    assert panel.title.plain == "RUN FAILED"


def test_run_presenter_title_without_result():
    runner = Runner([Job(name="only")])

    assert RunPresenter(runner)._title() == "PLAN"


def test_run_presenter_title_success():
    runner = Runner([Job(execute=lambda context: 1, compensate=Mock())])

    assert RunPresenter(runner, runner.run())._title() == "RUN SUCCEEDED"


def test_run_presenter_print_summary_writes_to_console():
    runner, result = _runner_after_failure()
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=120)

    RunPresenter(runner, result).printSummary(console)

    output = buf.getvalue()
    assert "RUN FAILED" in output
    assert "first result" in output
    assert "second" in output
    assert "skipped" in output
