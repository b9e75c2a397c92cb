# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand
from rich.console import Console

from seqrun_lib.core.config import CFG
from seqrun_lib.core.error import JobNotConfiguredError, SeqRunError
from seqrun_lib.core.logger import get_logger

from .plan import Plan
from .presenter import RunPresenter

logger = get_logger(__name__)
console = Console()


@click.command(
    short_help="Run a plan of shell jobs.",
    help=f"""Run the jobs of a plan one by one and roll them back if any of them fails.

{click.style("PLAN_FILE", fg="green")}   YAML file listing the jobs to run.

Each job defines an `exec` command and a `rollback` command. When a job fails,
`{CFG.binary_name} run` executes the rollback commands of all previously completed
jobs in reverse order and exits with code {CFG.exit_codes.job_failed}.
Use `rollback: false` for jobs which need no rollback.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "plan_file",
    type=str,
    metavar=click.style("PLAN_FILE", fg="green"),
)
@click.option(
    "-q", "--quiet", is_flag=True, help="Do not print the summary of the run."
)
def run(plan_file: str, quiet: bool = False) -> NoReturn:
    """
    Run all jobs of the specified plan, rolling back on failure.

    Exits:
        0 if all jobs were executed, `job_failed` exit code if a job failed
        and the plan was rolled back, the default exit code for seqrun errors
        and the `unexpected_error` exit code for anything else.
    """
    try:
        plan = Plan.fromFile(Path(plan_file))
        runner = plan.toRunner(on_rollback_error=log_rollback_error)
        result = runner.run()

        if not quiet:
            RunPresenter(runner, result).printSummary(console)

        if result.succeeded:
            logger.info(f"Executed all {len(plan)} job(s) of the plan.")
            sys.exit(0)

        logger.error(f"The plan was rolled back: {result.error}")
        sys.exit(CFG.exit_codes.job_failed)
    except SeqRunError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


@click.command(
    short_help="Validate a plan without running it.",
    help=f"""Load the plan, check that every job has a rollback configured and print its jobs.

{click.style("PLAN_FILE", fg="green")}   YAML file listing the jobs to run.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "plan_file",
    type=str,
    metavar=click.style("PLAN_FILE", fg="green"),
)
def check(plan_file: str) -> NoReturn:
    """
    Validate the specified plan and print its jobs.
    """
    try:
        plan = Plan.fromFile(Path(plan_file))
        runner = plan.toRunner()
        RunPresenter(runner).printSummary(console)

        if unconfigured := [job.name for job in runner.queue if not job.isConfigured()]:
            raise JobNotConfiguredError(
                f"Jobs without a rollback: {', '.join(repr(x) for x in unconfigured)}. Use 'rollback: false' if a job needs no rollback."
            )

        logger.info(f"The plan '{plan_file}' is valid.")
        sys.exit(0)
    except SeqRunError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def log_rollback_error(error: Exception) -> None:
    """
    Log every error encountered while rolling back a plan.

    Args:
        error (Exception): Error of a compensation, or an ExceptionGroup
            of errors of several compensations.
    """
    errors = error.exceptions if isinstance(error, ExceptionGroup) else [error]
    for e in errors:
        logger.error(f"Rollback error: {e}")
