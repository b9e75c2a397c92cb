# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from seqrun_lib.core.error import PlanError
from seqrun_lib.plan import Plan, PlanStep, ShellJob
from seqrun_lib.runner import Runner, forward_rollback_error

VALID_PLAN = """
jobs:
  - name: create directory
    exec: mkdir build
    rollback: rmdir build
  - exec: ls build
    rollback: false
    timeout: 10
  - name: compile
    exec: make
    rollback: make clean
    cwd: build
"""


@pytest.fixture
def plan_file(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_text(VALID_PLAN)
    return file


def test_plan_from_file_parses_steps(plan_file):
    plan = Plan.fromFile(plan_file)

    assert len(plan) == 3
    assert plan.source == plan_file
    assert plan.steps[0] == PlanStep("create directory", "mkdir build", "rmdir build")
    assert plan.steps[1].name == "job 2"
    assert plan.steps[1].rollback is False
    assert plan.steps[1].timeout == 10
    assert plan.steps[2].cwd == plan_file.resolve().parent / "build"


def test_plan_from_file_missing_file(tmp_path):
    with pytest.raises(PlanError, match="does not exist"):
        Plan.fromFile(tmp_path / "missing.yaml")


def test_plan_from_file_invalid_yaml(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_text("jobs: [a, b\n")

    with pytest.raises(PlanError, match="Could not parse the plan file"):
        Plan.fromFile(file)


def test_plan_from_file_invalid_utf8(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_bytes(b"jobs:\n  - exec: echo \xff\xfe\n    rollback: false\n")

    with pytest.raises(PlanError, match="Could not read the plan file"):
        Plan.fromFile(file)


def test_plan_from_file_unreadable_file(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_text(VALID_PLAN)

    with (
        patch.object(Path, "open", side_effect=PermissionError("denied")),
        pytest.raises(PlanError, match="Could not read the plan file.*denied"),
    ):
        Plan.fromFile(file)


def test_plan_from_file_reads_utf8(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_bytes("jobs:\n  - name: café\n    exec: 'true'\n".encode("utf-8"))

    assert Plan.fromFile(file).steps[0].name == "café"


def test_plan_from_file_invalid_plan_mentions_file(tmp_path):
    file = tmp_path / "plan.yaml"
    file.write_text("jobs: []\n")

    with pytest.raises(PlanError, match=r"Invalid plan file .*non-empty list"):
        Plan.fromFile(file)


@pytest.mark.parametrize(
    "data, message",
    [
        (None, "mapping with a 'jobs' list"),
        ([], "mapping with a 'jobs' list"),
        ({"steps": []}, "mapping with a 'jobs' list"),
        ({"jobs": {}}, "non-empty list"),
        ({"jobs": ["echo"]}, "job #1 must be a mapping"),
        ({"jobs": [{"rollback": "true"}]}, "'exec' command"),
        ({"jobs": [{"exec": "  "}]}, "'exec' command"),
        ({"jobs": [{"exec": "true", "rollback": True}]}, "'rollback' of job #1"),
        ({"jobs": [{"exec": "true", "rollback": 5}]}, "'rollback' of job #1"),
        ({"jobs": [{"exec": "true", "name": 1}]}, "'name' of job #1"),
        ({"jobs": [{"exec": "true", "cwd": 1}]}, "'cwd' of job #1"),
        ({"jobs": [{"exec": "true", "timeout": 0}]}, "'timeout' of job #1"),
        ({"jobs": [{"exec": "true", "timeout": "1"}]}, "'timeout' of job #1"),
        ({"jobs": [{"exec": "true", "timeout": True}]}, "'timeout' of job #1"),
        (
            {"jobs": [{"exec": "true"}, {"exec": 3}]},
            "job #2 must define",
        ),
    ],
)
def test_plan_from_dict_rejects_invalid_data(data, message):
    with pytest.raises(PlanError, match=message):
        Plan.fromDict(data)


def test_plan_from_dict_keeps_relative_cwd_without_base_dir():
    plan = Plan.fromDict({"jobs": [{"exec": "true", "cwd": "sub"}]})

    assert plan.steps[0].cwd == Path("sub")


def test_plan_from_dict_keeps_absolute_cwd(tmp_path):
    plan = Plan.fromDict(
        {"jobs": [{"exec": "true", "cwd": str(tmp_path)}]}, base_dir=Path("/base")
    )

    assert plan.steps[0].cwd == tmp_path


def test_plan_step_to_job_with_rollback_command():
    job = PlanStep("n", "mkdir a", "rmdir a", timeout=3).toJob(4)

    assert isinstance(job, ShellJob)
    assert job.name == "n"
    assert job.rollback_command == "rmdir a"
    assert job.index == 4
    assert job.timeout == 3
    assert job.isConfigured()
    assert not job.isRollbackDisabled()


def test_plan_step_to_job_with_disabled_rollback():
    job = PlanStep("n", "ls", False).toJob(0)

    assert job.rollback_command is None
    assert job.isRollbackDisabled()
    assert job.isConfigured()


def test_plan_step_to_job_without_rollback_is_not_configured():
    job = PlanStep("n", "ls").toJob(0)

    assert not job.isConfigured()


def test_plan_to_jobs_preserves_order(plan_file):
    jobs = Plan.fromFile(plan_file).toJobs()

    assert [job.name for job in jobs] == ["create directory", "job 2", "compile"]
    assert [job.index for job in jobs] == [0, 1, 2]


def test_plan_to_runner(plan_file):
    hook = Mock()

    runner = Plan.fromFile(plan_file).toRunner(on_rollback_error=hook)

    assert isinstance(runner, Runner)
    assert len(runner.queue) == 3
    assert runner.on_rollback_error is hook


def test_plan_to_runner_default_hook(plan_file):
    runner = Plan.fromFile(plan_file).toRunner()

    assert runner.on_rollback_error is forward_rollback_error
