# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest
import yaml

from seqrun_lib.core.common import load_yaml_loader, truncate
from seqrun_lib.core.error import (
    JobFailedError,
    JobNotConfiguredError,
    PlanError,
    RunnerStateError,
    SeqRunError,
)
from seqrun_lib.core.config import CFG


def test_load_yaml_loader_returns_safe_loader():
    loader = load_yaml_loader()

    assert issubclass(loader, yaml.SafeLoader) or loader.__name__ == "CSafeLoader"
    assert yaml.load("a: 1", Loader=loader) == {"a": 1}


def test_load_yaml_loader_is_cached():
    assert load_yaml_loader() is load_yaml_loader()


def test_load_yaml_loader_refuses_python_objects():
    with pytest.raises(yaml.YAMLError):
        yaml.load("!!python/object/apply:os.system ['true']", Loader=load_yaml_loader())


@pytest.mark.parametrize(
    "text, max_length, expected",
    [
        ("short", 10, "short"),
        ("exactly10!", 10, "exactly10!"),
        ("this is too long", 8, "this is…"),
        ("multi\nline\toutput", 40, "multi line output"),
        ("abc", 0, "…"),
    ],
)
def test_truncate(text, max_length, expected):
    assert truncate(text, max_length) == expected


def test_errors_share_base_and_exit_codes():
    for error in (JobNotConfiguredError, RunnerStateError, PlanError, JobFailedError):
        assert issubclass(error, SeqRunError)

    assert SeqRunError.exit_code == CFG.exit_codes.default
    assert JobFailedError.exit_code == CFG.exit_codes.job_failed
