# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from click.testing import CliRunner

import seqrun_lib
from seqrun_lib.seqrun import __version__, cli


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_cli_without_command_prints_help():
    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0
    assert "run" in result.output
    assert "check" in result.output


def test_cli_short_help_option():
    result = CliRunner().invoke(cli, ["-h"])

    assert result.exit_code == 0
    assert "Usage" in result.output


def test_package_exports():
    assert seqrun_lib.__version__ == __version__
    assert seqrun_lib.cli is cli
    for name in seqrun_lib.__all__:
        assert hasattr(seqrun_lib, name)
