# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for seqrun.

This module defines dataclasses representing the configurable aspects of seqrun:
environment variables, shell execution of plan jobs, presentation settings,
date formats and exit codes.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by seqrun."""

    # Enables seqrun debug mode.
    debug_mode: str = "SEQRUN_DEBUG"
    # Explicit path to the seqrun config file.
    config: str = "SEQRUN_CONFIG"
    # Result of the previously committed job, exported to shell jobs.
    previous_result: str = "SEQRUN_PREVIOUS"
    # Zero-based position of the shell job in the plan.
    job_index: str = "SEQRUN_JOB_INDEX"


@dataclass
class ShellSettings:
    """Settings for running shell jobs of a plan."""

    # Interpreter used to run `exec` and `rollback` commands.
    interpreter: str = "bash"
    # Default timeout (in seconds) of a single command. None means no timeout.
    timeout: float | None = None


@dataclass
class PresenterSettings:
    """Settings for RunPresenter."""

    # Maximal width of the summary panel.
    max_width: int | None = None
    # Style of the border lines.
    border_style: str = "white"
    # Style of the title.
    title_style: str = "white bold"
    # Style used for table headers.
    headers_style: str = "default"
    # Style used for table values.
    main_style: str = "white"
    # Maximum displayed length of a job result before truncation.
    max_result_length: int = 40


@dataclass
class StateColors:
    """Color scheme for JobState display."""

    pending: str = "grey70"
    committed: str = "bright_green"
    failed: str = "bright_red"
    compensated: str = "bright_yellow"
    compensation_failed: str = "bright_magenta"
    skipped: str = "grey50"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by seqrun.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Returned when a job of the plan failed and the plan was rolled back.
    job_failed: int = 1
    # Default error code for seqrun errors (invalid plan, unconfigured job).
    default: int = 91
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for seqrun."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    shell: ShellSettings = field(default_factory=ShellSettings)
    presenter: PresenterSettings = field(default_factory=PresenterSettings)
    state_colors: StateColors = field(default_factory=StateColors)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the seqrun binary.
    binary_name: str = "seqrun"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path (Path | None): Explicit path to config file.
                If None, searches standard locations.

        Returns:
            Config: Instance with loaded or default values.

        Raises:
            ValueError: If the config file exists but cannot be read or parsed.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read seqrun config '{config_path}': {e}.")

        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            Path(env_path)
            if (env_path := os.getenv(EnvironmentVariables.config))
            else None,
            Path.cwd() / "seqrun_config.toml",
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "seqrun"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Unknown keys are ignored, missing keys keep their defaults.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        if field_info.name not in data:
            continue

        value = data[field_info.name]
        if is_dataclass(field_info.type) and isinstance(value, dict):
            field_values[field_info.name] = _dict_to_dataclass(field_info.type, value)
        else:
            field_values[field_info.name] = value

    return cls(**field_values)


# Global configuration for seqrun.
CFG = Config.load()
