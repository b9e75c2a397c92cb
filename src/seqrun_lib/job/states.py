# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from enum import Enum

from seqrun_lib.core.config import CFG


class JobState(Enum):
    """
    State of a queued job within a single run of a Runner.
    """

    PENDING = 1
    COMMITTED = 2
    FAILED = 3
    COMPENSATED = 4
    COMPENSATION_FAILED = 5
    SKIPPED = 6

    def __str__(self) -> str:
        """
        Return the lowercase, human-readable name of the state.

        Returns:
            str: The name of the state in lowercase with spaces.
        """
        return self.name.lower().replace("_", " ")

    @property
    def color(self) -> str:
        """Style used to display the state."""
        return getattr(CFG.state_colors, self.name.lower())
