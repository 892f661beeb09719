"""Application errors and exit codes."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes (fixed contract).

    - 0: Success (including an operator-cancelled pattern run)
    - 1: Blocked (user action required, or the operator chose to stop)
    - 2: Execution failure (invalid settings/config / runtime failure)
    - 130: Interrupted (Ctrl+C)
    """

    SUCCESS = 0
    BLOCKED = 1
    EXEC_FAILURE = 2
    INTERRUPTED = 130


class SetupError(Exception):
    """Base application error."""


class BlockedError(SetupError):
    """Action is blocked until a prerequisite is satisfied."""


class AbortedError(BlockedError):
    """The operator declined to continue."""


class ExecFailureError(SetupError):
    """Execution failed due to invalid input or runtime failure."""
