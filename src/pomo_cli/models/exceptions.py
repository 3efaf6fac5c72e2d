"""Custom exceptions for Pomo CLI."""

from pomo_cli.utils.exit_codes import (
    ERROR_INVALID_ARGS,
    ERROR_SPAWN,
    ERROR_STATE,
    NOT_RUNNING,
)


class PomoError(Exception):
    """Base exception for all Pomo errors, carrying the command exit code."""

    exit_code: int = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidDurationError(PomoError):
    """Raised when a session length is outside the accepted range."""

    exit_code = ERROR_INVALID_ARGS


class InvalidSetCountError(PomoError):
    """Raised when the number of work sets is outside the accepted range."""

    exit_code = ERROR_INVALID_ARGS


class CorruptStateError(PomoError):
    """Raised when the state file exists but cannot be parsed."""

    exit_code = ERROR_STATE


class StateIOError(PomoError):
    """Raised when the state file cannot be read, written or removed."""

    exit_code = ERROR_STATE


class StaleOwnerError(PomoError):
    """Raised when the recorded timer process is no longer alive."""

    exit_code = NOT_RUNNING

    def __init__(self, pid: int):
        super().__init__(f"timer process {pid} is no longer running")
        self.pid = pid


class SpawnFailureError(PomoError):
    """Raised when the background timer process cannot be started."""

    exit_code = ERROR_SPAWN
