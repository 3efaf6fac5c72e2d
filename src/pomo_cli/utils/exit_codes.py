"""
Exit codes for Pomo CLI.

Scripts (status bars, shell prompts) rely on these to tell a running timer
from an idle one without parsing output.
"""

# Success
SUCCESS = 0

# No timer is running (status / stop)
NOT_RUNNING = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# The background timer process could not be started
ERROR_SPAWN = 3

# The state file could not be read, written or removed
ERROR_STATE = 4


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        NOT_RUNNING: "NOT_RUNNING",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_SPAWN: "ERROR_SPAWN",
        ERROR_STATE: "ERROR_STATE",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def get_exit_code_description(code: int) -> str:
    """Get a human-readable description of an exit code."""
    descriptions = {
        SUCCESS: "Command executed successfully",
        NOT_RUNNING: "No timer is running",
        ERROR_INVALID_ARGS: "Invalid arguments or validation error",
        ERROR_SPAWN: "Failed to start the background timer process",
        ERROR_STATE: "Failed to access the timer state file",
    }
    return descriptions.get(code, "Unknown error")
