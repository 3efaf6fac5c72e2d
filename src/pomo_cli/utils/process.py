"""Process liveness checks and termination by pid."""

from __future__ import annotations

import os
import signal


def pid_alive(pid: int) -> bool:
    """Check whether a process with *pid* exists.

    A process owned by another user still counts as alive.
    """
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def terminate(pid: int) -> bool:
    """Send SIGTERM to *pid*. Returns False if the process was already gone."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        return False
    return True
