"""Detached background process launcher with a readiness handshake."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field

from pomo_cli.models.exceptions import SpawnFailureError
from pomo_cli.utils.logger import get_logger
from pomo_cli.utils.process import terminate

DAEMON_COMMAND = "__run"


@dataclass
class DaemonHandle:
    """A freshly spawned daemon still blocked on its readiness pipe.

    The daemon reads from the pipe until end-of-file, which happens once the
    parent closes its write end in :meth:`release`.
    """

    pid: int
    read_fd: int
    write_fd: int
    _released: bool = field(default=False, repr=False)

    def release(self) -> None:
        """Let the daemon proceed."""
        if self._released:
            return
        self._released = True
        for fd in (self.read_fd, self.write_fd):
            try:
                os.close(fd)
            except OSError:
                get_logger().debug("ready pipe fd %d already closed", fd)

    def abort(self) -> None:
        """Kill the daemon before it ever observes the state store."""
        terminate(self.pid)
        self.release()


def daemon_args(ready_fd: int) -> list[str]:
    """Command line for the hidden daemon entry point."""
    return [
        sys.executable,
        "-m",
        "pomo_cli",
        DAEMON_COMMAND,
        "--ready-fd",
        str(ready_fd),
    ]


def spawn_daemon() -> DaemonHandle:
    """Start the timer daemon detached from the terminal session.

    Raises:
        SpawnFailureError: the process could not be created
    """
    read_fd, write_fd = os.pipe()
    args = daemon_args(read_fd)

    try:
        process = subprocess.Popen(
            args,
            start_new_session=True,  # Detach from parent session
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            pass_fds=(read_fd,),
        )
    except OSError as e:
        os.close(read_fd)
        os.close(write_fd)
        raise SpawnFailureError(f"failed to spawn background process: {e}") from e

    get_logger().debug("spawned daemon pid=%d", process.pid)
    # Process continues independently - no wait needed
    return DaemonHandle(pid=process.pid, read_fd=read_fd, write_fd=write_fd)


def wait_until_ready(fd: int) -> None:
    """Block until the spawning command closes its end of the ready pipe."""
    try:
        os.read(fd, 1)
    except OSError as e:
        get_logger().warning("ready pipe fd %d unusable: %s", fd, e)
    finally:
        try:
            os.close(fd)
        except OSError:
            get_logger().debug("ready pipe fd %d already closed", fd)
