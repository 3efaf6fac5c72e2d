"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from the real data, config and log
directories, plus fakes for the process table and the clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from pomo_cli.models.timer.state import Mode, TimerState, TimerStateStore, local_now
from pomo_cli.utils.background import DaemonHandle


# ---------------------------------------------------------------------------
# Directory isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point state, config and logs at *tmp_path* for every test."""
    import pomo_cli.utils.logger as logger_mod
    from pomo_cli.services.config_service import get_config_service

    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr(logger_mod, "_logger", None)
    logging.getLogger("pomo_cli").handlers.clear()
    get_config_service.cache_clear()

    with patch("pomo_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        with patch(
            "pomo_cli.services.config_service.user_config_dir",
            return_value=str(tmp_path / "config"),
        ):
            yield tmp_path

    get_config_service.cache_clear()
    for handler in logging.getLogger("pomo_cli").handlers:
        handler.close()
    logging.getLogger("pomo_cli").handlers.clear()


# ---------------------------------------------------------------------------
# State helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def store(tmp_path) -> TimerStateStore:
    """A store in its own temporary directory."""
    return TimerStateStore(tmp_path / "state")


def make_state(
    process_id: int = 4242,
    mode: Mode = Mode.WORK,
    minutes: int = 25,
    set_index: int = 1,
    set_total: int = 1,
    work_minutes: int = 25,
    break_minutes: int = 5,
    now: datetime | None = None,
) -> TimerState:
    now = now or local_now()
    return TimerState(
        process_id=process_id,
        mode=mode,
        started_at=now,
        deadline=now + timedelta(minutes=minutes),
        minutes=minutes,
        set_index=set_index,
        set_total=set_total,
        work_minutes=work_minutes,
        break_minutes=break_minutes,
    )


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """A clock that only moves when something sleeps on it."""

    def __init__(self, start: datetime | None = None):
        self.current = start or local_now()
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)


class FakeProcesses:
    """Stands in for the OS process table and the daemon spawner."""

    def __init__(self, first_pid: int = 4242):
        self.next_pid = first_pid
        self.alive: set[int] = set()
        self.killed: list[int] = []
        self.handles: list[MagicMock] = []

    def spawn(self) -> MagicMock:
        pid = self.next_pid
        self.next_pid += 1
        self.alive.add(pid)
        handle = MagicMock(spec=DaemonHandle)
        handle.pid = pid
        self.handles.append(handle)
        return handle

    def is_alive(self, pid: int) -> bool:
        return pid in self.alive

    def kill(self, pid: int) -> bool:
        self.killed.append(pid)
        if pid in self.alive:
            self.alive.discard(pid)
            return True
        return False


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def processes() -> FakeProcesses:
    return FakeProcesses()


@pytest.fixture()
def timer_service(tmp_path, processes, clock):
    """A TimerService wired to fake processes and a fixed clock."""
    from pomo_cli.services.timer_service import TimerService

    return TimerService(
        TimerStateStore(tmp_path / "data" / "pomo-cli"),
        TimerStateStore(tmp_path / "data" / "pomo"),
        spawner=processes.spawn,
        is_alive=processes.is_alive,
        kill=processes.kill,
        now=clock.now,
    )


@pytest.fixture()
def state_factory():
    """Build TimerState records with sensible defaults."""
    return make_state
