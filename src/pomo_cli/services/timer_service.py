"""Foreground timer operations: start, status and stop.

Each call is a short-lived process that reads the state record, signals the
daemon that owns it when needed, and returns. A record whose pid is dead is
reconciled silently: it is treated as "not running" and removed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pomo_cli.models.exceptions import CorruptStateError, StaleOwnerError
from pomo_cli.models.timer.scheduler import build_plan, first_state
from pomo_cli.models.timer.state import Mode, TimerState, TimerStateStore, local_now
from pomo_cli.utils.background import DaemonHandle, spawn_daemon
from pomo_cli.utils.logger import get_logger
from pomo_cli.utils.process import pid_alive, terminate
from pomo_cli.utils.ui.formatters import format_duration, format_local_time


@dataclass
class TimerStatus:
    """A live timer as reported by ``status``."""

    state: TimerState
    remaining_seconds: int

    def to_dict(self) -> dict:
        """Flatten for display, in the order ``status`` prints it."""
        return {
            "mode": str(self.state.mode),
            "pid": self.state.process_id,
            "set": f"{self.state.set_index}/{self.state.set_total}",
            "started_at": format_local_time(self.state.started_at),
            "ends_at": format_local_time(self.state.deadline),
            "remaining": format_duration(self.remaining_seconds),
        }


class TimerService:
    """Starts, inspects and stops the background timer."""

    def __init__(
        self,
        store: TimerStateStore | None = None,
        legacy_store: TimerStateStore | None = None,
        *,
        spawner: Callable[[], DaemonHandle] = spawn_daemon,
        is_alive: Callable[[int], bool] = pid_alive,
        kill: Callable[[int], bool] = terminate,
        now: Callable[[], datetime] = local_now,
    ):
        self.store = store or TimerStateStore()
        self.legacy_store = legacy_store or TimerStateStore.legacy()
        self._spawn = spawner
        self._is_alive = is_alive
        self._kill = kill
        self._now = now

    @property
    def stores(self) -> tuple[TimerStateStore, TimerStateStore]:
        """Current location first, then the legacy one."""
        return (self.store, self.legacy_store)

    def load(self, store: TimerStateStore) -> TimerState | None:
        """Load a record, discarding it if it is corrupt."""
        try:
            return store.load()
        except CorruptStateError as e:
            get_logger().warning("discarding unreadable timer state: %s", e)
            store.clear()
            return None

    def require_owner(self, store: TimerStateStore) -> TimerState | None:
        """Load a record whose owner is alive.

        Raises:
            StaleOwnerError: a record exists but its process is gone
        """
        state = self.load(store)
        if state is not None and not self._is_alive(state.process_id):
            raise StaleOwnerError(state.process_id)
        return state

    def _stop_owner(self, store: TimerStateStore) -> bool:
        """Terminate the owner of *store*'s record, then clear the record.

        The daemon may already have advanced or cleared the record since it
        was loaded; the clear afterwards is then redundant and harmless.
        """
        logger = get_logger()
        try:
            state = self.require_owner(store)
        except StaleOwnerError as e:
            logger.info("clearing stale timer state: %s", e)
            store.clear()
            return False

        if state is None:
            return False

        if not self._kill(state.process_id):
            logger.info("timer process %d exited before it was signalled", state.process_id)
        store.clear()
        logger.info("stopped timer process %d", state.process_id)
        return True

    def start(
        self,
        mode: Mode,
        minutes: int,
        sets: int = 1,
        break_minutes: int = 5,
        work_minutes: int = 25,
    ) -> TimerState:
        """Replace any running timer with a new one.

        The plan is validated before anything is touched. The daemon is spawned
        before the record is written because the record names its pid; the
        daemon waits on its ready pipe until the record exists, and is killed
        if the write fails.
        """
        if mode is Mode.WORK:
            work_minutes = minutes
        else:
            break_minutes = minutes
            sets = 1
        plan = build_plan(mode, minutes, sets, break_minutes)

        for store in self.stores:
            self._stop_owner(store)

        handle = self._spawn()
        try:
            state = first_state(
                plan,
                process_id=handle.pid,
                now=self._now(),
                work_minutes=work_minutes,
                break_minutes=break_minutes,
            )
            self.store.save(state)
        except BaseException:
            handle.abort()
            raise
        handle.release()

        get_logger().info(
            "started %s timer pid=%d sessions=%d", mode, handle.pid, len(plan)
        )
        return state

    def status(self) -> TimerStatus | None:
        """Report the running timer, or None when nothing runs."""
        for store in self.stores:
            try:
                state = self.require_owner(store)
            except StaleOwnerError as e:
                get_logger().info("clearing stale timer state: %s", e)
                store.clear()
                continue
            if state is not None:
                return TimerStatus(state, state.time_remaining(self._now()))
        return None

    def stop(self) -> bool:
        """Stop the running timer. Returns False when nothing was running."""
        stopped = False
        for store in self.stores:
            stopped = self._stop_owner(store) or stopped
        return stopped
