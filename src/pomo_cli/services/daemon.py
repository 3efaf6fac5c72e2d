"""The background timer process.

The daemon owns the state record written for it by the spawning command. For
each session it sleeps once until the deadline, checks it still owns the
record, notifies, then either writes the next session or clears the record and
exits. It never clears the record when terminated by a signal; whoever sent
the signal does that.
"""

from __future__ import annotations

import os
import signal
import time
from collections.abc import Callable
from datetime import datetime

from pomo_cli.models.exceptions import CorruptStateError
from pomo_cli.models.timer.scheduler import advance
from pomo_cli.models.timer.state import TimerState, TimerStateStore, local_now
from pomo_cli.services.notification_service import NotificationService
from pomo_cli.utils.logger import get_logger


class TimerDaemon:
    """Runs the sessions of the record owned by *pid* to completion."""

    def __init__(
        self,
        store: TimerStateStore,
        notifier: NotificationService,
        *,
        pid: int | None = None,
        now: Callable[[], datetime] = local_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.notifier = notifier
        self.pid = pid if pid is not None else os.getpid()
        self._now = now
        self._sleep = sleep

    def owned_state(self, expected: TimerState | None = None) -> TimerState | None:
        """Load the record if this daemon still owns it.

        With *expected*, the record must also still describe that session;
        a new ``start`` reusing a recycled pid is not mistaken for ours.
        """
        logger = get_logger()
        try:
            state = self.store.load()
        except CorruptStateError as e:
            logger.warning("daemon cannot read state: %s", e)
            return None

        if state is None or state.process_id != self.pid:
            return None
        if expected is not None and not state.same_session(expected):
            return None
        return state

    def run(self) -> int:
        """Run until the plan is exhausted or ownership is lost.

        Returns the number of sessions that ran to their deadline.
        """
        logger = get_logger()
        current = self.owned_state()
        if current is None:
            logger.info("daemon found no record owned by pid %d, exiting", self.pid)
            return 0

        completed = 0
        while True:
            remaining = (current.deadline - self._now()).total_seconds()
            logger.info(
                "%s session %d/%d running, %d minutes, waking in %.0fs",
                current.mode,
                current.set_index,
                current.set_total,
                current.minutes,
                max(0.0, remaining),
            )
            if remaining > 0:
                self._sleep(remaining)

            if self.owned_state(current) is None:
                logger.info("daemon no longer owns the timer, exiting")
                return completed
            completed += 1

            next_state = advance(current, self._now())
            if next_state is None:
                self.store.clear()
                self.notifier.notify(current.mode, last=True)
                logger.info("plan finished after %d session(s)", completed)
                return completed

            self.store.save(next_state)
            self.notifier.notify(current.mode)
            current = next_state


def _handle_termination(signum, frame):
    get_logger().info("daemon received %s, exiting", signal.Signals(signum).name)
    raise SystemExit(0)


def install_signal_handlers() -> None:
    """Exit promptly on SIGTERM/SIGINT, leaving the record to the terminator."""
    signal.signal(signal.SIGTERM, _handle_termination)
    signal.signal(signal.SIGINT, _handle_termination)
