"""Desktop notifications for finished sessions.

Notifications are fire-and-forget: helper programs are started without waiting
for them, and any failure is logged and otherwise ignored so the timer keeps
running.
"""

from __future__ import annotations

import shutil
import subprocess
import sys

from pomo_cli.models.timer.state import Mode
from pomo_cli.utils.logger import get_logger

TITLE = "Pomodoro"
LINUX_SOUND = "/usr/share/sounds/freedesktop/stereo/complete.oga"


def session_message(mode: Mode, last: bool = False) -> str:
    """Text shown when a session of *mode* ends."""
    if mode is Mode.WORK:
        if last:
            return "Work finished. All sets done."
        return "Work finished. Time for a break."
    return "Break finished. Back to work."


def beep_count(mode: Mode) -> int:
    """Two beeps after work, one after a break."""
    return 2 if mode is Mode.WORK else 1


def _applescript_quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def notification_commands(
    body: str, beeps: int, sound: bool, platform: str | None = None
) -> list[list[str]]:
    """Build the helper command lines for the current platform."""
    platform = platform or sys.platform
    commands: list[list[str]] = []

    if platform == "darwin":
        script = (
            f'display notification "{_applescript_quote(body)}" '
            f'with title "{TITLE}"'
        )
        commands.append(["osascript", "-e", script])
        if sound and beeps:
            commands.append(["osascript", "-e", f"beep {beeps}"])
    elif platform.startswith("linux"):
        commands.append(["notify-send", "-a", "pomo", TITLE, body])
        # Helpers run concurrently, so repeated plays would overlap
        if sound and beeps:
            commands.append(["paplay", LINUX_SOUND])

    return commands


class NotificationService:
    """Sends the end-of-session notification."""

    def __init__(self, enabled: bool = True, sound: bool = True):
        self.enabled = enabled
        self.sound = sound

    def notify(self, mode: Mode, last: bool = False) -> None:
        """Announce that a session of *mode* just ended."""
        logger = get_logger()
        body = session_message(mode, last)
        if not self.enabled:
            logger.info("notifications disabled, skipping: %s", body)
            return

        commands = notification_commands(body, beep_count(mode), self.sound)
        if not commands:
            logger.info("no notifier for platform %s: %s", sys.platform, body)
            return

        for args in commands:
            if shutil.which(args[0]) is None:
                logger.warning("notifier %s not found", args[0])
                continue
            try:
                subprocess.Popen(
                    args,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    stdin=subprocess.DEVNULL,
                )
            except OSError as e:
                logger.warning("notifier %s failed: %s", args[0], e)
        logger.info("notification sent: %s", body)
