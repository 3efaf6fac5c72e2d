"""Pomodoro timer commands: start, break, status, stop and the daemon entry."""

import typer

from pomo_cli.models.timer.state import Mode, TimerStateStore
from pomo_cli.services.config_service import get_config_service
from pomo_cli.services.daemon import TimerDaemon, install_signal_handlers
from pomo_cli.services.notification_service import NotificationService
from pomo_cli.services.timer_service import TimerService
from pomo_cli.utils.background import wait_until_ready
from pomo_cli.utils.exit_codes import NOT_RUNNING
from pomo_cli.utils.ui.console import get_console
from pomo_cli.utils.ui.formatters import format_output

from .decorators import command_wrapper

console = get_console()


@command_wrapper
def start(
    minutes: int | None = typer.Argument(
        None, help="Session length in minutes (default: 25)"
    ),
    sets: int = typer.Option(
        1, "--sets", help="Number of work sessions (auto alternates work/break)"
    ),
    break_minutes: int | None = typer.Option(
        None,
        "--break-minutes",
        help="Break length in minutes, used with --sets (default: 5)",
    ),
) -> None:
    """Start a work session (default: 25 minutes)."""
    config = get_config_service().config
    state = TimerService().start(
        Mode.WORK,
        minutes if minutes is not None else config.work_minutes,
        sets=sets,
        break_minutes=break_minutes if break_minutes is not None else config.break_minutes,
    )

    if state.is_cycle:
        console.print(
            f"started cycle: work {state.work_minutes}m / break {state.break_minutes}m "
            f"x{state.set_total} (pid {state.process_id})",
            highlight=False,
        )
    else:
        console.print(
            f"started {state.mode} timer for {state.minutes} minutes (pid {state.process_id})",
            highlight=False,
        )


@command_wrapper
def break_session(
    minutes: int | None = typer.Argument(
        None, help="Session length in minutes (default: 5)"
    ),
) -> None:
    """Start a break session (default: 5 minutes)."""
    config = get_config_service().config
    state = TimerService().start(
        Mode.BREAK,
        minutes if minutes is not None else config.break_minutes,
        work_minutes=config.work_minutes,
    )
    console.print(
        f"started {state.mode} timer for {state.minutes} minutes (pid {state.process_id})",
        highlight=False,
    )


@command_wrapper
def status(
    output: str = typer.Option(
        "pretty", "--output", "-o", help="Output format (pretty, table, json)"
    ),
) -> None:
    """Show current timer status."""
    timer_status = TimerService().status()

    if timer_status is None:
        if output == "json":
            format_output({"running": False}, "json")
        else:
            console.print("not running")
        raise typer.Exit(NOT_RUNNING)

    if output == "json":
        format_output({"running": True, **timer_status.to_dict()}, "json")
    else:
        console.print("running")
        format_output(timer_status.to_dict(), output)


@command_wrapper
def stop() -> None:
    """Stop the current timer (if running)."""
    if not TimerService().stop():
        console.print("not running")
        raise typer.Exit(NOT_RUNNING)
    console.print("stopped")


@command_wrapper
def run_daemon(
    ready_fd: int | None = typer.Option(None, "--ready-fd", help="Readiness pipe"),
) -> None:
    """Run the background timer. Not intended for manual use."""
    install_signal_handlers()
    if ready_fd is not None:
        wait_until_ready(ready_fd)

    config = get_config_service().config
    notifier = NotificationService(enabled=config.notifications, sound=config.sound)
    TimerDaemon(TimerStateStore(), notifier).run()
