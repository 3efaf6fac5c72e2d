"""Main entry point for Pomo CLI."""

import typer

from pomo_cli import __version__
from pomo_cli.commands import config, timer
from pomo_cli.utils.background import DAEMON_COMMAND
from pomo_cli.utils.typer_helpers import SuggestingGroup
from pomo_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="pomo",
    cls=SuggestingGroup,
    help="Ultra-low resource Pomodoro timer",
    no_args_is_help=True,
)

console = get_console()


# Timer commands live at the top level: `pomo start`, `pomo status`, ...
app.command("start")(timer.start)
app.command("break")(timer.break_session)
app.command("status")(timer.status)
app.command("stop")(timer.stop)
app.command(DAEMON_COMMAND, hidden=True)(timer.run_daemon)

# Add subcommands
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomo CLI[/bold] version [cyan]{__version__}[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
