"""Main entry point for bujo."""

import typer

from bujo_cli import __version__
from bujo_cli.commands import (
    config_command,
    migrate_command,
    task_command,
    view_command,
)
from bujo_cli.utils.ui.console import get_console

app = typer.Typer(
    name="bujo",
    help="A bullet journal for the command line",
    no_args_is_help=True,
)

console = get_console()

# Top-level commands
app.add_typer(view_command.app)
app.add_typer(task_command.app)
app.add_typer(migrate_command.app)

# Command groups
app.add_typer(migrate_command.migrate_app, name="migrate")
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]bujo[/bold] version [cyan]{__version__}[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
