"""Configuration management commands."""

from typing import Annotated

import typer

from bujo_cli.services.config_service import get_config_service
from bujo_cli.utils.ui.console import get_console
from bujo_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _parse_value(value: str) -> str | bool | None:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null", ""):
        return None
    return value


@app.command("show")
@command_wrapper
def show_config(
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format")
    ] = "table",
) -> None:
    """Show current configuration."""
    config_service = get_config_service()
    data = config_service.config.model_dump()
    data["storage"]["resolved_db_path"] = config_service.db_path
    data["config_path"] = str(config_service.config_path)
    if output in ("json", "yaml"):
        format_output(data, output)
        return
    for section, values in data.items():
        if isinstance(values, dict):
            console.print(f"[bold cyan]{section}[/bold cyan]")
            for key, value in values.items():
                console.print(f"  {key}: {value}")
        else:
            console.print(f"[bold cyan]{section}[/bold cyan]: {values}")


@app.command("set")
@command_wrapper
def set_config(
    key: Annotated[str, typer.Argument(help="Configuration key (e.g., output.format)")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
) -> None:
    """Set a configuration value."""
    config_service = get_config_service()
    config_service.set_value(key, _parse_value(value))
    format_success(f"Set {key} = {config_service.get_value(key)}")
