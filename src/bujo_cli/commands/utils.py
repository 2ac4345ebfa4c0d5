"""Helpers shared by the command modules."""

from datetime import date

from bujo_cli.exceptions import ValidationError
from bujo_cli.services.config_service import get_config_service
from bujo_cli.utils.dates import local_today, parse_date
from bujo_cli.utils.ui.formatters import OUTPUT_FORMATS


def resolve_output(
    output: str | None, json_opt: bool = False, compact: bool = False
) -> tuple[str, bool]:
    """Pick the output format and compact flag, falling back to config.

    Raises:
        ValidationError: If the format is not supported
    """
    config = get_config_service().config
    if json_opt:
        output = "json"
    output = output or config.output.format
    if output not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Unknown output format '{output}'. Use one of: {', '.join(OUTPUT_FORMATS)}"
        )
    return output, compact or config.output.compact


def parse_optional_date(text: str | None, today: date | None = None) -> date | None:
    """Parse a CLI date argument; None stays None."""
    if text is None:
        return None
    return parse_date(text, today)


def service_today(task_service) -> date:
    """Local calendar day according to the service clock."""
    return local_today(task_service.clock())
