"""CLI error handling helpers."""

import click

from ledgerbook.cli.output import render_failure
from ledgerbook.domain.errors import DomainError
from ledgerbook.logging_config import get_logger

logger = get_logger("cli")


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Render a domain error with its status code and exit with failure."""
    status_code = getattr(error, "status_code", 400)
    if status_code >= 500:
        logger.error("command failed", extra={"error": type(error).__name__, "status": status_code})
    render_failure(ctx, str(error), status_code)
    ctx.exit(1)
