"""Shared helpers for command implementations: caller, capability check and option parsing."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import CallerContext
from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.permissions import Operation, authorize
from ledgerbook.logging_config import LogContext
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import get_date_range, parse_date


def get_db(ctx: click.Context) -> Database:
    return ctx.find_root().obj["db"]


def get_caller(ctx: click.Context) -> CallerContext:
    return ctx.find_root().obj["caller"]


def require(ctx: click.Context, operation: Operation) -> CallerContext:
    """Run the capability check for ``operation`` and return the caller.

    Raises:
        AuthorizationError: If the caller's role does not allow the operation
    """
    caller = get_caller(ctx)
    LogContext.set(operation=operation.value)
    authorize(caller, operation)
    return caller


def amount_option(value: Optional[str], label: str) -> Optional[Decimal]:
    """Parse an optional amount option, reporting bad input as a ValidationError."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {label}: {e}") from None


def date_option(value: Optional[str], label: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {label}: {e}") from None


def resolve_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    period: Optional[str],
) -> tuple[Optional[date], Optional[date]]:
    """Resolve a named period or explicit dates into a (start, end) pair."""
    if period is not None:
        if start_date or end_date:
            raise ValidationError(
                "--period cannot be combined with --start-date or --end-date"
            )
        return get_date_range(period)

    return date_option(start_date, "start date"), date_option(end_date, "end date")
