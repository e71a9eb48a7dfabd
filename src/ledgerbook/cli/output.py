"""Response rendering for CLI commands.

Every command answers with a success flag, a message and an optional
payload. Text mode prints the message followed by pre-formatted lines;
``--json`` prints one JSON object instead.
"""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

import click


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_payload(value: Any) -> Any:
    """Turn entities (or lists of them) into plain dicts."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    return value


def wants_json(ctx: click.Context) -> bool:
    return bool(ctx.find_root().obj and ctx.find_root().obj.get("json"))


def render_success(
    ctx: click.Context,
    message: str,
    payload: Any = None,
    lines: Optional[Iterable[str]] = None,
) -> None:
    """Print a successful response."""
    if wants_json(ctx):
        body = {"success": True, "message": message, "data": to_payload(payload)}
        click.echo(json.dumps(body, default=_json_default))
        return

    click.echo(message)
    for line in lines or ():
        click.echo(line)


def render_failure(ctx: click.Context, message: str, status_code: int) -> None:
    """Print a failed response. Text mode writes to stderr."""
    if wants_json(ctx):
        body = {"success": False, "message": message, "status": status_code}
        click.echo(json.dumps(body, default=_json_default))
        return

    click.echo(f"Error: {message}", err=True)


def money(value: Decimal) -> str:
    return f"{value:,.2f}"
