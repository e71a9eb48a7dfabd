"""Logging setup for ledgerbook.

Library modules only call ``get_logger``; the CLI entry point calls
``configure_logging`` once. Structured fields are passed through ``extra``
and rendered as JSON lines when ``json_output`` is enabled.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class LogContext:
    """Context holder for request-scoped log fields."""

    _actor_id: ContextVar[str | None] = ContextVar("log_actor_id", default=None)
    _role: ContextVar[str | None] = ContextVar("log_role", default=None)
    _operation: ContextVar[str | None] = ContextVar("log_operation", default=None)

    _FIELD_NAMES = ("actor_id", "role", "operation")

    @classmethod
    def set(
        cls,
        *,
        actor_id: str | None = None,
        role: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Set context fields. Only non-None values are updated."""
        if actor_id is not None:
            cls._actor_id.set(actor_id)
        if role is not None:
            cls._role.set(role)
        if operation is not None:
            cls._operation.set(operation)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """Return all non-None context fields as a dict."""
        ctx: dict[str, str] = {}
        for name in cls._FIELD_NAMES:
            val = getattr(cls, f"_{name}").get()
            if val is not None:
                ctx[name] = val
        return ctx

    @classmethod
    def clear(cls) -> None:
        """Reset all context fields to None."""
        for name in cls._FIELD_NAMES:
            getattr(cls, f"_{name}").set(None)


_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Handle Decimal, dates and enums in log payloads."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())

        # Merge structured extra data (skip stdlib internal keys)
        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder, default=str)


_LOGGER_PREFIX = "ledgerbook"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ledgerbook namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever sys.stderr is at emit time."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    stream: Any = None,
    json_output: bool = False,
) -> None:
    """Configure the ledgerbook logger hierarchy (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        root = logging.getLogger(_LOGGER_PREFIX)
        root.setLevel(level.upper() if isinstance(level, str) else level)
        handler = logging.StreamHandler(stream) if stream is not None else _StderrHandler()
        if json_output:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        root.addHandler(handler)
        root.propagate = False
        _configured = True


def reset_logging() -> None:
    """Remove handlers installed by configure_logging. Used by tests."""
    global _configured
    with _lock:
        root = logging.getLogger(_LOGGER_PREFIX)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.setLevel(logging.NOTSET)
        root.propagate = True
        _configured = False
        LogContext.clear()
