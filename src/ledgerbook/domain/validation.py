"""Input validation helpers shared by domain services."""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, TypeVar

from ledgerbook.domain.errors import ValidationError, missing_fields

E = TypeVar("E", bound=Enum)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require_fields(**values: Any) -> None:
    """Raise ValidationError naming every missing (None or blank) field."""
    missing = [name for name, value in values.items() if _is_missing(value)]
    if missing:
        raise ValidationError(missing_fields(missing))


def coerce_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Accept an enum member or its value (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value.lower() == value.strip().lower():
                return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"Invalid {field_name} '{value}'. Expected one of: {allowed}")


def coerce_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a number or numeric string to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name} '{value}'")
    try:
        # str() first so floats keep their short repr (0.1 -> Decimal("0.1"))
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field_name} '{value}'") from None
    if not result.is_finite():
        raise ValidationError(f"Invalid {field_name} '{value}'")
    return result


def optional_decimal(value: Any, field_name: str) -> Optional[Decimal]:
    return None if value is None else coerce_decimal(value, field_name)


# Decimal places the datastore keeps for each kind of number.
MONEY_PLACES = 2
RATE_PLACES = 2
QUANTITY_PLACES = 3


def limit_places(value: Decimal, places: int, field_name: str) -> Decimal:
    """Reject a value that the datastore could only keep by rounding it.

    Trailing zeros do not count, so ``Decimal("1.500")`` passes with two places.
    """
    if value.normalize().as_tuple().exponent < -places:
        raise ValidationError(
            f"Invalid {field_name} '{value}'. At most {places} decimal places are allowed"
        )
    return value
