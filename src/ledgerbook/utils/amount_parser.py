"""Amount and invoice line parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from ledgerbook.domain.entities import LineItem

_CURRENCY = re.compile(r"[$€£¥₹]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "₹1,234.56", "-$123.45" and "(123.45)" (negative in
    parentheses).

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    text = _CURRENCY.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if negative else amount


def parse_line_item(spec: str) -> LineItem:
    """Parse an invoice line written as ``DESCRIPTION:QTY:PRICE[:TAX_RATE]``.

    The description may itself contain colons; the numeric fields are taken
    from the right.

    Raises:
        ValueError: If the line is malformed
    """
    parts = spec.rsplit(":", 3)
    if len(parts) == 4:
        try:
            parse_amount(parts[1])
        except ValueError:
            # "a:b:2:10" without a rate: fold the extra colon back into the description
            parts = [f"{parts[0]}:{parts[1]}", parts[2], parts[3]]
    if len(parts) not in (3, 4):
        raise ValueError(
            f"Invalid item '{spec}'. Expected DESCRIPTION:QTY:PRICE[:TAX_RATE]"
        )

    description = parts[0].strip()
    if not description:
        raise ValueError(f"Invalid item '{spec}': description is empty")
    quantity = parse_amount(parts[1])
    price = parse_amount(parts[2])
    tax_rate = parse_amount(parts[3]) if len(parts) == 4 else None
    return LineItem(description=description, quantity=quantity, price=price, tax_rate=tax_rate)
