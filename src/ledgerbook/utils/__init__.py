"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.amount_parser import parse_amount, parse_line_item
from ledgerbook.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "parse_line_item", "resolve_account"]
