"""Utility for resolving account names to IDs."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    A value that parses as an integer is treated as an ID; anything else
    is looked up by exact name.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    found = account_service.db.get_account_by_name(str(account).strip())
    if found is None:
        raise NotFoundError(f"Account '{account}' not found")
    return found.id
