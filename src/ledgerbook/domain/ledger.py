"""Account ledger: the only writer of account balances."""

from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import AtomicUnit, Database
from ledgerbook.domain.entities import TransactionType
from ledgerbook.domain.errors import NotFoundError, account_not_found
from ledgerbook.logging_config import get_logger

logger = get_logger("ledger")


def signed_effect(transaction_type: TransactionType, total: Decimal) -> Decimal:
    """Balance effect of a transaction: +total for Income/Loan/Investment, -total for Expense."""
    return total if transaction_type.increases_balance else -total


class AccountLedger:
    """Applies signed deltas to account balances inside a caller's atomic unit.

    The ledger does not know about transaction kinds; callers decide the sign
    (see ``signed_effect``).
    """

    def __init__(self, db: Database):
        """Initialize account ledger.

        Args:
            db: Database instance
        """
        self.db = db

    def apply_delta(self, account_id: int, signed_amount: Decimal, unit: AtomicUnit) -> Decimal:
        """Add a signed amount to an account balance as part of ``unit``.

        Args:
            account_id: Account ID
            signed_amount: Delta to add (negative to subtract)
            unit: Open atomic unit the write belongs to

        Returns:
            The staged new balance

        Raises:
            NotFoundError: If the account does not exist within the unit's view
        """
        account = unit.lock_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        new_balance = account.balance + signed_amount
        unit.set_account_balance(account_id, new_balance)
        logger.debug(
            "balance delta staged",
            extra={"account_id": account_id, "delta": signed_amount, "balance": new_balance},
        )
        return new_balance

    def can_delete(self, account_id: int, unit: Optional[AtomicUnit] = None) -> bool:
        """Return False while any non-deleted transaction references the account."""
        source = unit if unit is not None else self.db
        return source.count_active_transactions(account_id) == 0
