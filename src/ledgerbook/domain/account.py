"""Account domain service."""

from typing import Any, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Account as AccountEntity, AccountType, AccountUpdate
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    DuplicateAccountError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_name,
)
from ledgerbook.domain.ledger import AccountLedger
from ledgerbook.domain.tax import to_money
from ledgerbook.domain.validation import coerce_decimal, coerce_enum, require_fields
from ledgerbook.logging_config import get_logger

logger = get_logger("account")


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, ledger: Optional[AccountLedger] = None):
        """Initialize account service.

        Args:
            db: Database instance
            ledger: Account ledger (created from db when omitted)
        """
        self.db = db
        self.ledger = ledger or AccountLedger(db)

    def create_account(
        self,
        account_type: AccountType | str,
        name: str,
        amount: Any,
        sub_type: str,
    ) -> int:
        """Create a new account.

        Args:
            account_type: Classification (Asset, Liability, Income, Expense)
            name: Unique account name
            amount: Opening balance
            sub_type: Free-form sub-classification (e.g. "Bank Account")

        Returns:
            Account ID

        Raises:
            ValidationError: If a required field is missing or malformed
            ConflictError: If account name already exists
        """
        require_fields(type=account_type, name=name, amount=amount, accountType=sub_type)
        account_type = coerce_enum(AccountType, account_type, "account type")
        opening_balance = to_money(coerce_decimal(amount, "amount"))
        name = name.strip()

        if self.db.get_account_by_name(name) is not None:
            raise DuplicateAccountError(duplicate_account_name(name))

        try:
            account_id = self.db.create_account(
                name=name,
                account_type=account_type,
                sub_type=sub_type.strip(),
                opening_balance=opening_balance,
            )
        except ConflictError:
            # lost a race against a concurrent create with the same name
            raise DuplicateAccountError(duplicate_account_name(name)) from None
        logger.info(
            "account created",
            extra={"account_id": account_id, "account_type": account_type, "opening": opening_balance},
        )
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[AccountEntity]:
        """List accounts, optionally filtered by classification."""
        return self.db.list_accounts(account_type=account_type)

    def update_account(self, account_id: int, update: AccountUpdate) -> AccountEntity:
        """Update allow-listed account fields.

        Args:
            account_id: Account ID to update
            update: Fields to change; the balance cannot be edited here

        Returns:
            The updated account

        Raises:
            NotFoundError: If account not found
            ValidationError: If nothing to update or a field is blank
            ConflictError: If the new name already exists
        """
        self.require_account(account_id)
        if not update.has_changes:
            raise ValidationError("No account fields to update")

        name = update.name
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name cannot be empty")
            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise DuplicateAccountError(duplicate_account_name(name))
        if update.sub_type is not None and not update.sub_type.strip():
            raise ValidationError("Account sub-type cannot be empty")

        self.db.update_account(
            account_id=account_id,
            name=name,
            account_type=update.account_type,
            sub_type=update.sub_type.strip() if update.sub_type is not None else None,
        )
        logger.info("account updated", extra={"account_id": account_id})
        return self.require_account(account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        The reference check and the deletion share one atomic unit, so a
        transaction created concurrently either blocks the deletion or fails
        against the missing account. Soft-deleted transactions of the account
        are purged with it.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If non-deleted transactions reference the account
        """
        with self.db.atomic() as unit:
            account = unit.lock_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))

            if not self.ledger.can_delete(account_id, unit):
                count = unit.count_active_transactions(account_id)
                raise DependencyError(account_delete_blocked(account_id, count))

            purged = unit.purge_deleted_transactions(account_id)
            unit.remove_account(account_id)

        logger.info("account deleted", extra={"account_id": account_id, "purged": purged})
