"""Transaction domain service.

Every balance-affecting operation runs inside one atomic unit: the
transaction row and the account balance change together or not at all.
"""

from dataclasses import replace
from typing import Any, Optional
from datetime import date
from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    PaymentMode,
    Transaction as TransactionEntity,
    TransactionType,
    TransactionUpdate,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from ledgerbook.domain.ledger import AccountLedger, signed_effect
from ledgerbook.domain.tax import compute_tax
from ledgerbook.domain.validation import (
    MONEY_PLACES,
    RATE_PLACES,
    coerce_decimal,
    coerce_enum,
    limit_places,
    optional_decimal,
    require_fields,
)
from ledgerbook.logging_config import get_logger

logger = get_logger("transaction")


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database, ledger: Optional[AccountLedger] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            ledger: Account ledger (created from db when omitted)
        """
        self.db = db
        self.ledger = ledger or AccountLedger(db)

    def create_transaction(
        self,
        type: TransactionType | str,
        category: str,
        amount: Any,
        payment_mode: PaymentMode | str,
        account_id: int,
        tax_rate: Any = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> int:
        """Create a transaction and apply its balance effect.

        Args:
            type: Income, Expense, Loan or Investment
            category: Category label
            amount: Pre-tax amount
            payment_mode: Cash, Card or Bank
            account_id: Owning account ID
            tax_rate: Tax percentage (defaults to 0)
            date: Effective date (defaults to today)
            description: Optional description
            created_by: Opaque creator reference

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a required field is missing or malformed
            NotFoundError: If the account doesn't exist
        """
        require_fields(
            type=type,
            category=category,
            amount=amount,
            payment_mode=payment_mode,
            account=account_id,
        )
        txn_type = coerce_enum(TransactionType, type, "transaction type")
        mode = coerce_enum(PaymentMode, payment_mode, "payment mode")
        base = limit_places(coerce_decimal(amount, "amount"), MONEY_PLACES, "amount")
        rate = _rate(tax_rate) or Decimal("0")
        taxed = compute_tax(base, rate)

        with self.db.atomic() as unit:
            if unit.lock_account(account_id) is None:
                raise NotFoundError(account_not_found(account_id))

            transaction_id = unit.add_transaction(
                type=txn_type,
                category=category.strip(),
                amount=base,
                tax_rate=rate,
                tax_amount=taxed.tax_amount,
                total=taxed.total,
                payment_mode=mode,
                account_id=account_id,
                date=date or _today(),
                description=description,
                created_by=created_by,
            )
            balance = self.ledger.apply_delta(
                account_id, signed_effect(txn_type, taxed.total), unit
            )

        logger.info(
            "transaction created",
            extra={
                "transaction_id": transaction_id,
                "account_id": account_id,
                "total": taxed.total,
                "balance": balance,
            },
        )
        return transaction_id

    def get_transaction(
        self, transaction_id: int, include_deleted: bool = False
    ) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID
            include_deleted: If True, soft-deleted transactions are returned too

        Returns:
            Transaction entity or None if not found
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None or (txn.deleted and not include_deleted):
            return None
        return txn

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get an active transaction or raise NotFoundError."""
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def edit_transaction(self, transaction_id: int, update: TransactionUpdate) -> TransactionEntity:
        """Edit a transaction by reversing its effect and reapplying the new one.

        Inside one atomic unit: the stored total is reversed on the current
        account, the allow-listed fields are merged, tax is recomputed when
        amount or tax rate changed, and the new signed total is applied to
        the (possibly different) account using the (possibly new) kind.

        Args:
            transaction_id: Transaction ID to edit
            update: Fields to change

        Returns:
            The edited transaction

        Raises:
            NotFoundError: If the transaction is absent or deleted, or the new
                account doesn't exist
            ValidationError: If a provided field is blank or malformed
        """
        if update.category is not None and not update.category.strip():
            raise ValidationError("Category cannot be empty")
        update = _coerce_update(update)

        with self.db.atomic() as unit:
            current = unit.lock_transaction(transaction_id)
            if current is None or current.deleted:
                raise NotFoundError(transaction_not_found(transaction_id))

            self.ledger.apply_delta(
                current.account_id, -signed_effect(current.type, current.total), unit
            )

            new_type = update.type or current.type
            account_id = update.account_id if update.account_id is not None else current.account_id
            changes: dict[str, Any] = {"type": new_type, "account_id": account_id}
            if update.category is not None:
                changes["category"] = update.category.strip()
            if update.payment_mode is not None:
                changes["payment_mode"] = update.payment_mode
            if update.date is not None:
                changes["date"] = update.date
            if update.description is not None:
                changes["description"] = update.description

            total = current.total
            if update.reprices:
                amount = update.amount if update.amount is not None else current.amount
                rate = update.tax_rate if update.tax_rate is not None else current.tax_rate
                taxed = compute_tax(amount, rate)
                total = taxed.total
                changes.update(
                    amount=amount, tax_rate=rate, tax_amount=taxed.tax_amount, total=total
                )

            self.ledger.apply_delta(account_id, signed_effect(new_type, total), unit)
            unit.save_transaction(transaction_id, **changes)

        logger.info(
            "transaction edited",
            extra={"transaction_id": transaction_id, "account_id": account_id, "total": total},
        )
        return self.require_transaction(transaction_id)

    def soft_delete_transaction(self, transaction_id: int) -> None:
        """Mark a transaction deleted and reverse its balance effect.

        Deleted transactions are hidden from listings and reports, so the
        balance stops counting them as well.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If the transaction is absent or already deleted
        """
        with self.db.atomic() as unit:
            current = unit.lock_transaction(transaction_id)
            if current is None or current.deleted:
                raise NotFoundError(transaction_not_found(transaction_id))

            self.ledger.apply_delta(
                current.account_id, -signed_effect(current.type, current.total), unit
            )
            unit.save_transaction(transaction_id, deleted=True)

        logger.info(
            "transaction deleted",
            extra={"transaction_id": transaction_id, "account_id": current.account_id},
        )

    def purge_transaction(self, transaction_id: int) -> None:
        """Physically remove a transaction.

        An active transaction has its balance effect reversed first; a
        soft-deleted one was already reversed.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        with self.db.atomic() as unit:
            current = unit.lock_transaction(transaction_id)
            if current is None:
                raise NotFoundError(transaction_not_found(transaction_id))

            if not current.deleted:
                self.ledger.apply_delta(
                    current.account_id, -signed_effect(current.type, current.total), unit
                )
            unit.remove_transaction(transaction_id)

        logger.info("transaction purged", extra={"transaction_id": transaction_id})

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        payment_mode: Optional[PaymentMode] = None,
        include_deleted: bool = False,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Optional account ID filter
            transaction_type: Optional kind filter
            payment_mode: Optional payment mode filter
            include_deleted: If True, soft-deleted transactions are included

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            transaction_type=transaction_type,
            payment_mode=payment_mode,
            include_deleted=include_deleted,
        )


def _today() -> date:
    return date.today()


def _rate(value: Any) -> Optional[Decimal]:
    rate = optional_decimal(value, "tax rate")
    return None if rate is None else limit_places(rate, RATE_PLACES, "tax rate")


def _coerce_update(update: TransactionUpdate) -> TransactionUpdate:
    """Normalize loosely typed update fields the same way creation does."""
    amount = optional_decimal(update.amount, "amount")
    return replace(
        update,
        type=(
            coerce_enum(TransactionType, update.type, "transaction type")
            if update.type is not None
            else None
        ),
        payment_mode=(
            coerce_enum(PaymentMode, update.payment_mode, "payment mode")
            if update.payment_mode is not None
            else None
        ),
        amount=None if amount is None else limit_places(amount, MONEY_PLACES, "amount"),
        tax_rate=_rate(update.tax_rate),
    )
