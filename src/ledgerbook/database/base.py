"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    PaymentMode,
    Transaction,
    TransactionType,
)


class AtomicUnit(ABC):
    """Operations that run inside one all-or-nothing scope.

    Every mutation staged through a unit becomes visible when the owning
    ``Database.atomic()`` block exits normally, and none of them do if it
    exits with an exception.
    """

    @abstractmethod
    def lock_account(self, account_id: int) -> Optional[Account]:
        """Read the latest committed account row and lock it for the unit."""
        pass

    @abstractmethod
    def set_account_balance(self, account_id: int, balance: Decimal) -> None:
        """Stage a new balance for an account previously locked in this unit."""
        pass

    @abstractmethod
    def remove_account(self, account_id: int) -> None:
        """Delete an account row."""
        pass

    @abstractmethod
    def count_active_transactions(self, account_id: int) -> int:
        """Count non-deleted transactions referencing an account."""
        pass

    @abstractmethod
    def purge_deleted_transactions(self, account_id: int) -> int:
        """Physically remove soft-deleted transactions of an account. Returns count."""
        pass

    @abstractmethod
    def lock_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Read a transaction row (deleted or not) and lock it for the unit."""
        pass

    @abstractmethod
    def add_transaction(self, **fields: Any) -> int:
        """Insert a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def save_transaction(self, transaction_id: int, **fields: Any) -> None:
        """Overwrite the given fields of a transaction."""
        pass

    @abstractmethod
    def remove_transaction(self, transaction_id: int) -> None:
        """Physically delete a transaction row."""
        pass


class Database(ABC):
    """Abstract database interface for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[AtomicUnit]:
        """Open an atomic unit.

        Commits on normal exit and rolls back on any exception. Datastore
        failures are re-raised as PersistenceError (ConcurrencyError for lost
        optimistic-lock races) and uniqueness violations as ConflictError.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        sub_type: str,
        opening_balance: Decimal,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by its unique name."""
        pass

    @abstractmethod
    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[Account]:
        """List accounts, optionally filtered by classification."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        sub_type: Optional[str] = None,
    ) -> None:
        """Update descriptive account fields. The balance is not touched."""
        pass

    @abstractmethod
    def count_active_transactions(self, account_id: int) -> int:
        """Count non-deleted transactions referencing an account."""
        pass

    # Transaction operations
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, including soft-deleted ones."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        payment_mode: Optional[PaymentMode] = None,
        include_deleted: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_number: str,
        customer_name: str,
        customer_email: str,
        items: Sequence[InvoiceItem],
        sub_total: Decimal,
        tax_total: Decimal,
        grand_total: Decimal,
        payment_method: PaymentMode,
        status: InvoiceStatus = InvoiceStatus.PENDING,
        created_by: Optional[str] = None,
    ) -> int:
        """Create an invoice with its priced items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by its unique number."""
        pass

    @abstractmethod
    def list_invoices(self, status: Optional[InvoiceStatus] = None) -> list[Invoice]:
        """List invoices, optionally filtered by payment status."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, **fields: Any) -> None:
        """Update invoice fields.

        ``items`` (a sequence of priced InvoiceItem) replaces all lines; the
        caller supplies matching ``sub_total``/``tax_total``/``grand_total``.
        """
        pass

    # Aggregates
    @abstractmethod
    def sum_transactions_by_type(
        self,
        field: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_mode: Optional[PaymentMode] = None,
    ) -> dict[TransactionType, Decimal]:
        """Sum a monetary field ('amount', 'tax_amount' or 'total') of
        non-deleted transactions, grouped by transaction type."""
        pass

    @abstractmethod
    def sum_balances_by_account_type(self) -> dict[AccountType, Decimal]:
        """Sum current account balances grouped by classification."""
        pass
