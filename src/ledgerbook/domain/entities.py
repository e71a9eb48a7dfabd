"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; the database layer maps
its ORM rows onto them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Account classification."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionType(str, Enum):
    """Transaction kind. Decides the sign of the balance effect."""

    INCOME = "Income"
    EXPENSE = "Expense"
    LOAN = "Loan"
    INVESTMENT = "Investment"

    @property
    def increases_balance(self) -> bool:
        return self is not TransactionType.EXPENSE


class PaymentMode(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    BANK = "Bank"


class InvoiceStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class ProfitStatus(str, Enum):
    PROFIT = "Profit"
    LOSS = "Loss"
    BREAK_EVEN = "Break-even"


@dataclass(frozen=True)
class Account:
    """Financial account domain entity."""

    id: int
    name: str
    account_type: AccountType
    sub_type: str
    balance: Decimal
    opening_balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    type: TransactionType
    category: str
    amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    payment_mode: PaymentMode
    account_id: int
    date: date
    description: Optional[str]
    created_by: Optional[str]
    deleted: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LineItem:
    """Invoice line as supplied by the caller, before pricing."""

    description: str
    quantity: Decimal
    price: Decimal
    tax_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class InvoiceItem:
    """Priced invoice line."""

    description: str
    quantity: Decimal
    price: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    invoice_number: str
    customer_name: str
    customer_email: str
    items: tuple[InvoiceItem, ...]
    sub_total: Decimal
    tax_total: Decimal
    grand_total: Decimal
    status: InvoiceStatus
    payment_method: PaymentMode
    created_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class AccountUpdate:
    """Allow-listed account fields. None leaves a field unchanged.

    The balance is deliberately absent: it only moves through the ledger.
    """

    name: Optional[str] = None
    account_type: Optional[AccountType] = None
    sub_type: Optional[str] = None

    @property
    def has_changes(self) -> bool:
        return any(v is not None for v in (self.name, self.account_type, self.sub_type))


@dataclass(frozen=True)
class TransactionUpdate:
    """Allow-listed transaction fields. None leaves a field unchanged.

    Changing ``amount`` or ``tax_rate`` recomputes tax and total; any change
    goes through reversal and reapplication of the balance effect.
    """

    type: Optional[TransactionType] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None
    payment_mode: Optional[PaymentMode] = None
    account_id: Optional[int] = None
    date: Optional[date] = None
    description: Optional[str] = None

    @property
    def reprices(self) -> bool:
        return self.amount is not None or self.tax_rate is not None


@dataclass(frozen=True)
class InvoiceUpdate:
    """Allow-listed invoice fields. A non-empty ``items`` re-prices the invoice."""

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    items: Optional[tuple[LineItem, ...]] = None
    payment_method: Optional[PaymentMode] = None
    status: Optional[InvoiceStatus] = None


@dataclass(frozen=True)
class PricedLine:
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class PricedInvoice:
    items: tuple[InvoiceItem, ...]
    sub_total: Decimal
    tax_total: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive date range a report aggregates over."""

    start_date: Optional[date]
    end_date: Optional[date]


@dataclass(frozen=True)
class ProfitAndLoss:
    window: ReportWindow
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    status: ProfitStatus


@dataclass(frozen=True)
class BalanceSheet:
    total_assets: Decimal
    total_liabilities: Decimal
    equity: Decimal


@dataclass(frozen=True)
class CashFlow:
    window: ReportWindow
    inflow: Decimal
    outflow: Decimal
    financing: Decimal
    net: Decimal


@dataclass(frozen=True)
class TaxReport:
    window: ReportWindow
    payment_mode: Optional[PaymentMode]
    output_tax: Decimal
    input_tax: Decimal
    net_tax: Decimal


@dataclass(frozen=True)
class CallerContext:
    """Identity supplied by the authentication collaborator."""

    user_id: Optional[str]
    role: str
