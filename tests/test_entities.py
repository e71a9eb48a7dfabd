"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerbook.domain.entities import (
    Account,
    AccountType,
    AccountUpdate,
    InvoiceUpdate,
    LineItem,
    PaymentMode,
    Transaction,
    TransactionType,
    TransactionUpdate,
)


class TestAccount:
    """Tests for Account entity."""

    def test_create_account(self):
        """Test creating an Account entity."""
        account = Account(
            id=1,
            name="Main Bank",
            account_type=AccountType.ASSET,
            sub_type="Bank Account",
            balance=Decimal("1000.00"),
            opening_balance=Decimal("1000.00"),
            created_at=datetime.now(UTC),
        )
        assert account.id == 1
        assert account.account_type == AccountType.ASSET
        assert account.balance == Decimal("1000.00")

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(
            id=1,
            name="Main Bank",
            account_type=AccountType.ASSET,
            sub_type="Bank Account",
            balance=Decimal("0"),
            opening_balance=Decimal("0"),
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.balance = Decimal("5")


class TestTransaction:
    """Tests for Transaction entity."""

    def test_create_transaction(self):
        """Test creating a Transaction entity."""
        now = datetime.now(UTC)
        txn = Transaction(
            id=1,
            type=TransactionType.INCOME,
            category="Sales",
            amount=Decimal("1000.00"),
            tax_rate=Decimal("18"),
            tax_amount=Decimal("180.00"),
            total=Decimal("1180.00"),
            payment_mode=PaymentMode.BANK,
            account_id=1,
            date=date(2024, 1, 15),
            description=None,
            created_by="user-1",
            deleted=False,
            created_at=now,
            updated_at=now,
        )
        assert txn.total == txn.amount + txn.tax_amount
        assert txn.date == date(2024, 1, 15)


class TestEnums:
    """Tests for enum value mapping."""

    def test_values_match_wire_names(self):
        assert AccountType.LIABILITY.value == "Liability"
        assert TransactionType.INVESTMENT.value == "Investment"
        assert PaymentMode.CARD.value == "Card"

    @pytest.mark.parametrize(
        "txn_type,increases",
        [
            (TransactionType.INCOME, True),
            (TransactionType.LOAN, True),
            (TransactionType.INVESTMENT, True),
            (TransactionType.EXPENSE, False),
        ],
    )
    def test_increases_balance(self, txn_type, increases):
        assert txn_type.increases_balance is increases


class TestUpdateStructs:
    """Tests for allow-listed update structs."""

    def test_account_update_has_changes(self):
        assert not AccountUpdate().has_changes
        assert AccountUpdate(name="New").has_changes

    def test_transaction_update_reprices(self):
        assert not TransactionUpdate(category="Rent").reprices
        assert TransactionUpdate(amount=Decimal("5")).reprices
        assert TransactionUpdate(tax_rate=Decimal("5")).reprices

    def test_transaction_update_accepts_date_field(self):
        update = TransactionUpdate(date=date(2024, 2, 1))
        assert update.date == date(2024, 2, 1)

    def test_invoice_update_defaults(self):
        update = InvoiceUpdate()
        assert update.items is None
        assert InvoiceUpdate(items=(LineItem("x", Decimal("1"), Decimal("2")),)).items
