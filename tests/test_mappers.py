"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerbook.database.models import (
    Account as ORMAccount,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Transaction as ORMTransaction,
)
from ledgerbook.database.mappers import (
    account_to_domain,
    invoice_item_to_orm,
    invoice_to_domain,
    transaction_to_domain,
)
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


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            name="Main Bank",
            account_type=AccountType.ASSET,
            sub_type="Bank Account",
            balance=Decimal("1500.00"),
            opening_balance=Decimal("1000.00"),
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.id == 1
        assert domain_account.account_type == AccountType.ASSET
        assert domain_account.balance == Decimal("1500.00")
        assert domain_account.opening_balance == Decimal("1000.00")
        assert domain_account.created_at == orm_account.created_at


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        now = datetime.now(UTC)
        orm_txn = ORMTransaction(
            id=7,
            type=TransactionType.EXPENSE,
            category="Rent",
            amount=Decimal("500.00"),
            tax_rate=Decimal("0"),
            tax_amount=Decimal("0.00"),
            total=Decimal("500.00"),
            payment_mode=PaymentMode.CASH,
            account_id=1,
            date=date(2024, 1, 31),
            description="January rent",
            created_by="user-1",
            deleted=None,
            created_at=now,
            updated_at=now,
        )
        txn = transaction_to_domain(orm_txn)

        assert isinstance(txn, Transaction)
        assert txn.type == TransactionType.EXPENSE
        assert txn.payment_mode == PaymentMode.CASH
        assert txn.deleted is False
        assert txn.description == "January rent"


class TestInvoiceMapper:
    """Tests for Invoice mappers."""

    def test_invoice_to_domain_keeps_item_order(self):
        orm_invoice = ORMInvoice(
            id=3,
            invoice_number="INV-001",
            customer_name="Acme",
            customer_email="billing@acme.test",
            sub_total=Decimal("150.00"),
            tax_total=Decimal("27.00"),
            grand_total=Decimal("177.00"),
            status=InvoiceStatus.PENDING,
            payment_method=PaymentMode.BANK,
            created_by=None,
            created_at=datetime.now(UTC),
            items=[
                ORMInvoiceItem(
                    position=0,
                    description="First",
                    quantity=Decimal("1"),
                    price=Decimal("100.00"),
                    tax_rate=Decimal("18"),
                    tax_amount=Decimal("18.00"),
                    total=Decimal("118.00"),
                ),
                ORMInvoiceItem(
                    position=1,
                    description="Second",
                    quantity=Decimal("1"),
                    price=Decimal("50.00"),
                    tax_rate=Decimal("18"),
                    tax_amount=Decimal("9.00"),
                    total=Decimal("59.00"),
                ),
            ],
        )
        invoice = invoice_to_domain(orm_invoice)

        assert isinstance(invoice, Invoice)
        assert isinstance(invoice.items, tuple)
        assert [item.description for item in invoice.items] == ["First", "Second"]
        assert invoice.grand_total == Decimal("177.00")

    def test_invoice_item_to_orm(self):
        item = InvoiceItem(
            description="Widget",
            quantity=Decimal("2"),
            price=Decimal("50"),
            tax_rate=Decimal("18"),
            tax_amount=Decimal("18.00"),
            total=Decimal("118.00"),
        )
        orm_item = invoice_item_to_orm(item, position=4)

        assert orm_item.position == 4
        assert orm_item.description == "Widget"
        assert orm_item.total == Decimal("118.00")
