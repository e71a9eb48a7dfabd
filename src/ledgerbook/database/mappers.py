"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so services never see ORM rows.
"""

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        sub_type=orm_account.sub_type,
        balance=orm_account.balance,
        opening_balance=orm_account.opening_balance,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=orm_transaction.type,
        category=orm_transaction.category,
        amount=orm_transaction.amount,
        tax_rate=orm_transaction.tax_rate,
        tax_amount=orm_transaction.tax_amount,
        total=orm_transaction.total,
        payment_mode=orm_transaction.payment_mode,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        created_by=orm_transaction.created_by,
        deleted=bool(orm_transaction.deleted),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        description=orm_item.description,
        quantity=orm_item.quantity,
        price=orm_item.price,
        tax_rate=orm_item.tax_rate,
        tax_amount=orm_item.tax_amount,
        total=orm_item.total,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model (with its items) to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        customer_name=orm_invoice.customer_name,
        customer_email=orm_invoice.customer_email,
        items=tuple(invoice_item_to_domain(item) for item in orm_invoice.items),
        sub_total=orm_invoice.sub_total,
        tax_total=orm_invoice.tax_total,
        grand_total=orm_invoice.grand_total,
        status=orm_invoice.status,
        payment_method=orm_invoice.payment_method,
        created_by=orm_invoice.created_by,
        created_at=orm_invoice.created_at,
    )


def invoice_item_to_orm(item: domain.InvoiceItem, position: int) -> ORMInvoiceItem:
    """Build a SQLAlchemy InvoiceItem row from a priced domain line."""
    return ORMInvoiceItem(
        position=position,
        description=item.description,
        quantity=item.quantity,
        price=item.price,
        tax_rate=item.tax_rate,
        tax_amount=item.tax_amount,
        total=item.total,
    )
