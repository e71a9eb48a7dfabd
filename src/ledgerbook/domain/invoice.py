"""Invoice pricing and invoice domain service."""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    Invoice as InvoiceEntity,
    InvoiceItem,
    InvoiceStatus,
    InvoiceUpdate,
    LineItem,
    PaymentMode,
    PricedInvoice,
    PricedLine,
)
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_invoice_number,
    invoice_not_found,
)
from ledgerbook.domain.tax import compute_tax, to_money
from ledgerbook.domain.validation import (
    MONEY_PLACES,
    QUANTITY_PLACES,
    RATE_PLACES,
    coerce_enum,
    limit_places,
    require_fields,
)
from ledgerbook.logging_config import get_logger

logger = get_logger("invoice")

DEFAULT_LINE_TAX_RATE = Decimal("18")


def price_line(item: LineItem) -> PricedLine:
    """Tax and total for one line: tax on ``quantity * price``."""
    rate = item.tax_rate if item.tax_rate is not None else DEFAULT_LINE_TAX_RATE
    taxed = compute_tax(item.quantity * item.price, rate)
    return PricedLine(tax_amount=taxed.tax_amount, total=taxed.total)


def price_invoice(items: Iterable[LineItem]) -> PricedInvoice:
    """Price every line and derive the invoice totals.

    Pure: the same items always give the same result.
    """
    priced_items: list[InvoiceItem] = []
    sub_total = Decimal("0.00")
    tax_total = Decimal("0.00")
    for item in items:
        line = price_line(item)
        rate = item.tax_rate if item.tax_rate is not None else DEFAULT_LINE_TAX_RATE
        priced_items.append(
            InvoiceItem(
                description=item.description,
                quantity=item.quantity,
                price=item.price,
                tax_rate=rate,
                tax_amount=line.tax_amount,
                total=line.total,
            )
        )
        sub_total += to_money(item.quantity * item.price)
        tax_total += line.tax_amount

    return PricedInvoice(
        items=tuple(priced_items),
        sub_total=sub_total,
        tax_total=tax_total,
        grand_total=sub_total + tax_total,
    )


def check_line_precision(items: Iterable[LineItem]) -> None:
    """Raise ValidationError if a line holds more decimals than an item row keeps."""
    for item in items:
        limit_places(item.quantity, QUANTITY_PLACES, "quantity")
        limit_places(item.price, MONEY_PLACES, "price")
        if item.tax_rate is not None:
            limit_places(item.tax_rate, RATE_PLACES, "tax rate")


class InvoiceService:
    """Service for issuing and updating invoices."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_invoice(
        self,
        invoice_number: str,
        customer_name: str,
        customer_email: str,
        items: Sequence[LineItem],
        payment_method: PaymentMode | str,
        created_by: Optional[str] = None,
    ) -> int:
        """Create an invoice with computed totals.

        Args:
            invoice_number: Unique invoice number
            customer_name: Customer name
            customer_email: Customer email
            items: Line items to price
            payment_method: Cash, Card or Bank
            created_by: Opaque creator reference

        Returns:
            Invoice ID

        Raises:
            ValidationError: If a required field is missing or malformed
            ConflictError: If the invoice number already exists
        """
        require_fields(
            invoiceNumber=invoice_number,
            customerName=customer_name,
            customerEmail=customer_email,
            paymentMethod=payment_method,
        )
        method = coerce_enum(PaymentMode, payment_method, "payment method")
        invoice_number = invoice_number.strip()
        check_line_precision(items)

        if self.db.get_invoice_by_number(invoice_number) is not None:
            raise ConflictError(duplicate_invoice_number(invoice_number))

        priced = price_invoice(items)
        invoice_id = self.db.create_invoice(
            invoice_number=invoice_number,
            customer_name=customer_name.strip(),
            customer_email=customer_email.strip(),
            items=priced.items,
            sub_total=priced.sub_total,
            tax_total=priced.tax_total,
            grand_total=priced.grand_total,
            payment_method=method,
            status=InvoiceStatus.PENDING,
            created_by=created_by,
        )
        logger.info(
            "invoice created",
            extra={"invoice_id": invoice_id, "grand_total": priced.grand_total},
        )
        return invoice_id

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get invoice by ID."""
        return self.db.get_invoice(invoice_id)

    def require_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Get invoice by ID or raise NotFoundError."""
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(self, status: Optional[InvoiceStatus] = None) -> list[InvoiceEntity]:
        """List invoices, newest first."""
        return self.db.list_invoices(status=status)

    def update_invoice(self, invoice_id: int, update: InvoiceUpdate) -> InvoiceEntity:
        """Apply allow-listed fields to an invoice.

        A non-empty ``items`` replaces every line and re-prices the invoice;
        totals are never set from anything but the items.

        Args:
            invoice_id: Invoice ID
            update: Fields to change

        Returns:
            The updated invoice

        Raises:
            NotFoundError: If the invoice doesn't exist
            ValidationError: If a provided field is blank
        """
        self.require_invoice(invoice_id)

        fields: dict = {}
        for name in ("customer_name", "customer_email"):
            value = getattr(update, name)
            if value is not None:
                if not value.strip():
                    raise ValidationError(f"{name.replace('_', ' ').capitalize()} cannot be empty")
                fields[name] = value.strip()
        if update.payment_method is not None:
            fields["payment_method"] = update.payment_method
        if update.status is not None:
            fields["status"] = update.status
        if update.items:
            check_line_precision(update.items)
            priced = price_invoice(update.items)
            fields.update(
                items=priced.items,
                sub_total=priced.sub_total,
                tax_total=priced.tax_total,
                grand_total=priced.grand_total,
            )

        if fields:
            self.db.update_invoice(invoice_id, **fields)
            logger.info(
                "invoice updated",
                extra={"invoice_id": invoice_id, "fields": sorted(fields)},
            )
        return self.require_invoice(invoice_id)
