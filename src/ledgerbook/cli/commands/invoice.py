"""Invoice commands."""

import click

from ledgerbook.cli.context import get_db, require
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.output import money, render_success
from ledgerbook.domain.entities import Invoice, InvoiceStatus, InvoiceUpdate, LineItem, PaymentMode
from ledgerbook.domain.errors import DomainError, ValidationError
from ledgerbook.domain.invoice import InvoiceService
from ledgerbook.domain.permissions import Operation
from ledgerbook.domain.validation import coerce_enum
from ledgerbook.utils.amount_parser import parse_line_item

ITEM_HELP = (
    "Line item as DESCRIPTION:QTY:PRICE[:TAX_RATE] (tax rate defaults to 18). "
    "Repeat for several lines."
)


def _parse_items(items: tuple[str, ...]) -> tuple[LineItem, ...]:
    parsed = []
    for spec in items:
        try:
            parsed.append(parse_line_item(spec))
        except ValueError as e:
            raise ValidationError(str(e)) from None
    return tuple(parsed)


def _invoice_lines(invoice: Invoice) -> list[str]:
    lines = [
        f"  Customer: {invoice.customer_name} <{invoice.customer_email}>",
        f"  Status: {invoice.status.value}",
        f"  Payment method: {invoice.payment_method.value}",
        "  Items:",
    ]
    for item in invoice.items:
        lines.append(
            f"    {item.description[:30]:30s} {item.quantity:>8} x {money(item.price):>10s} "
            f"+ {item.tax_rate}% tax = {money(item.total):>12s}"
        )
    lines += [
        f"  Sub-total: {money(invoice.sub_total)}",
        f"  Tax: {money(invoice.tax_total)}",
        f"  Grand total: {money(invoice.grand_total)}",
    ]
    return lines


@click.group()
def invoice_group():
    """Issue and manage invoices."""
    pass


@invoice_group.command("create")
@click.argument("invoice_number", required=False)
@click.option("--customer-name", help="Customer name")
@click.option("--customer-email", help="Customer email")
@click.option("--item", "items", multiple=True, help=ITEM_HELP)
@click.option("--payment-method", help="Cash, Card or Bank")
@click.pass_context
def create_invoice(
    ctx,
    invoice_number: str | None,
    customer_name: str | None,
    customer_email: str | None,
    items: tuple[str, ...],
    payment_method: str | None,
):
    """Create an invoice; totals are computed from the items.

    Examples:
        ledgerbook --role accountant invoice create INV-001 --customer-name "Acme" \\
            --customer-email billing@acme.test --item "Widget:2:100" --payment-method Bank
    """
    service = InvoiceService(get_db(ctx))

    try:
        caller = require(ctx, Operation.CREATE_INVOICE)
        invoice_id = service.create_invoice(
            invoice_number=invoice_number,
            customer_name=customer_name,
            customer_email=customer_email,
            items=_parse_items(items),
            payment_method=payment_method,
            created_by=caller.user_id,
        )
        invoice = service.require_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Created invoice {invoice.invoice_number} (ID: {invoice_id})",
        payload=invoice,
        lines=_invoice_lines(invoice),
    )


@invoice_group.command("list")
@click.option("--status", help="Only Pending or Paid invoices")
@click.pass_context
def list_invoices(ctx, status: str | None):
    """List invoices, newest first."""
    service = InvoiceService(get_db(ctx))

    try:
        require(ctx, Operation.LIST_INVOICES)
        invoices = service.list_invoices(
            status=coerce_enum(InvoiceStatus, status, "status") if status else None
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not invoices:
        render_success(ctx, "No invoices found.", payload=[])
        return

    lines = ["-" * 80] + [
        f"ID: {inv.id:3d} | {inv.invoice_number:12s} | {inv.customer_name[:24]:24s} | "
        f"{inv.status.value:7s} | {money(inv.grand_total):>12s}"
        for inv in invoices
    ]
    render_success(ctx, f"Invoices ({len(invoices)}):", payload=invoices, lines=lines)


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int):
    """Show one invoice with its items."""
    service = InvoiceService(get_db(ctx))

    try:
        require(ctx, Operation.LIST_INVOICES)
        invoice = service.require_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Invoice {invoice.invoice_number} (ID: {invoice.id})",
        payload=invoice,
        lines=_invoice_lines(invoice),
    )


@invoice_group.command("update")
@click.argument("invoice_id", type=int)
@click.option("--customer-name", help="New customer name")
@click.option("--customer-email", help="New customer email")
@click.option("--item", "items", multiple=True, help=f"{ITEM_HELP} Replaces all existing lines.")
@click.option("--payment-method", help="Cash, Card or Bank")
@click.option("--status", help="Pending or Paid")
@click.pass_context
def update_invoice(
    ctx,
    invoice_id: int,
    customer_name: str | None,
    customer_email: str | None,
    items: tuple[str, ...],
    payment_method: str | None,
    status: str | None,
):
    """Update an invoice.

    Giving any --item replaces every line and re-prices the invoice; without
    --item the existing lines and totals are kept.

    Examples:
        ledgerbook --role accountant invoice update 1 --status Paid
        ledgerbook --role accountant invoice update 1 --item "Widget:3:100" --item "Setup:1:50:0"
    """
    service = InvoiceService(get_db(ctx))

    try:
        require(ctx, Operation.UPDATE_INVOICE)
        update = InvoiceUpdate(
            customer_name=customer_name,
            customer_email=customer_email,
            items=_parse_items(items) or None,
            payment_method=(
                coerce_enum(PaymentMode, payment_method, "payment method") if payment_method else None
            ),
            status=coerce_enum(InvoiceStatus, status, "status") if status else None,
        )
        invoice = service.update_invoice(invoice_id, update)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Updated invoice {invoice.invoice_number} (ID: {invoice.id})",
        payload=invoice,
        lines=_invoice_lines(invoice),
    )


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
