"""Transaction management commands."""

import click

from ledgerbook.cli.context import (
    amount_option,
    date_option,
    get_db,
    require,
    resolve_date_range,
)
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.output import money, render_success
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import (
    PaymentMode,
    Transaction,
    TransactionType,
    TransactionUpdate,
)
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.permissions import Operation
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.domain.validation import coerce_enum
from ledgerbook.utils.account_resolver import resolve_account
from ledgerbook.utils.date_parser import PERIODS

TRANSACTION_TYPES = ", ".join(t.value for t in TransactionType)
PAYMENT_MODES = ", ".join(m.value for m in PaymentMode)


def _transaction_line(txn: Transaction, accounts: dict[int, str]) -> str:
    account_name = accounts.get(txn.account_id, "Unknown")
    deleted = " [deleted]" if txn.deleted else ""
    return (
        f"{txn.id:4d} | {txn.date} | {txn.type.value:10s} | {txn.category[:18]:18s} | "
        f"{money(txn.total):>12s} | {txn.payment_mode.value:4s} | {account_name[:20]}{deleted}"
    )


def _detail_lines(txn: Transaction) -> list[str]:
    lines = [
        f"  Date: {txn.date}",
        f"  Type: {txn.type.value}",
        f"  Category: {txn.category}",
        f"  Amount: {money(txn.amount)}",
        f"  Tax: {money(txn.tax_amount)} at {txn.tax_rate}%",
        f"  Total: {money(txn.total)}",
        f"  Payment mode: {txn.payment_mode.value}",
        f"  Account ID: {txn.account_id}",
    ]
    if txn.description:
        lines.append(f"  Description: {txn.description}")
    if txn.created_by:
        lines.append(f"  Created by: {txn.created_by}")
    if txn.deleted:
        lines.append("  Deleted: yes")
    return lines


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "txn_type", help=f"Transaction type ({TRANSACTION_TYPES})")
@click.option("--category", help="Category label, e.g. 'Sales' or 'Rent'")
@click.option("--amount", help="Pre-tax amount (e.g., 1000 or 1,250.50)")
@click.option("--tax-rate", help="Tax rate in percent (default 0)")
@click.option("--payment-mode", help=f"Payment mode ({PAYMENT_MODES})")
@click.option("--account", help="Account name or ID")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str | None,
    category: str | None,
    amount: str | None,
    tax_rate: str | None,
    payment_mode: str | None,
    account: str | None,
    txn_date: str | None,
    description: str | None,
) -> None:
    """Record a transaction and update the account balance.

    Income, Loan and Investment add the total (amount plus tax) to the
    account balance; Expense subtracts it.

    Examples:
        ledgerbook --role accountant transaction add --type Income --category Sales \\
            --amount 1000 --tax-rate 18 --payment-mode Bank --account "Main Bank"
        ledgerbook --role accountant transaction add --type Expense --category Rent \\
            --amount 500 --payment-mode Cash --account 1 --date yesterday
    """
    db = get_db(ctx)
    service = TransactionService(db)
    account_service = AccountService(db)

    try:
        caller = require(ctx, Operation.CREATE_TRANSACTION)
        account_id = resolve_account(account_service, account) if account else None
        transaction_id = service.create_transaction(
            type=txn_type,
            category=category,
            amount=amount_option(amount, "amount"),
            tax_rate=amount_option(tax_rate, "tax rate"),
            payment_mode=payment_mode,
            account_id=account_id,
            date=date_option(txn_date, "date"),
            description=description,
            created_by=caller.user_id,
        )
        txn = service.require_transaction(transaction_id)
        balance = account_service.require_account(txn.account_id).balance
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Added transaction {transaction_id}: {txn.type.value} {money(txn.total)}",
        payload=txn,
        lines=[f"Account balance: {money(balance)}"],
    )


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", help=f"Only this transaction type ({TRANSACTION_TYPES})")
@click.option("--payment-mode", help=f"Only this payment mode ({PAYMENT_MODES})")
@click.option("--include-deleted", is_flag=True, help="Include soft-deleted transactions")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    account: str | None,
    txn_type: str | None,
    payment_mode: str | None,
    include_deleted: bool,
):
    """View transactions with optional filters, newest first."""
    db = get_db(ctx)
    service = TransactionService(db)
    account_service = AccountService(db)

    try:
        require(ctx, Operation.LIST_TRANSACTIONS)
        start, end = resolve_date_range(start_date, end_date, period)
        transactions = service.list_transactions(
            start_date=start,
            end_date=end,
            account_id=resolve_account(account_service, account) if account else None,
            transaction_type=(
                coerce_enum(TransactionType, txn_type, "transaction type") if txn_type else None
            ),
            payment_mode=(
                coerce_enum(PaymentMode, payment_mode, "payment mode") if payment_mode else None
            ),
            include_deleted=include_deleted,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        render_success(ctx, "No transactions found.", payload=[])
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    lines = ["-" * 100] + [_transaction_line(txn, accounts) for txn in transactions]
    render_success(
        ctx,
        f"Found {len(transactions)} transaction(s):",
        payload=transactions,
        lines=lines,
    )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.option("--include-deleted", is_flag=True, help="Also show a soft-deleted transaction")
@click.pass_context
def show_transaction(ctx, transaction_id: int, include_deleted: bool) -> None:
    """Show one transaction."""
    service = TransactionService(get_db(ctx))

    try:
        require(ctx, Operation.LIST_TRANSACTIONS)
        txn = service.get_transaction(transaction_id, include_deleted=include_deleted)
        if txn is None:
            txn = service.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(ctx, f"Transaction ID: {txn.id}", payload=txn, lines=_detail_lines(txn))


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--type", "txn_type", help=f"New transaction type ({TRANSACTION_TYPES})")
@click.option("--category", help="New category label")
@click.option("--amount", help="New pre-tax amount")
@click.option("--tax-rate", help="New tax rate in percent")
@click.option("--payment-mode", help=f"New payment mode ({PAYMENT_MODES})")
@click.option("--account", help="Move to this account (name or ID)")
@click.option("--date", "txn_date", help="New transaction date")
@click.option("--description", help="New description")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    txn_type: str | None,
    category: str | None,
    amount: str | None,
    tax_rate: str | None,
    payment_mode: str | None,
    account: str | None,
    txn_date: str | None,
    description: str | None,
) -> None:
    """Edit a transaction.

    Updates only the fields that are provided. The old effect on the account
    balance is reversed and the new one applied in the same unit, so editing
    the amount, type or account keeps balances consistent.

    Examples:
        ledgerbook --role accountant transaction edit 1 --amount 1200
        ledgerbook --role accountant transaction edit 1 --type Expense --account "Petty Cash"
    """
    db = get_db(ctx)
    service = TransactionService(db)
    account_service = AccountService(db)

    try:
        require(ctx, Operation.EDIT_TRANSACTION)
        update = TransactionUpdate(
            type=coerce_enum(TransactionType, txn_type, "transaction type") if txn_type else None,
            category=category,
            amount=amount_option(amount, "amount"),
            tax_rate=amount_option(tax_rate, "tax rate"),
            payment_mode=(
                coerce_enum(PaymentMode, payment_mode, "payment mode") if payment_mode else None
            ),
            account_id=resolve_account(account_service, account) if account else None,
            date=date_option(txn_date, "date"),
            description=description,
        )
        txn = service.edit_transaction(transaction_id, update)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Updated transaction {transaction_id}",
        payload=txn,
        lines=_detail_lines(txn),
    )


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Soft-delete a transaction and reverse its balance effect.

    The record is kept but hidden from listings and reports.

    Examples:
        ledgerbook --role admin transaction delete 123
        ledgerbook --role admin transaction delete 123 --yes
    """
    service = TransactionService(get_db(ctx))

    try:
        require(ctx, Operation.DELETE_TRANSACTION)
        txn = service.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes:
        click.echo(f"Transaction {txn.id}: {txn.date} {txn.type.value} {money(txn.total)} ({txn.category})")
        if not click.confirm("Delete this transaction?"):
            click.echo("Deletion cancelled.")
            return

    try:
        service.soft_delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(ctx, f"Deleted transaction {transaction_id}", payload={"id": transaction_id})


@transaction_group.command("purge")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def purge_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Permanently remove a transaction, deleted or not.

    An active transaction has its balance effect reversed first.
    """
    service = TransactionService(get_db(ctx))

    try:
        require(ctx, Operation.PURGE_TRANSACTION)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(f"Permanently remove transaction {transaction_id}?"):
        click.echo("Purge cancelled.")
        return

    try:
        service.purge_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(ctx, f"Purged transaction {transaction_id}", payload={"id": transaction_id})


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
