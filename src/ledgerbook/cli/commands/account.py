"""Account management commands."""

import click

from ledgerbook.cli.context import amount_option, get_db, require
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.output import money, render_success
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import Account, AccountType, AccountUpdate
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.permissions import Operation
from ledgerbook.domain.validation import coerce_enum
from ledgerbook.utils.account_resolver import resolve_account

ACCOUNT_TYPES = [t.value for t in AccountType]


def _account_line(acc: Account) -> str:
    return (
        f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:9s} | "
        f"{acc.sub_type:15s} | Balance: {money(acc.balance)}"
    )


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME", required=False)
@click.option("--type", "account_type", help=f"Account classification ({', '.join(ACCOUNT_TYPES)})")
@click.option("--sub-type", help="Free-form sub-classification, e.g. 'Bank Account'")
@click.option("--amount", help="Opening balance")
@click.pass_context
def create_account(ctx, name: str | None, account_type: str | None, sub_type: str | None, amount: str | None):
    """Create a new account.

    Examples:
        ledgerbook --role admin account create "Main Bank" --type Asset --sub-type "Bank Account" --amount 1000
        ledgerbook --role accountant account create "Loan" --type Liability --sub-type "Loan" --amount 0
    """
    service = AccountService(get_db(ctx))

    try:
        require(ctx, Operation.CREATE_ACCOUNT)
        account_id = service.create_account(
            account_type=account_type,
            name=name,
            amount=amount_option(amount, "amount"),
            sub_type=sub_type,
        )
        account = service.require_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Created account '{account.name}' (ID: {account_id})",
        payload=account,
    )


@account_group.command("list")
@click.option("--type", "account_type", help="Only list accounts of this classification")
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List all accounts."""
    service = AccountService(get_db(ctx))

    try:
        require(ctx, Operation.LIST_ACCOUNTS)
        type_filter = (
            coerce_enum(AccountType, account_type, "account type") if account_type else None
        )
        accounts = service.list_accounts(account_type=type_filter)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not accounts:
        render_success(ctx, "No accounts found.", payload=[])
        return

    lines = ["-" * 80] + [_account_line(acc) for acc in accounts]
    render_success(ctx, f"Accounts ({len(accounts)}):", payload=accounts, lines=lines)


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show one account.

    ACCOUNT can be an account name or ID.
    """
    service = AccountService(get_db(ctx))

    try:
        require(ctx, Operation.LIST_ACCOUNTS)
        acc = service.require_account(resolve_account(service, account))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    lines = [
        f"  Type: {acc.account_type.value}",
        f"  Sub-type: {acc.sub_type}",
        f"  Opening balance: {money(acc.opening_balance)}",
        f"  Balance: {money(acc.balance)}",
        f"  Created: {acc.created_at:%Y-%m-%d %H:%M}",
    ]
    render_success(ctx, f"Account '{acc.name}' (ID: {acc.id})", payload=acc, lines=lines)


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", help=f"New classification ({', '.join(ACCOUNT_TYPES)})")
@click.option("--sub-type", help="New sub-classification")
@click.pass_context
def update_account(ctx, account: str, name: str | None, account_type: str | None, sub_type: str | None):
    """Update an account's name, classification or sub-type.

    ACCOUNT can be an account name or ID. The balance cannot be edited; it
    only changes through transactions.

    Examples:
        ledgerbook --role admin account update "Main Bank" --name "Operating Bank"
        ledgerbook --role admin account update 1 --sub-type "Current Account"
    """
    service = AccountService(get_db(ctx))

    try:
        require(ctx, Operation.UPDATE_ACCOUNT)
        account_id = resolve_account(service, account)
        update = AccountUpdate(
            name=name,
            account_type=(
                coerce_enum(AccountType, account_type, "account type") if account_type else None
            ),
            sub_type=sub_type,
        )
        updated = service.update_account(account_id, update)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(ctx, f"Updated account '{updated.name}' (ID: {account_id})", payload=updated)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if no active transactions reference it.
    Delete or move them to another account first.

    Examples:
        ledgerbook --role admin account delete "Old Bank"
        ledgerbook --role admin account delete 3 --yes
    """
    service = AccountService(get_db(ctx))

    try:
        require(ctx, Operation.DELETE_ACCOUNT)
        acc = service.require_account(resolve_account(service, account))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{acc.name}' (ID: {acc.id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(acc.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(ctx, f"Deleted account '{acc.name}'", payload={"id": acc.id})


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
