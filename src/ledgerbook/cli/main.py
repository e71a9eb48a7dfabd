"""Main CLI entry point."""

import click

from ledgerbook.database.factories import create_database
from ledgerbook.domain.entities import CallerContext
from ledgerbook.logging_config import LogContext, configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import account, invoice, report, transaction

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    help="Path to SQLite database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--db-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="LEDGERBOOK_DB_URL",
)
@click.option("--user", help="Acting user reference", envvar="LEDGERBOOK_USER")
@click.option(
    "--role",
    default="staff",
    show_default=True,
    help="Acting role (admin, accountant, staff)",
    envvar="LEDGERBOOK_ROLE",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERBOOK_LOG_LEVEL",
)
@click.option("--log-json", is_flag=True, help="Emit log records as JSON lines", envvar="LEDGERBOOK_LOG_JSON")
@click.option("--json", "json_output", is_flag=True, help="Print responses as JSON")
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    db_url: str | None,
    user: str | None,
    role: str,
    log_level: str,
    log_json: bool,
    json_output: bool,
):
    """Ledgerbook - small-business accounting.

    Track accounts, record transactions with tax, issue invoices and run
    profit and loss, balance sheet, cash flow and tax reports.
    """
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output

    configure_logging(level=log_level, json_output=log_json)
    LogContext.set(actor_id=user, role=role)
    ctx.obj["caller"] = CallerContext(user_id=user, role=role)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=db_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
invoice.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
