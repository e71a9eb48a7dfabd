"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.invoice import InvoiceService
from ledgerbook.domain.report import ReportService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.logging_config import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    """The CLI configures logging once per process; undo it between tests."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create an Asset account with an opening balance of 1000."""
    account_id = account_service.create_account(
        account_type="Asset", name="Main Bank", amount=Decimal("1000"), sub_type="Bank Account"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def second_account(account_service):
    """Create a second Asset account with a zero opening balance."""
    account_id = account_service.create_account(
        account_type="Asset", name="Petty Cash", amount=Decimal("0"), sub_type="Cash"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def run_cli(cli_runner, temp_db):
    """Invoke the CLI against the temporary database under a given role."""
    from ledgerbook.cli.main import cli

    def invoke(*args, role="admin", user="user-1", json_output=False, input=None):
        base = ["--db-path", temp_db.database_path, "--role", role, "--user", user]
        if json_output:
            base.append("--json")
        return cli_runner.invoke(cli, base + list(args), input=input)

    return invoke
