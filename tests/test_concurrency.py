"""Tests for optimistic concurrency control between independent database handles."""

import pytest
from decimal import Decimal

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import ConcurrencyError, DependencyError, PersistenceError
from ledgerbook.domain.transaction import TransactionService


@pytest.fixture
def other_db(temp_db):
    """A second handle on the same database file, like another process."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    yield db
    db.disconnect()


def test_lost_update_is_detected(temp_db, other_db, sample_account):
    """A balance written from a stale read is rejected instead of overwriting."""
    other_service = TransactionService(other_db)

    with pytest.raises(ConcurrencyError) as exc_info:
        with temp_db.atomic() as unit:
            stale = unit.lock_account(sample_account.id)
            other_service.create_transaction(
                type="Income", category="Sales", amount="100", payment_mode="Bank",
                account_id=sample_account.id,
            )
            unit.set_account_balance(sample_account.id, stale.balance + Decimal("1"))

    assert exc_info.value.retryable
    assert isinstance(exc_info.value, PersistenceError)
    assert exc_info.value.status_code == 500
    # The committed concurrent write survives
    assert AccountService(temp_db).get_account(sample_account.id).balance == Decimal("1100.00")


def test_sequential_writers_on_separate_handles(temp_db, other_db, sample_account):
    """Each handle sees the other's committed balance before applying its own delta."""
    first = TransactionService(temp_db)
    second = TransactionService(other_db)

    for _ in range(3):
        first.create_transaction(
            type="Income", category="Sales", amount="10", payment_mode="Cash",
            account_id=sample_account.id,
        )
        second.create_transaction(
            type="Expense", category="Supplies", amount="4", payment_mode="Cash",
            account_id=sample_account.id,
        )

    balance = AccountService(other_db).get_account(sample_account.id).balance
    assert balance == Decimal("1018.00")


def test_delete_after_concurrent_reference_is_blocked(temp_db, other_db, sample_account):
    """A transaction committed by another handle blocks account deletion."""
    TransactionService(other_db).create_transaction(
        type="Income", category="Sales", amount="1", payment_mode="Cash",
        account_id=sample_account.id,
    )

    with pytest.raises(DependencyError) as exc_info:
        AccountService(temp_db).delete_account(sample_account.id)

    assert exc_info.value.status_code == 400
    assert AccountService(temp_db).get_account(sample_account.id) is not None


def test_lock_wait_timeout_is_retryable(temp_db, sample_account):
    """A writer that cannot get the lock in time gets a retryable error and writes nothing."""
    impatient = create_sqlite_database(database_path=temp_db.database_path, busy_timeout=0.1)
    try:
        with temp_db.atomic() as unit:
            unit.set_account_balance(sample_account.id, Decimal("1001.00"))
            unit.session.flush()

            with pytest.raises(ConcurrencyError) as exc_info:
                TransactionService(impatient).create_transaction(
                    type="Income", category="Sales", amount="5", payment_mode="Cash",
                    account_id=sample_account.id,
                )

        assert exc_info.value.retryable
        assert exc_info.value.status_code == 500
        assert TransactionService(impatient).list_transactions() == []
        assert AccountService(impatient).get_account(sample_account.id).balance == Decimal("1001.00")
    finally:
        impatient.disconnect()
