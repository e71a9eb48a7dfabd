"""Tests for the Database interface and its atomic units."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from ledgerbook.database.factories import create_database, create_sqlite_database
from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerbook.domain import entities
from ledgerbook.domain.entities import AccountType, InvoiceItem, PaymentMode, TransactionType
from ledgerbook.domain.errors import ConcurrencyError, ConflictError, NotFoundError, PersistenceError


def _add_transaction(db, account_id, type=TransactionType.INCOME, amount="100", when=None, deleted=False):
    with db.atomic() as unit:
        return unit.add_transaction(
            type=type,
            category="Sales",
            amount=Decimal(amount),
            tax_rate=Decimal("0"),
            tax_amount=Decimal("0"),
            total=Decimal(amount),
            payment_mode=PaymentMode.BANK,
            account_id=account_id,
            date=when or date(2024, 1, 15),
            deleted=deleted,
        )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        """Test that get_account returns a domain Account entity."""
        account_id = temp_db.create_account(
            name="Main Bank",
            account_type=AccountType.ASSET,
            sub_type="Bank Account",
            opening_balance=Decimal("100.00"),
        )

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.id == account_id
        assert account.account_type == AccountType.ASSET
        assert account.balance == Decimal("100.00")
        assert account.opening_balance == Decimal("100.00")
        assert isinstance(account.created_at, datetime)

    def test_list_accounts_filters_by_type(self, temp_db):
        temp_db.create_account("Bank", AccountType.ASSET, "Bank Account", Decimal("0"))
        temp_db.create_account("Loan", AccountType.LIABILITY, "Loan", Decimal("0"))

        assets = temp_db.list_accounts(account_type=AccountType.ASSET)

        assert [acc.name for acc in assets] == ["Bank"]
        assert len(temp_db.list_accounts()) == 2

    def test_duplicate_account_name_is_conflict(self, temp_db):
        """The unique constraint surfaces as ConflictError."""
        temp_db.create_account("Bank", AccountType.ASSET, "Bank Account", Decimal("0"))
        with pytest.raises(ConflictError):
            temp_db.create_account("Bank", AccountType.ASSET, "Bank Account", Decimal("0"))

    def test_list_transactions_returns_newest_first(self, temp_db, sample_account):
        _add_transaction(temp_db, sample_account.id, when=date(2024, 1, 1))
        _add_transaction(temp_db, sample_account.id, when=date(2024, 2, 1))

        transactions = temp_db.list_transactions()

        assert [txn.date for txn in transactions] == [date(2024, 2, 1), date(2024, 1, 1)]
        assert all(isinstance(txn, entities.Transaction) for txn in transactions)

    def test_list_transactions_hides_deleted(self, temp_db, sample_account):
        _add_transaction(temp_db, sample_account.id)
        _add_transaction(temp_db, sample_account.id, deleted=True)

        assert len(temp_db.list_transactions()) == 1
        assert len(temp_db.list_transactions(include_deleted=True)) == 2

    def test_invoice_items_round_trip_in_order(self, temp_db):
        items = [
            InvoiceItem("A", Decimal("1"), Decimal("10"), Decimal("18"), Decimal("1.80"), Decimal("11.80")),
            InvoiceItem("B", Decimal("2"), Decimal("5"), Decimal("0"), Decimal("0.00"), Decimal("10.00")),
        ]
        invoice_id = temp_db.create_invoice(
            invoice_number="INV-1",
            customer_name="Acme",
            customer_email="a@acme.test",
            items=items,
            sub_total=Decimal("20.00"),
            tax_total=Decimal("1.80"),
            grand_total=Decimal("21.80"),
            payment_method=PaymentMode.CARD,
        )

        invoice = temp_db.get_invoice(invoice_id)

        assert isinstance(invoice, entities.Invoice)
        assert [item.description for item in invoice.items] == ["A", "B"]
        assert invoice.status == entities.InvoiceStatus.PENDING

    def test_update_invoice_rejects_unknown_fields(self, temp_db):
        with pytest.raises(ValueError, match="Unknown invoice fields"):
            temp_db.update_invoice(1, grand_totl=Decimal("1"))

    def test_update_missing_invoice(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_invoice(42, customer_name="Nobody")

    def test_sum_transactions_by_type_excludes_deleted(self, temp_db, sample_account):
        _add_transaction(temp_db, sample_account.id, amount="100")
        _add_transaction(temp_db, sample_account.id, amount="50")
        _add_transaction(temp_db, sample_account.id, type=TransactionType.EXPENSE, amount="30")
        _add_transaction(temp_db, sample_account.id, amount="999", deleted=True)

        sums = temp_db.sum_transactions_by_type("amount")

        assert sums[TransactionType.INCOME] == Decimal("150")
        assert sums[TransactionType.EXPENSE] == Decimal("30")
        assert TransactionType.LOAN not in sums

    def test_sum_rejects_unknown_field(self, temp_db):
        with pytest.raises(ValueError):
            temp_db.sum_transactions_by_type("category")


class TestAtomicUnit:
    """Tests for Database.atomic()."""

    def test_commit_on_normal_exit(self, temp_db, sample_account):
        with temp_db.atomic() as unit:
            unit.set_account_balance(sample_account.id, Decimal("5.00"))

        assert temp_db.get_account(sample_account.id).balance == Decimal("5.00")

    def test_rollback_on_exception(self, temp_db, sample_account):
        """Nothing staged in a failed unit becomes visible."""
        with pytest.raises(RuntimeError):
            with temp_db.atomic() as unit:
                unit.set_account_balance(sample_account.id, Decimal("5.00"))
                _add_transaction(temp_db, sample_account.id)
                raise RuntimeError("boom")

        assert temp_db.get_account(sample_account.id).balance == Decimal("1000.00")
        assert temp_db.list_transactions() == []

    def test_nested_atomic_joins_outer_unit(self, temp_db, sample_account):
        with temp_db.atomic() as outer:
            with temp_db.atomic() as inner:
                assert inner is outer

    def test_foreign_keys_are_enforced(self, temp_db):
        """Inserting a transaction for a missing account violates the FK."""
        with pytest.raises(ConflictError, match="Constraint violated"):
            _add_transaction(temp_db, account_id=999)

    def test_lock_missing_account_returns_none(self, temp_db):
        with temp_db.atomic() as unit:
            assert unit.lock_account(12345) is None

    def test_store_failure_hides_statement(self, temp_db, sample_account):
        """The raised error carries a short message, not the SQL and its parameters."""
        with pytest.raises(PersistenceError) as exc_info:
            with temp_db.atomic() as unit:
                unit.set_account_balance(sample_account.id, Decimal("5.00"))
                raise OperationalError(
                    "UPDATE accounts SET balance=?", (Decimal("5.00"),), Exception("disk I/O error")
                )

        assert str(exc_info.value) == "Database operation failed"
        assert not exc_info.value.retryable
        assert temp_db.get_account(sample_account.id).balance == Decimal("1000.00")

    def test_lock_timeout_is_retryable(self, temp_db):
        with pytest.raises(ConcurrencyError) as exc_info:
            with temp_db.atomic():
                raise OperationalError("INSERT INTO transactions", (), Exception("database is locked"))

        assert exc_info.value.retryable
        assert "INSERT" not in str(exc_info.value)


class TestFactories:
    """Tests for database factory functions."""

    def test_create_sqlite_database_uses_env(self, tmp_path, monkeypatch):
        path = tmp_path / "env.db"
        monkeypatch.setenv("LEDGERBOOK_DB_PATH", str(path))

        db = create_sqlite_database()

        assert isinstance(db, SQLAlchemyDatabase)
        assert db.database_url == f"sqlite:///{path}"

    def test_create_database_prefers_url(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEDGERBOOK_DB_URL", f"sqlite:///{tmp_path / 'url.db'}")

        db = create_database(database_path=str(tmp_path / "path.db"))

        assert db.database_url.endswith("url.db")
