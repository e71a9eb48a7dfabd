"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.models import SQLITE_BUSY_TIMEOUT_SECONDS
from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "LEDGERBOOK_DB_PATH"
DB_URL_ENV = "LEDGERBOOK_DB_URL"


def create_sqlite_database(
    database_path: Optional[str] = None,
    busy_timeout: float = SQLITE_BUSY_TIMEOUT_SECONDS,
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERBOOK_DB_PATH
            environment variable, then defaults to ~/.ledgerbook/ledgerbook.db
        busy_timeout: Seconds to wait for another writer before giving up

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        # Default to ~/.ledgerbook/ledgerbook.db
        home = Path.home()
        db_dir = home / ".ledgerbook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerbook.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url, busy_timeout=busy_timeout)


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database from a SQLAlchemy URL, falling back to SQLite.

    Args:
        database_url: Any SQLAlchemy URL. If None, checks LEDGERBOOK_DB_URL.
        database_path: SQLite file used when no URL is configured.

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_url is None:
        database_url = os.environ.get(DB_URL_ENV)

    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
