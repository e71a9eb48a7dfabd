"""Database layer for ledgerbook application."""

from ledgerbook.database.base import AtomicUnit, Database
from ledgerbook.database.factories import create_database, create_sqlite_database

__all__ = ["AtomicUnit", "Database", "create_database", "create_sqlite_database"]
