"""Database layer for fiscoets application."""

from fiscoets.database.base import Database
from fiscoets.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
