"""Thin helpers over the sqlite3 engine used by the alert storage classes."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alertstore.core.exceptions import DatabaseStateError


def file_exists(path: Path) -> bool:
    """Check whether a database file is present."""
    return path.is_file()


def _connect(path: Path) -> sqlite3.Connection:
    # Autocommit mode: transactions are opened explicitly by transaction()
    conn = sqlite3.connect(path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


def create_sqlite_database(path: Path) -> sqlite3.Connection:
    """Create a new database file and return a connection to it."""
    if file_exists(path):
        raise DatabaseStateError(f"File specified already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    return _connect(path)


def open_sqlite_database(path: Path) -> sqlite3.Connection:
    """Open an existing database file."""
    if not file_exists(path):
        raise DatabaseStateError(f"File specified does not exist: {path}")
    return _connect(path)


def close_sqlite_database(conn: sqlite3.Connection) -> None:
    conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block inside one transaction, rolling back if it raises.

    A block entered while a transaction is already open joins it.
    """
    if conn.in_transaction:
        yield conn
        return

    conn.execute("BEGIN")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Check whether a table exists."""
    cursor = conn.execute(
        "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    )
    return cursor.fetchone()[0] > 0


def table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    """Get the column names of a table."""
    cursor = conn.execute(f'PRAGMA table_info("{table}")')
    return {row["name"] for row in cursor.fetchall()}


def drop_table(conn: sqlite3.Connection, table: str) -> None:
    conn.execute(f'DROP TABLE "{table}"')


def clear_table(conn: sqlite3.Connection, table: str) -> None:
    """Delete every row of a table, keeping the table itself."""
    conn.execute(f'DELETE FROM "{table}"')


def get_table_max_int_value(conn: sqlite3.Connection, table: str, column: str) -> int:
    """Get the largest value of an integer column, or 0 for an empty table."""
    cursor = conn.execute(f'SELECT MAX("{column}") FROM "{table}"')
    value = cursor.fetchone()[0]
    return int(value) if value is not None else 0


def get_number_table_rows(conn: sqlite3.Connection, table: str) -> int:
    cursor = conn.execute(f'SELECT COUNT(*) FROM "{table}"')
    return int(cursor.fetchone()[0])
