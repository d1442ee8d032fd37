"""
Database Context Utilities

Provides centralized database connection management and transaction
scopes for SQLite operations throughout the ETL.
"""

import sqlite3
from typing import Generator
from contextlib import contextmanager
import logging


logger = logging.getLogger(__name__)


def connect(db_path: str, row_factory: bool = True) -> sqlite3.Connection:
    """
    Open a SQLite connection with foreign keys enforced.

    Args:
        db_path: Path to SQLite database file
        row_factory: If True, use Row factory for dict-like access

    Returns:
        SQLite connection object
    """
    conn = sqlite3.connect(db_path)

    if row_factory:
        conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db_connection(db_path: str, row_factory: bool = True) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for SQLite database connections.

    Handles connection lifecycle, commit/rollback, and cleanup automatically.

    Args:
        db_path: Path to SQLite database file
        row_factory: If True, use Row factory for dict-like access

    Yields:
        SQLite connection object

    Example:
        with get_db_connection('gaastat.db') as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM players")
            results = cursor.fetchall()
    """
    conn = None
    try:
        conn = connect(db_path, row_factory)

        yield conn

        conn.commit()

    except Exception as e:
        if conn:
            conn.rollback()
        logger.error(f"Database error: {e}")
        raise

    finally:
        if conn:
            conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """
    Explicit transaction scope on an open connection.

    Commits on success, rolls back and re-raises on any exception.

    Example:
        with transaction(conn):
            conn.execute("INSERT INTO matches ...")
            conn.execute("INSERT INTO match_team_statistics ...")
    """
    if conn.in_transaction:
        conn.commit()

    conn.execute("BEGIN")
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()


@contextmanager
def savepoint(conn: sqlite3.Connection, name: str = "sp") -> Generator[sqlite3.Connection, None, None]:
    """
    Nested savepoint inside an open transaction.

    A failure rolls back only the work done since the savepoint; the
    enclosing transaction stays usable.
    """
    conn.execute(f"SAVEPOINT {name}")
    try:
        yield conn
    except Exception:
        conn.execute(f"ROLLBACK TO SAVEPOINT {name}")
        conn.execute(f"RELEASE SAVEPOINT {name}")
        raise
    else:
        conn.execute(f"RELEASE SAVEPOINT {name}")
