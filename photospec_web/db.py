"""
Database helpers for photospec Web.

Provides read-only SQLite connection management, query helpers (q1/qa),
and state checking (db_state).
"""
from __future__ import annotations

import os
import sqlite3
from typing import Any, Dict, Optional, Set, Tuple

from flask import Flask, current_app

REQUIRED_TABLES = {"compounds", "compounds_absorptions", "compounds_emissions"}


def open_db_ro(path: str) -> sqlite3.Connection:
    """
    Open a read-only SQLite connection with dict row factory.

    Args:
        path: Path to the SQLite database file.

    Returns:
        sqlite3.Connection configured for read-only access with dict rows.
    """
    abspath = os.path.abspath(path)
    con = sqlite3.connect(f"file:{abspath}?mode=ro", uri=True, check_same_thread=False)
    con.execute("PRAGMA busy_timeout=2000;")
    con.row_factory = lambda cur, row: {d[0]: row[i] for i, d in enumerate(cur.description)}
    return con


def q1(con: sqlite3.Connection, sql: str, params: Any = ()) -> Optional[Dict[str, Any]]:
    """Execute SQL and return the first row as a dict, or None."""
    cur = con.execute(sql, params)
    return cur.fetchone()


def qa(con: sqlite3.Connection, sql: str, params: Any = ()) -> list:
    """Execute SQL and return all rows as a list of dicts."""
    cur = con.execute(sql, params)
    return cur.fetchall()


# ---------------------------------------------------------------------------
# App-level connection management (stored on Flask app instance)
# ---------------------------------------------------------------------------


def init_db(app: Flask, db_path: str) -> None:
    """Initialize database state on the Flask app instance."""
    app.config['PHOTOSPEC_DB_PATH'] = db_path
    app.config['PHOTOSPEC_DB_ERROR'] = None
    app.config['PHOTOSPEC_DB_CON'] = None

    # Attempt initial connection (tolerates failure if DB is missing)
    _ensure_con(app)


def _ensure_con(app: Flask) -> Optional[sqlite3.Connection]:
    """Lazy-open the read-only connection, caching on success."""
    if app.config.get('PHOTOSPEC_DB_CON') is not None:
        return app.config['PHOTOSPEC_DB_CON']
    try:
        app.config['PHOTOSPEC_DB_CON'] = open_db_ro(app.config['PHOTOSPEC_DB_PATH'])
        app.config['PHOTOSPEC_DB_ERROR'] = None
    except sqlite3.Error as exc:
        app.config['PHOTOSPEC_DB_CON'] = None
        app.config['PHOTOSPEC_DB_ERROR'] = str(exc)
    return app.config['PHOTOSPEC_DB_CON']


def reset_ro_connection(app: Flask) -> None:
    """Close and reset the cached read-only connection."""
    con = app.config.get('PHOTOSPEC_DB_CON')
    if con is not None:
        try:
            con.close()
        except sqlite3.Error:
            pass
    app.config['PHOTOSPEC_DB_CON'] = None


def get_con() -> sqlite3.Connection:
    """
    Get the current read-only database connection.

    Raises:
        RuntimeError: If the database connection is unavailable.
    """
    connection = _ensure_con(current_app)
    if connection is None:
        raise RuntimeError("database connection unavailable")
    return connection


def get_con_optional() -> Optional[sqlite3.Connection]:
    """Get the current connection, or None if unavailable."""
    return _ensure_con(current_app)


def db_state() -> Tuple[str, str]:
    """
    Check database readiness state.

    Returns:
        Tuple of (state, message) where state is one of:
        - "ready": Database is connected and has the compound tables
        - "waiting": Database opened but the compound tables are missing
        - "unavailable": Database could not be opened
    """
    connection = _ensure_con(current_app)
    if connection is None:
        return (
            "unavailable",
            current_app.config.get('PHOTOSPEC_DB_ERROR') or "Database file could not be opened in read-only mode.",
        )
    try:
        rows = qa(connection, "SELECT name FROM sqlite_master WHERE type='table'")
    except sqlite3.OperationalError as exc:
        reset_ro_connection(current_app)
        current_app.config['PHOTOSPEC_DB_ERROR'] = str(exc)
        return ("unavailable", f"Database could not be read ({exc}).")

    names: Set[str] = {str(row.get("name", "")).lower() for row in rows}
    if REQUIRED_TABLES.issubset(names):
        return ("ready", "")
    missing = ", ".join(sorted(REQUIRED_TABLES - names))
    return ("waiting", f"Database is missing tables: {missing}.")


def db_waiting_context(state: str, message: str) -> Dict[str, Any]:
    """Template context for the database waiting/unavailable states."""
    return {
        "db_status": state,
        "db_status_message": message,
        "db_path": current_app.config.get('PHOTOSPEC_DB_PATH'),
    }
