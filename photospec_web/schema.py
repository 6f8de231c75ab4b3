"""
Schema DDL and data loading for the photospec compound database.

The web app only ever reads the database; `photospec-store load`
(photospec_web.cli) builds it with these helpers.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterable, Optional, Tuple


def ensure_schema(conn: sqlite3.Connection) -> None:
    """
    Ensure the compound and spectrum tables exist.

    Args:
        conn: Writable SQLite connection.
    """
    stmts = [
        """
        CREATE TABLE IF NOT EXISTS compounds (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT,
            database_name TEXT,
            category_name TEXT,
            has_absorption_data TEXT NOT NULL DEFAULT '0',
            has_emission_data TEXT NOT NULL DEFAULT '0'
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS compounds_absorptions (
            compound_id TEXT NOT NULL,
            wavelength REAL NOT NULL,
            coefficient REAL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS compounds_emissions (
            compound_id TEXT NOT NULL,
            wavelength REAL NOT NULL,
            normalized REAL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_compounds_name ON compounds(name)",
        "CREATE INDEX IF NOT EXISTS idx_compounds_database ON compounds(database_name)",
        "CREATE INDEX IF NOT EXISTS idx_absorptions_compound ON compounds_absorptions(compound_id, wavelength)",
        "CREATE INDEX IF NOT EXISTS idx_emissions_compound ON compounds_emissions(compound_id, wavelength)",
    ]
    for stmt in stmts:
        conn.execute(stmt)
    conn.commit()


def load_compound(
    conn: sqlite3.Connection,
    compound: Dict[str, Any],
    *,
    absorption: Optional[Iterable[Tuple[float, Optional[float]]]] = None,
    emission: Optional[Iterable[Tuple[float, Optional[float]]]] = None,
) -> None:
    """
    Insert or replace a compound and its spectra.

    The has_*_data flags are derived from the spectra supplied.

    Args:
        conn: Writable SQLite connection with the schema in place.
        compound: Dict with at least "id" and "name".
        absorption: (wavelength, coefficient) pairs.
        emission: (wavelength, normalized) pairs.
    """
    if not compound.get("id") or not compound.get("name"):
        raise ValueError("compound requires 'id' and 'name'")
    compound_id = str(compound["id"])
    abs_rows = list(absorption or [])
    em_rows = list(emission or [])

    conn.execute(
        """
        INSERT OR REPLACE INTO compounds
            (id, name, slug, database_name, category_name,
             has_absorption_data, has_emission_data)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            compound_id,
            compound["name"],
            compound.get("slug"),
            compound.get("database_name"),
            compound.get("category_name"),
            "1" if abs_rows else "0",
            "1" if em_rows else "0",
        ),
    )
    conn.execute("DELETE FROM compounds_absorptions WHERE compound_id = ?", (compound_id,))
    conn.execute("DELETE FROM compounds_emissions WHERE compound_id = ?", (compound_id,))
    conn.executemany(
        "INSERT INTO compounds_absorptions (compound_id, wavelength, coefficient) VALUES (?, ?, ?)",
        [(compound_id, float(w), v) for w, v in abs_rows],
    )
    conn.executemany(
        "INSERT INTO compounds_emissions (compound_id, wavelength, normalized) VALUES (?, ?, ?)",
        [(compound_id, float(w), v) for w, v in em_rows],
    )
    conn.commit()
