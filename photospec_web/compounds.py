"""
Compound and spectrum queries for photospec Web.

All functions take an open connection (see photospec_web.db) and return plain
dicts/lists ready for jsonify or templates.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from photospec_web.config import BROWSE_LIMIT, SEARCH_LIMIT
from photospec_web.db import q1, qa

SPECTRUM_TYPES = ("absorption", "emission")

_COMPOUND_COLUMNS = """
    id, name, slug, database_name, category_name,
    has_absorption_data, has_emission_data
"""

_HAS_DATA = "(has_absorption_data = '1' OR has_emission_data = '1')"

# spectrum type -> (table, value column)
_SPECTRUM_TABLES: Dict[str, Tuple[str, str]] = {
    "absorption": ("compounds_absorptions", "coefficient"),
    "emission": ("compounds_emissions", "normalized"),
}


def _like(query: str) -> str:
    return f"%{query.strip()}%"


def list_compounds(con: sqlite3.Connection) -> List[Dict[str, Any]]:
    """All compounds with absorption or emission data, ordered by name."""
    return qa(
        con,
        f"""
        SELECT {_COMPOUND_COLUMNS}
        FROM compounds
        WHERE {_HAS_DATA}
        ORDER BY name
        """,
    )


def search_compounds(con: sqlite3.Connection, query: str, limit: int = SEARCH_LIMIT) -> List[Dict[str, Any]]:
    """Compounds whose name or id contains ``query``."""
    term = _like(query)
    return qa(
        con,
        f"""
        SELECT {_COMPOUND_COLUMNS}
        FROM compounds
        WHERE {_HAS_DATA}
          AND (name LIKE ? OR id LIKE ?)
        ORDER BY name
        LIMIT ?
        """,
        (term, term, int(limit)),
    )


def get_compound(con: sqlite3.Connection, compound_id: str) -> Optional[Dict[str, Any]]:
    return q1(
        con,
        f"SELECT {_COMPOUND_COLUMNS} FROM compounds WHERE id = ?",
        (str(compound_id),),
    )


def list_databases(con: sqlite3.Connection) -> List[Dict[str, Any]]:
    """Source databases with the number of compounds that carry spectra."""
    return qa(
        con,
        f"""
        SELECT database_name AS name, COUNT(*) AS compound_count
        FROM compounds
        WHERE {_HAS_DATA} AND database_name IS NOT NULL
        GROUP BY database_name
        ORDER BY database_name
        """,
    )


def compounds_in_database(
    con: sqlite3.Connection,
    database_name: str,
    limit: int = BROWSE_LIMIT,
) -> List[Dict[str, Any]]:
    return qa(
        con,
        f"""
        SELECT {_COMPOUND_COLUMNS}
        FROM compounds
        WHERE {_HAS_DATA} AND database_name = ?
        ORDER BY name
        LIMIT ?
        """,
        (database_name, int(limit)),
    )


def search_compounds_in_database(
    con: sqlite3.Connection,
    database_name: str,
    query: str,
    limit: int = SEARCH_LIMIT,
) -> List[Dict[str, Any]]:
    term = _like(query)
    return qa(
        con,
        f"""
        SELECT {_COMPOUND_COLUMNS}
        FROM compounds
        WHERE {_HAS_DATA} AND database_name = ?
          AND (name LIKE ? OR id LIKE ?)
        ORDER BY name
        LIMIT ?
        """,
        (database_name, term, term, int(limit)),
    )


def get_spectrum(
    con: sqlite3.Connection,
    compound_id: str,
    spectrum_type: str,
) -> List[Tuple[float, float]]:
    """
    Ordered (wavelength, value) pairs for one compound spectrum.

    Absorption values are molar coefficients, emission values are the stored
    normalized intensities. Rows without a value are skipped; a compound
    without data yields an empty list.

    Raises:
        ValueError: If spectrum_type is not "absorption" or "emission".
    """
    if spectrum_type not in _SPECTRUM_TABLES:
        raise ValueError(f"invalid spectrum type {spectrum_type!r}; use 'absorption' or 'emission'")
    table, column = _SPECTRUM_TABLES[spectrum_type]
    rows = qa(
        con,
        f"""
        SELECT wavelength, {column} AS value
        FROM {table}
        WHERE compound_id = ? AND {column} IS NOT NULL
        ORDER BY wavelength
        """,
        (str(compound_id),),
    )
    return [(float(r["wavelength"]), float(r["value"])) for r in rows]


def get_spectrum_rows(
    con: sqlite3.Connection,
    compound_id: str,
    spectrum_type: str,
) -> List[Dict[str, Any]]:
    """Raw rows: compound_id, wavelength and coefficient or normalized."""
    if spectrum_type not in _SPECTRUM_TABLES:
        raise ValueError(f"invalid spectrum type {spectrum_type!r}; use 'absorption' or 'emission'")
    table, column = _SPECTRUM_TABLES[spectrum_type]
    return qa(
        con,
        f"""
        SELECT compound_id, wavelength, {column}
        FROM {table}
        WHERE compound_id = ?
        ORDER BY wavelength
        """,
        (str(compound_id),),
    )
