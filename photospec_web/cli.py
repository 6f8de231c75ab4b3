#!/usr/bin/env python3
"""
Compound store tools for photospec Web.

    photospec-store load --db database/photochemcad.sqlite compounds.json
    photospec-store compare --db database/photochemcad.sqlite \\
        --spectrum 12:absorption --dist "type=gaussian&peakWavelength=550" -o out.csv

``load`` reads a JSON list of compounds (or one compound object)::

    {"id": "12", "name": "Anthracene", "database_name": "PhotochemCAD",
     "category_name": "Aromatic", "absorption": [[400.0, 10.5], ...],
     "emission": [[450.0, 0.2], ...]}

``compare`` writes the same CSV the dashboard exports for that selection.
"""
from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

from photospec.io.export import comparison_csv
from photospec.util.logging import configure_logging, get_logger
from photospec_web.charts import build_comparison, load_selected_spectra
from photospec_web.config import DB_PATH
from photospec_web.db import open_db_ro
from photospec_web.schema import ensure_schema, load_compound
from photospec_web.state import parse_selection, request_from_args

logger = get_logger(__name__)


def _read_compounds(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [c for c in data if isinstance(c, dict)]
    raise ValueError("expected a JSON object or a list of objects")


def cmd_load(args: argparse.Namespace) -> int:
    compounds: List[Dict[str, Any]] = []
    for path in args.files:
        try:
            compounds.extend(_read_compounds(path))
        except (OSError, ValueError) as exc:
            logger.error("Cannot read %s: %s", path, exc)
            return 2

    con = sqlite3.connect(args.db)
    loaded = 0
    try:
        ensure_schema(con)
        for compound in compounds:
            try:
                load_compound(
                    con,
                    compound,
                    absorption=compound.get("absorption"),
                    emission=compound.get("emission"),
                )
            except (ValueError, TypeError) as exc:
                logger.warning("Skipping compound %r: %s", compound.get("id"), exc)
                continue
            loaded += 1
    finally:
        con.close()

    logger.info("Loaded %d of %d compounds into %s", loaded, len(compounds), args.db)
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    selections = []
    for token in args.spectrum or []:
        sel = parse_selection(token)
        if sel is None:
            logger.warning("Ignoring malformed spectrum selection %r (expected ID:absorption|emission)", token)
            continue
        selections.append(sel)

    distributions = []
    for query in args.dist or []:
        req = request_from_args(parse_qsl(query, keep_blank_values=True))
        if req is None:
            logger.warning("Ignoring distribution without type: %r", query)
            continue
        distributions.append(req)

    spectra = []
    if selections:
        try:
            con = open_db_ro(args.db)
        except sqlite3.Error as exc:
            logger.error("Cannot open database %s: %s", args.db, exc)
            return 2
        try:
            spectra = load_selected_spectra(con, selections)
        finally:
            con.close()

    frame, _ = build_comparison(spectra, distributions, normalize=args.normalize)
    text = comparison_csv(frame)
    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("Wrote %d rows to %s", len(frame.rows), args.output)
    else:
        sys.stdout.write(text)
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Load and query the photospec compound store")
    p.add_argument("--log-level", dest="log_level", default=None, help="Log level (default INFO)")
    sub = p.add_subparsers(dest="command", required=True)

    ld = sub.add_parser("load", help="Import compounds and spectra from JSON")
    ld.add_argument("--db", default=DB_PATH, help=f"SQLite database to create or update (default: {DB_PATH})")
    ld.add_argument("files", nargs="+", help="JSON files with compound objects")
    ld.set_defaults(func=cmd_load)

    c = sub.add_parser("compare", help="Overlay stored spectra and distributions as CSV")
    c.add_argument("--db", default=DB_PATH, help=f"SQLite compound database (default: {DB_PATH})")
    c.add_argument("--spectrum", action="append", help="Selection as ID:absorption or ID:emission (repeatable)")
    c.add_argument(
        "--dist",
        action="append",
        help='Distribution as a query string, e.g. "type=gaussian&peakWavelength=550" (repeatable)',
    )
    c.add_argument("--normalize", action="store_true", help="Normalize each series to 0-1")
    c.add_argument("--output", "-o", help="Write CSV here instead of stdout")
    c.set_defaults(func=cmd_compare)

    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
