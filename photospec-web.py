#!/usr/bin/env python3
"""
photospec Web — Entry point.

Thin CLI shim that parses arguments and runs the Flask application.

Run:
    python photospec-web.py --db database/photochemcad.sqlite --host 0.0.0.0 --port 8080

Environment:
    PHOTOSPEC_DB              Default database path when --db is omitted
    PHOTOSPEC_FILES_DIR       Directory served under /database-files/
    PHOTOSPEC_LOG_LEVEL       Log level (default INFO; PHOTOSPEC_DEBUG=1 for DEBUG)
"""
from __future__ import annotations

import argparse


def parse_args():
    from photospec_web.config import DB_PATH, FILES_DIR

    ap = argparse.ArgumentParser(
        description="photospec Web — compound spectrum comparison dashboard"
    )
    ap.add_argument(
        "--db",
        default=DB_PATH,
        help=f"Path to the SQLite compound database (default: {DB_PATH})",
    )
    ap.add_argument(
        "--files-dir",
        default=FILES_DIR,
        help=f"Directory with structure images and compound files (default: {FILES_DIR})",
    )
    ap.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind the web server (default: 0.0.0.0)",
    )
    ap.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080)",
    )
    ap.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    ap.add_argument(
        "--log-json",
        default=None,
        help="Optional path for JSON-lines log output",
    )
    return ap.parse_args()


def main():
    args = parse_args()

    from photospec.util.logging import configure_logging
    from photospec_web import create_app

    configure_logging(level=args.log_level, json_file=args.log_json)
    app = create_app(args.db, files_dir=args.files_dir)
    app.run(host=args.host, port=args.port, threaded=True)


if __name__ == "__main__":
    main()
