"""Logging setup for photospec.

Log calls that concern one curve pass it through ``extra``:
``compound_id``/``spectrum_type`` for a measured spectrum, ``kind`` for a
reference distribution (``series_extra`` builds that dict). The console line
shows it as a short series tag::

    12:04:31 DEBUG   photospec.photospec_web.charts [12:emission]: Skipping selection 12:emission

and the JSON-lines file keeps the same fields under ``"series"`` next to the
web app's request fields (``path``, ``duration_ms``, ``error_type``).

Env: PHOTOSPEC_LOG_LEVEL (default INFO), PHOTOSPEC_DEBUG=1 forces DEBUG.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

ROOT_LOGGER = "photospec"

SERIES_FIELDS = ("compound_id", "spectrum_type", "kind")
REQUEST_FIELDS = ("path", "duration_ms", "error_type")

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s%(series)s: %(message)s"

_configured = False


def series_extra(
    *,
    compound_id: Optional[str] = None,
    spectrum_type: Optional[str] = None,
    kind: Optional[str] = None,
) -> Dict[str, Any]:
    """``extra=`` mapping for a record about one curve; unset fields are left out."""
    fields = {"compound_id": compound_id, "spectrum_type": spectrum_type, "kind": kind}
    return {k: v for k, v in fields.items() if v is not None}


def series_tag(record: logging.LogRecord) -> str:
    """``"12:emission"`` for a measured spectrum, ``"gaussian"`` for a distribution, else ``""``."""
    compound_id = getattr(record, "compound_id", None)
    if compound_id is not None:
        spectrum_type = getattr(record, "spectrum_type", None)
        return f"{compound_id}:{spectrum_type}" if spectrum_type else str(compound_id)
    kind = getattr(record, "kind", None)
    return str(kind) if kind else ""


class SeriesFilter(logging.Filter):
    """Sets ``record.series`` for CONSOLE_FORMAT (``" [tag]"`` or empty)."""

    def filter(self, record: logging.LogRecord) -> bool:
        tag = series_tag(record)
        record.series = f" [{tag}]" if tag else ""
        return True


class JSONLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        series = {k: getattr(record, k) for k in SERIES_FIELDS if getattr(record, k, None) is not None}
        if series:
            payload["series"] = series
        for key in REQUEST_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _level_from_env() -> str:
    if os.environ.get("PHOTOSPEC_DEBUG", "").strip().lower() in ("1", "true", "yes"):
        return "DEBUG"
    return os.environ.get("PHOTOSPEC_LOG_LEVEL", "INFO")


def configure_logging(*, level: Optional[str] = None, json_file: Optional[str] = None) -> None:
    """(Re)install the stderr handler and, with ``json_file``, a JSON-lines file handler."""
    global _configured

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, (level or _level_from_env()).upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.addFilter(SeriesFilter())
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if json_file:
        try:
            file_handler = logging.FileHandler(json_file, encoding="utf-8")
        except OSError as exc:
            root.warning("Cannot open JSON log file %s: %s", json_file, exc)
        else:
            file_handler.setFormatter(JSONLinesFormatter())
            root.addHandler(file_handler)

    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger under ``photospec.``; installs the default handlers on first use."""
    if not _configured:
        configure_logging()
    if name == "__main__":
        name = "main"
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, message: str, *, error_type: Optional[str] = None, **extra: Any) -> None:
    """``logger.exception`` with series fields from ``extra`` and an ``error_type`` category."""
    fields = series_extra(**extra)
    if error_type:
        fields["error_type"] = error_type
    logger.exception(message, extra=fields)
