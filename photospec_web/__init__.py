"""
photospec Web — Flask dashboard for comparing compound spectra.

This package provides the Flask web interface that:
- Searches the read-only SQLite compound database
- Overlays absorption/emission spectra with reference distributions
  (blackbody, Gaussian, Lorentzian)
- Keeps the selection in the query string so views can be shared by link
- Exports the overlaid data as CSV

Usage:
    from photospec_web import create_app
    app = create_app(db_path="photochemcad.sqlite")
    app.run(host="0.0.0.0", port=8080)
"""
from __future__ import annotations

__version__ = "0.1.0"

from photospec_web.app import create_app

__all__ = ["create_app", "__version__"]
