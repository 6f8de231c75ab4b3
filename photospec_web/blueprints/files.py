"""
Compound file blueprint for photospec Web.

Serves structure images and other per-compound files from the configured
files directory.
"""
from __future__ import annotations

import mimetypes
import os

from flask import Blueprint, Response, abort, current_app, send_from_directory
from werkzeug.security import safe_join

bp = Blueprint("files", __name__)

CACHE_MAX_AGE = 31536000

# extensions mimetypes does not always know about
_EXTRA_TYPES = {
    ".cdx": "application/octet-stream",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


@bp.get("/database-files/<path:subpath>")
def database_file(subpath: str) -> Response:
    root = current_app.config['PHOTOSPEC_FILES_DIR']
    full = safe_join(root, subpath)
    if full is None or not os.path.isfile(full):
        abort(404, description="File not found")

    ext = os.path.splitext(full)[1].lower()
    mimetype = _EXTRA_TYPES.get(ext) or mimetypes.guess_type(full)[0] or "application/octet-stream"

    response = send_from_directory(root, subpath, mimetype=mimetype, max_age=CACHE_MAX_AGE)
    response.headers["Cache-Control"] = f"public, max-age={CACHE_MAX_AGE}, immutable"
    return response
