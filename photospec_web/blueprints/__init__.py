"""
Blueprints package for photospec Web.

This package contains Flask blueprints that organize routes by function:
- api_compounds: Compound search and database browsing (/api/compounds, /api/databases)
- api_spectra: Measured spectrum data (/api/spectra)
- api_distributions: Reference curves and assembled comparisons (/api/distribution, /api/comparison)
- api_debug: Health and error tracking (/api/debug/*)
- files: Compound structure images and other files (/database-files/*)
- views: HTML dashboard, selection redirects and CSV export (/, /add, /remove, /export/*)
"""
from __future__ import annotations
