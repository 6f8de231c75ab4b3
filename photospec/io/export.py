"""CSV rendering of a comparison frame.

One CSV row per frame row, so an export always matches what the chart drew:
the wavelength first, then one cell per column with absent or non-finite
values left empty.
"""

from __future__ import annotations

import csv
import io
import math
from typing import Optional

from photospec.spectra.types import ComparisonFrame

WAVELENGTH_HEADER = "Wavelength (nm)"


def csv_cell(value: Optional[float]) -> str:
    """Integral values without a decimal point, others as ``repr``; "" when absent."""
    if value is None or not math.isfinite(value):
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def comparison_csv(frame: ComparisonFrame) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow([WAVELENGTH_HEADER, *frame.columns])
    for row in frame.rows:
        w.writerow([csv_cell(row.wavelength), *(csv_cell(v) for v in row.values)])
    return buf.getvalue()
