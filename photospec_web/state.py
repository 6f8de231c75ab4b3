"""
Query-string selection state for photospec Web.

The dashboard keeps everything it shows in the page address so a view can be
shared by link:

    spectrum0=<compound_id>:<absorption|emission>
    spectrum1=...
    dist0Type=gaussian&dist0LowWavelength=200&dist0PeakWavelength=550&...
    normalize=1

Parsing is permissive: malformed entries are skipped and numeric fields are
kept raw so the dispatcher can substitute its defaults.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlencode

from photospec.spectra.types import DistributionKind, DistributionRequest
from photospec.util.math import coerce_float
from photospec_web.compounds import SPECTRUM_TYPES
from photospec_web.config import DEFAULT_NUM_POINTS, MAX_NUM_POINTS

Pairs = List[Tuple[str, str]]

SPECTRUM_PREFIX = "spectrum"
_DIST_TYPE_RE = re.compile(r"^dist(\d+)Type$")

# DistributionRequest field -> query key suffix
FIELD_KEYS: Dict[str, str] = {
    "low_wavelength": "LowWavelength",
    "high_wavelength": "HighWavelength",
    "temperature_kelvin": "Temperature",
    "peak_wavelength": "PeakWavelength",
    "standard_deviation": "StandardDeviation",
    "gaussian_multiplier": "GaussianMultiplier",
    "lorentzian_peak_wavelength": "LorentzianPeakWavelength",
    "fwhm": "Fwhm",
    "lorentzian_multiplier": "LorentzianMultiplier",
    "num_points": "Points",
}

KIND_FIELDS: Dict[DistributionKind, Tuple[str, ...]] = {
    DistributionKind.BLACKBODY: ("temperature_kelvin",),
    DistributionKind.GAUSSIAN: ("peak_wavelength", "standard_deviation", "gaussian_multiplier"),
    DistributionKind.LORENTZIAN: ("lorentzian_peak_wavelength", "fwhm", "lorentzian_multiplier"),
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SpectrumSelection:
    compound_id: str
    spectrum_type: str

    def encode(self) -> str:
        return f"{self.compound_id}:{self.spectrum_type}"


def as_pairs(args: Any) -> Pairs:
    """Flatten request.args, a dict or an iterable of pairs into ordered (key, value) pairs."""
    if args is None:
        return []
    if hasattr(args, "items"):
        try:
            items = args.items(multi=True)
        except TypeError:
            items = args.items()
        return [(str(k), "" if v is None else str(v)) for k, v in items]
    return [(str(k), "" if v is None else str(v)) for k, v in args]


def _first(pairs: Pairs, key: str) -> Optional[str]:
    for k, v in pairs:
        if k == key:
            return v
    return None


# ---------------------------------------------------------------------------
# Spectrum selections
# ---------------------------------------------------------------------------


def _spectrum_index(key: str) -> Optional[int]:
    suffix = key[len(SPECTRUM_PREFIX):]
    try:
        return int(suffix)
    except ValueError:
        return None


def parse_selection(value: str) -> Optional[SpectrumSelection]:
    """Parse ``"<compound_id>:<type>"``; None when malformed or the type is unknown."""
    compound_id, sep, spectrum_type = (value or "").strip().rpartition(":")
    if not sep or not compound_id or spectrum_type not in SPECTRUM_TYPES:
        return None
    return SpectrumSelection(compound_id, spectrum_type)


def parse_spectrum_selections(args: Any) -> List[SpectrumSelection]:
    """Selections in ascending index order, duplicates dropped."""
    indexed = []
    for position, (key, value) in enumerate(as_pairs(args)):
        if not key.startswith(SPECTRUM_PREFIX):
            continue
        selection = parse_selection(value)
        if selection is None:
            continue
        idx = _spectrum_index(key)
        # unnumbered keys keep their relative order after the numbered ones
        indexed.append(((idx is None, idx if idx is not None else position), selection))

    out: List[SpectrumSelection] = []
    for _, selection in sorted(indexed, key=lambda item: item[0]):
        if selection not in out:
            out.append(selection)
    return out


def add_spectrum(args: Any, compound_id: str, spectrum_type: str) -> Pairs:
    """Append a selection under ``spectrum<max index + 1>`` unless already present."""
    pairs = as_pairs(args)
    target = SpectrumSelection(str(compound_id), spectrum_type)
    max_index = -1
    for key, value in pairs:
        if not key.startswith(SPECTRUM_PREFIX):
            continue
        if parse_selection(value) == target:
            return pairs
        idx = _spectrum_index(key)
        if idx is not None and idx > max_index:
            max_index = idx
    pairs.append((f"{SPECTRUM_PREFIX}{max_index + 1}", target.encode()))
    return pairs


def remove_spectrum(args: Any, compound_id: str, spectrum_type: str) -> Pairs:
    """Drop the first key holding this selection."""
    pairs = as_pairs(args)
    target = SpectrumSelection(str(compound_id), spectrum_type)
    for i, (key, value) in enumerate(pairs):
        if key.startswith(SPECTRUM_PREFIX) and parse_selection(value) == target:
            del pairs[i]
            break
    return pairs


# ---------------------------------------------------------------------------
# Distribution requests
# ---------------------------------------------------------------------------


def _key(prefix: str, suffix: str) -> str:
    if prefix:
        return f"{prefix}{suffix}"
    return suffix[:1].lower() + suffix[1:]


def _clamp_points(raw: Optional[str]) -> int:
    value = coerce_float(raw)
    if value is None:
        return DEFAULT_NUM_POINTS
    return max(0, min(MAX_NUM_POINTS, int(value)))


def request_from_args(args: Any, prefix: str = "") -> Optional[DistributionRequest]:
    """
    Build a DistributionRequest from query args.

    With ``prefix="dist0"`` the keys are ``dist0Type``, ``dist0Fwhm``...;
    without a prefix they are ``type``, ``fwhm``, ``lowWavelength``...

    Returns:
        None when no type is given. Numeric fields are passed through raw.
    """
    pairs = as_pairs(args)
    kind = (_first(pairs, _key(prefix, "Type")) or "").strip()
    if not kind:
        return None
    fields: Dict[str, Any] = {}
    for name, suffix in FIELD_KEYS.items():
        if name == "num_points":
            continue
        fields[name] = _first(pairs, _key(prefix, suffix))
    fields["num_points"] = _clamp_points(_first(pairs, _key(prefix, FIELD_KEYS["num_points"])))
    return DistributionRequest(kind=kind, **fields)


def distribution_indices(args: Any) -> List[int]:
    found = set()
    for key, _ in as_pairs(args):
        m = _DIST_TYPE_RE.match(key)
        if m:
            found.add(int(m.group(1)))
    return sorted(found)


def parse_distribution_entries(args: Any) -> List[Tuple[int, DistributionRequest]]:
    """(index, request) for every ``dist<N>Type`` with a non-empty type, ascending."""
    pairs = as_pairs(args)
    out: List[Tuple[int, DistributionRequest]] = []
    for idx in distribution_indices(pairs):
        req = request_from_args(pairs, prefix=f"dist{idx}")
        if req is not None:
            out.append((idx, req))
    return out


def parse_distribution_requests(args: Any) -> List[DistributionRequest]:
    """All ``dist<N>*`` requests in ascending index order."""
    return [req for _, req in parse_distribution_entries(args)]


def encode_distribution(index: int, request: DistributionRequest) -> Pairs:
    """Query pairs for one request: type, bounds, the fields its kind uses and points."""
    prefix = f"dist{index}"
    kind = DistributionKind.parse(request.kind)
    pairs: Pairs = [(f"{prefix}Type", kind.value if kind is not None else str(request.kind))]
    names = ["low_wavelength", "high_wavelength"]
    if kind is not None:
        names.extend(KIND_FIELDS[kind])
    names.append("num_points")
    for name in names:
        value = getattr(request, name)
        if value is None or value == "":
            continue
        pairs.append((f"{prefix}{FIELD_KEYS[name]}", _format_number(value)))
    return pairs


def remove_distribution(args: Any, index: int) -> Pairs:
    prefix = f"dist{index}"
    return [
        (k, v)
        for k, v in as_pairs(args)
        if not (k.startswith(prefix) and k[len(prefix):][:1].isalpha())
    ]


def add_distribution(args: Any, request: DistributionRequest) -> Pairs:
    """Append ``request`` under the next free ``dist<N>`` index."""
    pairs = as_pairs(args)
    indices = distribution_indices(pairs)
    next_index = indices[-1] + 1 if indices else 0
    return pairs + encode_distribution(next_index, request)


def _format_number(value: Any) -> str:
    number = coerce_float(value)
    if number is None:
        return str(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


# ---------------------------------------------------------------------------
# Misc flags and serialization
# ---------------------------------------------------------------------------


def normalize_requested(args: Any) -> bool:
    value = _first(as_pairs(args), "normalize")
    return (value or "").strip().lower() in _TRUTHY


def set_flag(args: Any, key: str, enabled: bool) -> Pairs:
    pairs = [(k, v) for k, v in as_pairs(args) if k != key]
    if enabled:
        pairs.append((key, "1"))
    return pairs


def build_query(pairs: Iterable[Tuple[str, str]]) -> str:
    """Serialize pairs to a query string ("" when empty)."""
    return urlencode(list(pairs))
