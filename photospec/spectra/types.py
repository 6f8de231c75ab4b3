"""Dataclasses shared across the samplers, normalizer, assembler and web layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence, Tuple


class DistributionKind(str, Enum):
    BLACKBODY = "blackbody"
    GAUSSIAN = "gaussian"
    LORENTZIAN = "lorentzian"

    @classmethod
    def parse(cls, value: Any) -> Optional["DistributionKind"]:
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        text = str(value).strip().lower()
        for kind in cls:
            if kind.value == text:
                return kind
        return None


@dataclass(frozen=True)
class SamplePoint:
    wavelength: float
    intensity: float


@dataclass(frozen=True)
class DistributionRequest:
    # Raw values are kept as supplied (numbers, strings or None);
    # photospec.spectra.dispatch.resolve_request fills the defaults.
    kind: Any
    low_wavelength: Any = None
    high_wavelength: Any = None
    temperature_kelvin: Any = None
    peak_wavelength: Any = None
    standard_deviation: Any = None
    gaussian_multiplier: Any = None
    lorentzian_peak_wavelength: Any = None
    fwhm: Any = None
    lorentzian_multiplier: Any = None
    num_points: Any = None


@dataclass(frozen=True)
class NamedSeries:
    name: str
    points: Sequence[Tuple[float, Optional[float]]] = ()


@dataclass(frozen=True)
class FrameRow:
    wavelength: float
    values: Tuple[Optional[float], ...]


@dataclass(frozen=True)
class ComparisonFrame:
    columns: Tuple[str, ...] = ()
    rows: Tuple[FrameRow, ...] = field(default_factory=tuple)

    def column(self, name: str) -> Tuple[Optional[float], ...]:
        idx = self.columns.index(name)
        return tuple(row.values[idx] for row in self.rows)

    @property
    def wavelengths(self) -> Tuple[float, ...]:
        return tuple(row.wavelength for row in self.rows)
