#!/usr/bin/env python3
"""photospec command-line entrypoint: sample a reference distribution as CSV."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from photospec.io.export import comparison_csv
from photospec.spectra.compare import assemble_frame
from photospec.spectra.dispatch import distribution_label, sample_distribution
from photospec.spectra.normalize import normalize_points
from photospec.spectra.types import DistributionRequest, NamedSeries
from photospec.util.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _request_from_args(args: argparse.Namespace) -> DistributionRequest:
    return DistributionRequest(
        kind=args.type,
        low_wavelength=args.low,
        high_wavelength=args.high,
        temperature_kelvin=args.temperature,
        peak_wavelength=args.peak,
        standard_deviation=args.sd,
        gaussian_multiplier=args.multiplier,
        lorentzian_peak_wavelength=args.peak,
        fwhm=args.fwhm,
        lorentzian_multiplier=args.multiplier,
        num_points=args.points,
    )


def _write(text: str, output: Optional[str]) -> None:
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("Wrote %s", output)
    else:
        sys.stdout.write(text)


def cmd_distribution(args: argparse.Namespace) -> int:
    req = _request_from_args(args)
    points = sample_distribution(req)
    if not points:
        logger.warning("Distribution %r produced no points", args.type)
    if args.normalize:
        points = normalize_points(points)
    frame = assemble_frame([NamedSeries(distribution_label(req, 0), points)])
    _write(comparison_csv(frame), args.output)
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(description="Sample blackbody, Gaussian and Lorentzian reference curves as CSV")
    p.add_argument("--log-level", dest="log_level", default=None, help="Log level (default INFO)")
    sub = p.add_subparsers(dest="command", required=True)

    d = sub.add_parser("distribution", help="Sample one reference distribution")
    d.add_argument("--type", required=True, help="blackbody, gaussian or lorentzian")
    d.add_argument("--low", help="Low wavelength in nm (default 200)")
    d.add_argument("--high", help="High wavelength in nm (default 800)")
    d.add_argument("--temperature", help="Blackbody temperature in K (default 5776)")
    d.add_argument("--peak", help="Peak wavelength in nm (default 300)")
    d.add_argument("--sd", help="Gaussian standard deviation in nm (default 20)")
    d.add_argument("--fwhm", help="Lorentzian full width at half maximum in nm (default 20)")
    d.add_argument("--multiplier", help="Amplitude multiplier (default 1)")
    d.add_argument("--points", help="Number of samples (default 1000, capped at 20000)")
    d.add_argument("--normalize", action="store_true", help="Min/max normalize the curve")
    d.add_argument("--output", "-o", help="Write CSV here instead of stdout")
    d.set_defaults(func=cmd_distribution)

    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
