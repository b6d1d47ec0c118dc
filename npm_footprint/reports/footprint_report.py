"""
npm_footprint/reports/footprint_report.py — Footprint report sink.

Two report shapes:

    full       — one record per package: name, version, stat, details,
                 emissionsPerWeek (+ error when a lookup failed).
    condensed  — aggregated kg / kWh over all packages, a flight-equivalence
                 figure, the timespan, and a slim per-package details list.

Either shape is printed to the console; with an output path it is also
written as pretty-printed JSON (2-space indent). NaN values are written as
null.
"""

import json
import logging
import math
import os
import pprint
import sys
from typing import Any, Optional, Sequence, TextIO, Union

import pandas as pd

from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig
from npm_footprint.ingestion.orchestrator import PackageFootprint
from npm_footprint.timespan import Timespan

logger = logging.getLogger(__name__)

Report = Union[dict, list]

_DETAIL_COLUMNS = ["name", "version", "emissions_kg", "consumption_kWh"]


def footprints_to_records(footprints: Sequence[PackageFootprint]) -> list[dict]:
    """Full report: one JSON-ready dict per package, input order."""
    return [fp.to_dict() for fp in footprints]


def _details_frame(footprints: Sequence[PackageFootprint]) -> pd.DataFrame:
    rows = []
    for fp in footprints:
        report = fp.emissions_per_week
        rows.append(
            {
                "name": fp.name,
                "version": fp.version,
                "emissions_kg": report.kg if report else None,
                "consumption_kWh": report.consumed_kwh if report else None,
            }
        )
    df = pd.DataFrame(rows, columns=_DETAIL_COLUMNS)
    # Missing estimates and NaN (unknown download count) count as zero.
    for column in ("emissions_kg", "consumption_kWh"):
        df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0.0).astype(float)
    return df


def condense(
    footprints: Sequence[PackageFootprint],
    timespan: Timespan,
    config: FootprintConfig = DEFAULT_CONFIG,
) -> dict:
    """
    Aggregate per-package estimates into a single summary.

    Returns:
        dict with keys:
            aggregatedEmissions_kg — sum of per-package kg
            aggregated_kWh         — sum of per-package kWh
            flights_LDN_JFK        — floor(aggregated kg / kg per flight)
            timespan               — {"start", "end"}
            details                — [{name, version, emissions_kg, consumption_kWh}]
    """
    df = _details_frame(footprints)

    total_kg = float(df["emissions_kg"].sum()) if not df.empty else 0.0
    total_kwh = float(df["consumption_kWh"].sum()) if not df.empty else 0.0
    flights = math.floor(total_kg / config.kg_co2_per_flight_ldn_jfk)

    details = [
        {
            "name": row.name,
            "version": row.version,
            "emissions_kg": float(row.emissions_kg),
            "consumption_kWh": float(row.consumption_kWh),
        }
        for row in df.itertuples(index=False)
    ]

    logger.debug(
        "Condensed %d packages: %.6f kg, %.6f kWh.", len(details), total_kg, total_kwh
    )

    return {
        "aggregatedEmissions_kg": total_kg,
        "aggregated_kWh": total_kwh,
        "flights_LDN_JFK": flights,
        "timespan": timespan.to_dict(),
        "details": details,
    }


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats with None, recursively."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def write_report(report: Report, path: str) -> str:
    """Write *report* as 2-space-indented JSON; return the absolute path."""
    full_path = os.path.abspath(path)
    parent = os.path.dirname(full_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(full_path, "w", encoding="utf-8") as fh:
        json.dump(_json_safe(report), fh, indent=2, allow_nan=False)
    logger.info("Report saved to: %s", full_path)
    return full_path


def print_report(report: Report, stream: Optional[TextIO] = None) -> None:
    """Pretty-print *report* in full to *stream* (default stdout)."""
    pprint.pprint(report, stream=stream or sys.stdout, sort_dicts=False, width=100)


def emit_report(report: Report, out: Optional[str] = None) -> Optional[str]:
    """Print *report*; also persist it as JSON when *out* is given."""
    print_report(report)
    if out:
        return write_report(report, out)
    return None
