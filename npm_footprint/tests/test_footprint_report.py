"""
npm_footprint/tests/test_footprint_report.py — Report shapes and sinks.

Tests verify:
- Full records keep input order and error markers.
- Condensed sums ignore missing / NaN estimates and floor the flight count.
- JSON output is 2-space indented, NaN-free, and directories are created.
"""

import io
import json
import math

import pytest

from npm_footprint.config import FootprintConfig
from npm_footprint.ingestion.orchestrator import PackageFootprint
from npm_footprint.metrics.emissions import WeeklyReport
from npm_footprint.reports.footprint_report import (
    condense,
    emit_report,
    footprints_to_records,
    print_report,
    write_report,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def footprint(name, kg=None, kwh=None, error=None):
    report = None
    if kg is not None:
        report = WeeklyReport(consumed_kwh=kwh, kg=kg, t=0.0)
    return PackageFootprint(
        name=name,
        version="latest",
        stat={"downloads": 1} if report else None,
        details={"size": 1} if report else None,
        emissions_per_week=report,
        error=error,
    )


@pytest.fixture
def mixed_footprints():
    return [
        footprint("react", kg=400.0, kwh=800.0),
        footprint("lodash", kg=250.5, kwh=500.25),
        footprint("ghost", error="bundlephobia: not found (ghost@latest)"),
        footprint("nan-dl", kg=math.nan, kwh=math.nan, error="npm: HTTP 500 (nan-dl)"),
    ]


# ── footprints_to_records ─────────────────────────────────────────────────────

def test_records_keep_order_and_errors(mixed_footprints):
    records = footprints_to_records(mixed_footprints)
    assert [r["name"] for r in records] == ["react", "lodash", "ghost", "nan-dl"]
    assert "error" not in records[0]
    assert records[2]["error"].startswith("bundlephobia")
    assert records[2]["emissionsPerWeek"] is None


# ── condense ──────────────────────────────────────────────────────────────────

def test_condense_totals(mixed_footprints, timespan):
    result = condense(mixed_footprints, timespan)
    assert result["aggregatedEmissions_kg"] == pytest.approx(650.5)
    assert result["aggregated_kWh"] == pytest.approx(1300.25)
    assert result["flights_LDN_JFK"] == 1
    assert result["timespan"] == {"start": "2026-09-01", "end": "2026-09-30"}


def test_condense_details_zero_fill(mixed_footprints, timespan):
    details = condense(mixed_footprints, timespan)["details"]
    assert [d["name"] for d in details] == ["react", "lodash", "ghost", "nan-dl"]
    assert details[2] == {
        "name": "ghost", "version": "latest", "emissions_kg": 0.0, "consumption_kWh": 0.0,
    }
    assert details[3]["emissions_kg"] == 0.0
    assert details[0]["consumption_kWh"] == 800.0


def test_condense_key_order(mixed_footprints, timespan):
    assert list(condense(mixed_footprints, timespan)) == [
        "aggregatedEmissions_kg", "aggregated_kWh", "flights_LDN_JFK", "timespan", "details",
    ]


def test_condense_empty(timespan):
    result = condense([], timespan)
    assert result["aggregatedEmissions_kg"] == 0
    assert result["aggregated_kWh"] == 0
    assert result["flights_LDN_JFK"] == 0
    assert result["details"] == []


def test_condense_custom_flight_factor(mixed_footprints, timespan):
    config = FootprintConfig(kg_co2_per_flight_ldn_jfk=100.0)
    assert condense(mixed_footprints, timespan, config)["flights_LDN_JFK"] == 6


# ── Sinks ─────────────────────────────────────────────────────────────────────

def test_write_report_pretty_json(tmp_path, mixed_footprints, timespan):
    target = tmp_path / "nested" / "out.json"
    report = condense(mixed_footprints, timespan)
    path = write_report(report, str(target))
    assert path == str(target.resolve())
    text = target.read_text(encoding="utf-8")
    assert text.startswith('{\n  "aggregatedEmissions_kg"')
    assert json.loads(text)["flights_LDN_JFK"] == 1


def test_write_report_nan_as_null(tmp_path, mixed_footprints):
    target = tmp_path / "full.json"
    write_report(footprints_to_records(mixed_footprints), str(target))
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data[3]["emissionsPerWeek"] == {"consumedkWh": None, "kg": None, "t": 0.0}
    assert "NaN" not in target.read_text(encoding="utf-8")


def test_print_report_writes_everything():
    stream = io.StringIO()
    print_report({"details": [{"name": "react", "nested": {"deep": [1, 2]}}]}, stream)
    text = stream.getvalue()
    assert "'react'" in text
    assert "'deep': [1, 2]" in text


def test_emit_report_prints_and_optionally_writes(tmp_path, capsys):
    assert emit_report({"a": 1}) is None
    assert "'a': 1" in capsys.readouterr().out

    target = tmp_path / "r.json"
    assert emit_report({"a": 1}, str(target)) == str(target.resolve())
    assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
