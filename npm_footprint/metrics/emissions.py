"""
npm_footprint/metrics/emissions.py — Emissions estimator.

Converts a transferred payload size and a transfer count into energy use
(kWh) and CO2 emissions (kg, t) using a blended grams-CO2-per-GB figure.

Model:
    co2_per_gb = Σ_category grid_intensity[category] × contribution[category] / 100

The grid intensity is grams CO2e per kWh for each part of the stack (data
center, network, end-user device, device production); the contribution is the
share of total energy use attributable to that part.

KWH_PER_GB is the estimated total energy use of the internet (~2000 TWh)
divided by the total data transfer it enables (~2500 EB).

Everything here is pure arithmetic: no validation, no I/O. Degenerate input
(zero, negative, NaN, inf) flows through the formula literally.
"""

import math
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

KWH_PER_GB: float = 0.81

KB_PER_GB: int = 1_000_000
GRAMS_PER_KG: int = 1000
KG_PER_TONNE: int = 1000

# g CO2e / kWh per part of the stack.
DEFAULT_GRID_INTENSITIES: Mapping[str, float] = MappingProxyType(
    {
        "dataCenter": 50,
        "network": 437.26,
        "device": 437.26,
        "production": 437.26,
    }
)

# Percentage of total energy use per part of the stack.
# dataCenter at 15 makes the table sum to 101; published figures use it.
DEFAULT_CONTRIBUTIONS: Mapping[str, float] = MappingProxyType(
    {
        "dataCenter": 15,
        "network": 14,
        "device": 53,
        "production": 19,
    }
)

EPSILON: float = sys.float_info.epsilon


@dataclass(frozen=True)
class EmissionsEstimate:
    """Raw estimator output for one package.

    Attributes:
        total_co2_emissions_week_kg: CO2 in kg across *all* transfers.
        consumed_kwh: Energy for a *single* transfer of the payload.
    """

    total_co2_emissions_week_kg: float
    consumed_kwh: float

    def to_dict(self) -> dict:
        return {
            "totalCo2EmissionsWeekKg": self.total_co2_emissions_week_kg,
            "consumedkWh": self.consumed_kwh,
        }


@dataclass(frozen=True)
class WeeklyReport:
    """Rounded weekly footprint: total energy (kWh) and CO2 (kg, t)."""

    consumed_kwh: float
    kg: float
    t: float

    def to_dict(self) -> dict:
        return {"consumedkWh": self.consumed_kwh, "kg": self.kg, "t": self.t}


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def round_to(value: float, digits: int) -> float:
    """Round *value* to *digits* decimals, halves away toward +inf.

    EPSILON is added first so that values such as 1.005 (stored as
    1.00499999...) round the way they read. NaN and ±inf are returned as-is.
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** digits
    scaled = (value + EPSILON) * factor
    if not math.isfinite(scaled):
        # Overflowed: already integral at this magnitude.
        return value
    return _round_half_up(scaled) / factor


def round6(value: float) -> float:
    return round_to(value, 6)


def round2(value: float) -> float:
    return round_to(value, 2)


def co2_per_gb(
    grid_intensities: Mapping[str, float] = DEFAULT_GRID_INTENSITIES,
    contributions: Mapping[str, float] = DEFAULT_CONTRIBUTIONS,
) -> float:
    """Blended grams of CO2e per GB transferred.

    Iterates the categories of *grid_intensities*; each one must also be a
    key of *contributions* (KeyError otherwise).
    """
    total = 0.0
    for category, intensity in grid_intensities.items():
        total += intensity * (contributions[category] / 100)
    return total


def estimate_single_transfer(
    size_kb: float,
    download_count: float,
    grid_intensities: Optional[Mapping[str, float]] = None,
    contributions: Optional[Mapping[str, float]] = None,
) -> EmissionsEstimate:
    """
    Estimate CO2 for *download_count* transfers of a *size_kb* payload.

    Algorithm:
        1. size_gb = size_kb / 1e6
        2. co2_per_gb from the (possibly overridden) tables
        3. grams per transfer = size_gb × co2_per_gb
        4. grams total = grams per transfer × download_count
        5. kg = grams / 1000
        6. kWh per transfer = size_gb × KWH_PER_GB

    Args:
        size_kb: Payload size of one transfer in kilobytes.
        download_count: Number of transfers in the observation window.
        grid_intensities: Optional override of DEFAULT_GRID_INTENSITIES.
        contributions: Optional override of DEFAULT_CONTRIBUTIONS.

    Returns:
        EmissionsEstimate. Note that consumed_kwh is per single transfer;
        scaling it by the download count is left to the caller
        (see weekly_report()).
    """
    if grid_intensities is None:
        grid_intensities = DEFAULT_GRID_INTENSITIES
    if contributions is None:
        contributions = DEFAULT_CONTRIBUTIONS

    size_gb = size_kb / KB_PER_GB
    co2_per_transfer_g = size_gb * co2_per_gb(grid_intensities, contributions)
    total_co2_g = co2_per_transfer_g * download_count

    return EmissionsEstimate(
        total_co2_emissions_week_kg=total_co2_g / GRAMS_PER_KG,
        consumed_kwh=size_gb * KWH_PER_GB,
    )


def weekly_report(
    size_kb: float,
    downloads_last_week: float,
    grid_intensities: Optional[Mapping[str, float]] = None,
    contributions: Optional[Mapping[str, float]] = None,
) -> WeeklyReport:
    """Weekly totals for a package: kWh and kg rounded to 6 places, t to 2.

    t is derived from the rounded kg so the two figures always agree.
    """
    estimate = estimate_single_transfer(
        size_kb, downloads_last_week, grid_intensities, contributions
    )
    kg = round6(estimate.total_co2_emissions_week_kg)
    return WeeklyReport(
        consumed_kwh=round6(estimate.consumed_kwh * downloads_last_week),
        kg=kg,
        t=round2(kg / KG_PER_TONNE),
    )
