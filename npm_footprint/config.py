"""
npm_footprint/config.py — All tunable parameters for npm_footprint.

Emission tables, registry endpoints, HTTP timeout, fan-out width and the
flight-equivalence factor live here so that calibration changes are a
single-file diff. KWH_PER_GB is deliberately not configurable; it belongs
to the estimator.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from npm_footprint import __version__
from npm_footprint.errors import ConfigurationError
from npm_footprint.metrics.emissions import (
    DEFAULT_CONTRIBUTIONS,
    DEFAULT_GRID_INTENSITIES,
)

logger = logging.getLogger(__name__)

_CONTRIBUTION_TOTAL = 100.0
_CONTRIBUTION_TOLERANCE = 1e-9


def contribution_total(contributions: Mapping[str, float]) -> float:
    """Sum of the contribution percentages."""
    return float(sum(contributions.values()))


def is_balanced(contributions: Mapping[str, float]) -> bool:
    """True if the contribution percentages add up to 100."""
    return math.isclose(
        contribution_total(contributions),
        _CONTRIBUTION_TOTAL,
        abs_tol=_CONTRIBUTION_TOLERANCE,
    )


def validate_tables(
    grid_intensities: Mapping[str, float],
    contributions: Mapping[str, float],
) -> None:
    """Raise ConfigurationError unless the tables are consistent.

    Both tables must cover the same categories, and the contribution
    shares must sum to 100 %.
    """
    intensity_keys = set(grid_intensities)
    contribution_keys = set(contributions)
    if intensity_keys != contribution_keys:
        missing = sorted(intensity_keys ^ contribution_keys)
        raise ConfigurationError(
            f"grid intensity and contribution tables differ in categories: {missing}"
        )
    if not is_balanced(contributions):
        raise ConfigurationError(
            "contribution percentages must sum to 100, got "
            f"{contribution_total(contributions):g}"
        )


@dataclass(frozen=True)
class FootprintConfig:
    """
    Immutable configuration for an npm_footprint run.

    Override by constructing a new FootprintConfig with the desired values.
    Tables are copied into read-only mappings on construction.
    """

    # ── Emission model ────────────────────────────────────────────────────────
    grid_intensities: Mapping[str, float] = field(
        default_factory=lambda: DEFAULT_GRID_INTENSITIES
    )
    # g CO2e per kWh for dataCenter / network / device / production.

    contributions: Mapping[str, float] = field(
        default_factory=lambda: DEFAULT_CONTRIBUTIONS
    )
    # Share (%) of total energy use per category. Should sum to 100.

    validate_contributions: bool = False
    # Check key sets and the 100 % total at construction time. Off by default:
    # the published default contributions sum to 101 %.

    # ── Report ────────────────────────────────────────────────────────────────
    kg_co2_per_flight_ldn_jfk: float = 590.0
    # One-way London → New York economy seat, used for the condensed report's
    # flights_LDN_JFK equivalence.

    # ── Registry endpoints ────────────────────────────────────────────────────
    npm_downloads_base: str = "https://api.npmjs.org/downloads"
    bundlephobia_base: str = "https://bundlephobia.com/api"

    user_agent: str = f"npm-footprint/{__version__}"
    # bundlephobia rejects requests with the default Python-urllib agent.

    request_timeout: float = 30.0
    # Seconds per HTTP request.

    # ── Fan-out ───────────────────────────────────────────────────────────────
    max_workers: int = 8
    # Concurrent lookup threads. Each package issues two requests.

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "grid_intensities", MappingProxyType(dict(self.grid_intensities))
        )
        object.__setattr__(
            self, "contributions", MappingProxyType(dict(self.contributions))
        )
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.validate_contributions:
            validate_tables(self.grid_intensities, self.contributions)


# Singleton default — import this everywhere instead of constructing anew.
DEFAULT_CONFIG = FootprintConfig()
