"""
npm_footprint/ingestion/orchestrator.py — Per-package fan-out.

For every package two independent lookups run concurrently on a thread pool:
the download count over the timespan (npm) and the bundle size
(bundlephobia). All outcomes are gathered before the batch returns:

    - one package's failure never cancels or aborts any other lookup,
    - a failed lookup leaves its field as None and sets ``error``,
    - output order is the input order, whatever order lookups finish in.

Emissions are computed as soon as the size is known. If the download count is
missing, NaN is used so that the gap stays visible in per-package output; the
condensed report counts it as 0.

Usage:
    from npm_footprint.ingestion.orchestrator import collect_footprints
    footprints = collect_footprints([PackageSpec("react")], last_month_span())
"""

import functools
import logging
import math
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig
from npm_footprint.ingestion.bundlephobia_client import PackageSize, get_package_size
from npm_footprint.ingestion.manifest import PackageSpec
from npm_footprint.ingestion.npm_downloads_client import NpmDownloadStat, get_npm_downloads
from npm_footprint.metrics.emissions import WeeklyReport, weekly_report
from npm_footprint.timespan import Timespan

logger = logging.getLogger(__name__)

DownloadsFetcher = Callable[[str, Timespan], NpmDownloadStat]
SizeFetcher = Callable[[str, str], PackageSize]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class PackageFootprint:
    """Outcome of both lookups plus the derived emissions for one package.

    Attributes:
        name:               Package name.
        version:            Requested version / range / dist-tag.
        stat:               Download statistics, or None if the lookup failed.
        details:            Bundle size response, or None if the lookup failed.
        emissions_per_week: WeeklyReport, or None when the size is unknown.
        error:              Failure message(s), None when both lookups succeeded.
    """

    name: str
    version: str
    stat: Optional[dict] = None
    details: Optional[dict] = None
    emissions_per_week: Optional[WeeklyReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        record = {
            "name": self.name,
            "version": self.version,
            "stat": self.stat,
            "details": self.details,
            "emissionsPerWeek": (
                self.emissions_per_week.to_dict() if self.emissions_per_week else None
            ),
        }
        if self.error is not None:
            record["error"] = self.error
        return record


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _outcome(future: Future, label: str, package: str) -> tuple[Optional[object], Optional[str]]:
    """Return (value, None) or (None, message) for a finished lookup."""
    try:
        return future.result(), None
    except Exception as exc:  # noqa: BLE001
        logger.warning("%s lookup failed for %s: %s", label, package, exc)
        return None, str(exc) or exc.__class__.__name__


def build_footprint(
    spec: PackageSpec,
    stat: Optional[NpmDownloadStat],
    size: Optional[PackageSize],
    errors: Sequence[str] = (),
    ignore_downloads: bool = False,
    config: FootprintConfig = DEFAULT_CONFIG,
) -> PackageFootprint:
    """Combine lookup outcomes for *spec* into a PackageFootprint."""
    footprint = PackageFootprint(
        name=spec.name,
        version=spec.version,
        stat=stat.to_dict() if stat is not None else None,
        details=size.to_dict() if size is not None else None,
        error="; ".join(errors) if errors else None,
    )

    if size is not None:
        if ignore_downloads:
            downloads: float = 1
        elif stat is not None:
            downloads = stat.downloads
        else:
            downloads = math.nan
        footprint.emissions_per_week = weekly_report(
            size.size_kb,
            downloads,
            config.grid_intensities,
            config.contributions,
        )

    return footprint


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def collect_footprints(
    packages: Sequence[PackageSpec],
    timespan: Timespan,
    ignore_downloads: bool = False,
    config: FootprintConfig = DEFAULT_CONFIG,
    downloads_fetcher: Optional[DownloadsFetcher] = None,
    size_fetcher: Optional[SizeFetcher] = None,
) -> list[PackageFootprint]:
    """Look up and estimate every package concurrently.

    Args:
        packages: Packages to check, in output order.
        timespan: Date range for download counts.
        ignore_downloads: Estimate one transfer per package instead of the
            registry's download count (used for repository manifests).
        config: Emission tables, endpoints and pool width.
        downloads_fetcher: ``(name, timespan) -> NpmDownloadStat``;
            defaults to the npm downloads client.
        size_fetcher: ``(name, version) -> PackageSize``; defaults to the
            bundlephobia client.

    Returns:
        One PackageFootprint per input package, same order as *packages*.
    """
    if downloads_fetcher is None:
        downloads_fetcher = functools.partial(get_npm_downloads, config=config)
    if size_fetcher is None:
        size_fetcher = functools.partial(get_package_size, config=config)

    if not packages:
        logger.info("No packages to check.")
        return []

    logger.info(
        "Checking %d packages (%s → %s, %d workers)",
        len(packages), timespan.start, timespan.end, config.max_workers,
    )

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        submitted = [
            (
                spec,
                executor.submit(downloads_fetcher, spec.name, timespan),
                executor.submit(size_fetcher, spec.name, spec.version),
            )
            for spec in packages
        ]

        footprints: list[PackageFootprint] = []
        for spec, stat_future, size_future in submitted:
            stat, stat_error = _outcome(stat_future, "downloads", spec.name)
            size, size_error = _outcome(size_future, "size", spec.name)
            errors = [msg for msg in (stat_error, size_error) if msg]
            footprints.append(
                build_footprint(spec, stat, size, errors, ignore_downloads, config)
            )

    failed = sum(1 for fp in footprints if not fp.ok)
    logger.info("Checked %d packages, %d with errors", len(footprints), failed)
    return footprints
