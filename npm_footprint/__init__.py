"""
npm_footprint — Carbon and energy footprint estimates for npm package downloads.

Combines two registry signals for each package, the download count over a
time window (api.npmjs.org) and the transferred bundle size
(bundlephobia.com), and turns them into weekly energy use (kWh) and CO2
emissions (kg / t) using a fixed grid-intensity model.

Modules:
- npm_footprint.metrics.emissions   — the emissions estimator (pure arithmetic)
- npm_footprint.ingestion           — registry clients and the fan-out orchestrator
- npm_footprint.reports             — per-package / condensed JSON reports
- npm_footprint.cli                 — command-line entry point
"""

__version__ = "0.1.0"
