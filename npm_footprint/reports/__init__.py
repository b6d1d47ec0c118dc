"""
npm_footprint.reports — Report assembly and output.

Modules:
    footprint_report — per-package records, condensed aggregate, JSON / console sinks.
"""
