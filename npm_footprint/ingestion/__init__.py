"""
npm_footprint.ingestion — Registry data sources and batch orchestration.

Modules:
    npm_downloads_client — download counts over a date range (api.npmjs.org).
    bundlephobia_client  — transferred bundle size (bundlephobia.com).
    manifest             — package lists from --npm or a repo's package.json.
    orchestrator         — concurrent per-package lookups + emissions.
"""
