"""
npm_footprint.metrics — Footprint arithmetic.

Modules:
    emissions — kWh and CO2 estimates from payload size × transfer count.

All tables and tunables live in npm_footprint.config.FootprintConfig.
"""
