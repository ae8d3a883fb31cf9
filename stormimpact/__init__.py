"""
Storm Impact package
====================

Aggregates casualty and economic-damage totals by event type for the NOAA
storm events export.

- The CLI entry point is in `stormimpact/cli.py`.
- The core engine (selection, date filter, top-N per metric) is in `stormimpact/engine.py`.
- Dataset loading is in `stormimpact/loader.py`.
"""

__version__ = '0.1.0'
