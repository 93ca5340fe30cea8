"""
conflictmap package
===================

This package contains the Conflict Map engine: it turns per-country conflict
metrics into conflict-level records that a world map can draw.

- The CLI entry point is in `conflictmap/cli.py`.
- The aggregation pipeline (rows -> conflict records) is in `conflictmap/aggregator.py`.
- Filters, statistics and the timeline are in `conflictmap/engine.py`.
- Metric source loading is in `conflictmap/loader.py`.
"""

__version__ = '0.1.0'
