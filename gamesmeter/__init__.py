"""
gamesmeter - Insights from a personal game-rating log

Turns a GamesMeter CSV export into descriptive statistics, yearly trends and a
narrative "gamer profile".

Architecture:
- Ingest Context: CSV parsing and row normalization into typed records
- Insights Context: Pure aggregation functions over the record sequence
- Narrative Context: Localized phrasing of profile and trend results
- Store Context: Current dataset lifecycle, memoized views and cached blob
"""

__version__ = "0.1.0"
