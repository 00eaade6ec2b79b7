"""
Shared utilities for gamesmeter.

Common functionality used across contexts:
- Logger setup with provenance
- Dataset event log (JSON Lines)
- Timestamps
- Text report formatting
"""

from gamesmeter.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["now", "now_exact", "format_timestamp"]
