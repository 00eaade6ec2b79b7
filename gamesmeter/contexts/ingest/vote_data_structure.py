"""
Data structures for the Ingest context.

ParsedTable is the parser's output (header row + data rows of raw strings).
VoteRecord is one normalized rating entry built from a data row.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ParsedTable:
    """
    Header row plus data rows, as produced by parse_csv().

    Rows may have fewer or more cells than the header row; downstream code
    identifies columns by header name and indexes defensively.
    """

    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


@dataclass(frozen=True)
class VoteRecord:
    """One rated game from the export."""

    id: Optional[int]
    title: str
    year: Optional[int]
    alt_title: Optional[str]
    platform: Optional[str]
    rating: Optional[float]
    placed: Optional[datetime]
    raw: List[str] = field(default_factory=list, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation (placed as ISO 8601, raw cells omitted)."""
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "alt_title": self.alt_title,
            "platform": self.platform,
            "rating": self.rating,
            "placed": self.placed.isoformat() if self.placed else None,
        }
