"""
Data models for search results.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class QueryResult:
    """One location matched by a query, with its match count and score."""
    location: str
    count: int
    score: float

    @classmethod
    def from_matches(cls, location: str, matches: int, total_words: int) -> "QueryResult":
        """
        Build a result from the cumulative matches for a location.

        Args:
            location: Matched location
            matches: Sum of posting-set sizes of all matching terms
            total_words: Word count of the location (always positive)
        """
        return cls(location=location, count=matches, score=matches / total_words)

    @property
    def sort_key(self) -> Tuple[float, int, str]:
        """Higher score first, then higher count, then location ascending."""
        return (-self.score, -self.count, self.location)

    def __lt__(self, other: "QueryResult") -> bool:
        if not isinstance(other, QueryResult):
            return NotImplemented
        return self.sort_key < other.sort_key

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the where/count/score mapping used in result snapshots."""
        return {
            "where": self.location,
            "count": self.count,
            "score": self.score
        }
