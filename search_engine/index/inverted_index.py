"""
Single-threaded inverted index with exact and prefix search.
"""

import bisect
from typing import Collection, Dict, List, Optional, Set

from .base import BaseInvertedIndex
from .models import QueryResult


class InvertedIndex(BaseInvertedIndex):
    """
    Maps each stemmed term to the locations it occurs in and the 1-based
    word positions within each location, and keeps the total word count of
    every location for scoring.

    Terms are kept in a sorted key list alongside the postings map so prefix
    search can start at the first term >= the prefix and stop at the first
    term that no longer shares it.
    """

    def __init__(self):
        self._postings: Dict[str, Dict[str, Set[int]]] = {}
        self._sorted_terms: List[str] = []
        self._counts: Dict[str, int] = {}

    def add(self, term: str, location: str, position: int) -> bool:
        """
        Record one occurrence of term.

        Args:
            term: Stemmed term
            location: File path or URL
            position: 1-based word position in location

        Returns:
            True if the position was new; duplicates change nothing

        Raises:
            ValueError: For an empty term or location, or a position below 1
        """
        if not term or not location:
            raise ValueError("term and location must be non-empty")
        if position < 1:
            raise ValueError(f"position must be >= 1, got {position}")

        locations = self._postings.get(term)
        if locations is None:
            locations = self._postings[term] = {}
            bisect.insort(self._sorted_terms, term)

        positions = locations.setdefault(location, set())
        if position in positions:
            return False

        positions.add(position)
        self._counts[location] = self._counts.get(location, 0) + 1
        return True

    def add_all(self, terms: Collection[str], location: str, start: int = 1) -> int:
        """
        Add terms at consecutive positions starting at start.

        Returns:
            Number of positions newly recorded
        """
        added = 0
        for position, term in enumerate(terms, start=start):
            if self.add(term, location, position):
                added += 1
        return added

    def merge(self, other: "InvertedIndex") -> None:
        """
        Union other's postings into this index and add its counts.

        other is not modified and shares no sets with this index afterwards.
        """
        for term, other_locations in other._postings.items():
            locations = self._postings.get(term)
            if locations is None:
                locations = self._postings[term] = {}
                bisect.insort(self._sorted_terms, term)

            for location, other_positions in other_locations.items():
                positions = locations.get(location)
                if positions is None:
                    locations[location] = set(other_positions)
                else:
                    positions.update(other_positions)

        for location, count in other._counts.items():
            self._counts[location] = self._counts.get(location, 0) + count

    def get_terms(self) -> List[str]:
        return list(self._sorted_terms)

    def get_locations(self, term: str) -> List[str]:
        locations = self._postings.get(term)
        if locations is None:
            return []
        return sorted(locations)

    def get_positions(self, term: str, location: str) -> List[int]:
        positions = self._postings.get(term, {}).get(location)
        if positions is None:
            return []
        return sorted(positions)

    def get_count(self, location: str) -> int:
        return self._counts.get(location, 0)

    def get_counts(self) -> Dict[str, int]:
        return {location: self._counts[location] for location in sorted(self._counts)}

    def contains(self, term: str, location: Optional[str] = None, position: Optional[int] = None) -> bool:
        locations = self._postings.get(term)
        if locations is None:
            return False
        if location is None:
            return True
        positions = locations.get(location)
        if positions is None:
            return False
        if position is None:
            return True
        return position in positions

    def to_dict(self) -> Dict[str, Dict[str, List[int]]]:
        return {
            term: {location: sorted(self._postings[term][location]) for location in sorted(self._postings[term])}
            for term in self._sorted_terms
        }

    def num_terms(self) -> int:
        return len(self._postings)

    def num_locations(self) -> int:
        return len(self._counts)

    def exact_search(self, terms: Collection[str]) -> List[QueryResult]:
        matches: Dict[str, int] = {}

        for term in terms:
            if term in self._postings:
                self._collect(term, matches)

        return self._rank(matches)

    def partial_search(self, terms: Collection[str]) -> List[QueryResult]:
        matches: Dict[str, int] = {}

        for prefix in terms:
            i = bisect.bisect_left(self._sorted_terms, prefix)
            while i < len(self._sorted_terms) and self._sorted_terms[i].startswith(prefix):
                self._collect(self._sorted_terms[i], matches)
                i += 1

        return self._rank(matches)

    def _collect(self, term: str, matches: Dict[str, int]) -> None:
        """Add the posting sizes of term to the per-location match counts."""
        for location, positions in self._postings[term].items():
            matches[location] = matches.get(location, 0) + len(positions)

    def _rank(self, matches: Dict[str, int]) -> List[QueryResult]:
        # Every location with a posting has a positive count
        results = [
            QueryResult.from_matches(location, count, self._counts[location])
            for location, count in matches.items()
        ]
        results.sort()
        return results

    def __repr__(self) -> str:
        return f"InvertedIndex(terms={len(self._postings)}, locations={len(self._counts)})"
