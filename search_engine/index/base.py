"""
Capability interface shared by the plain and the thread-safe inverted index.
"""

from abc import ABC, abstractmethod
from typing import Collection, Dict, List

from .models import QueryResult


class BaseInvertedIndex(ABC):
    """Abstract inverted index: term -> location -> positions, plus per-location word counts."""

    @abstractmethod
    def add(self, term: str, location: str, position: int) -> bool:
        """Record term at position in location; returns False for a duplicate."""
        pass

    @abstractmethod
    def add_all(self, terms: Collection[str], location: str, start: int = 1) -> int:
        """Record terms at consecutive positions from start; returns the number added."""
        pass

    @abstractmethod
    def merge(self, other: "InvertedIndex") -> None:
        """Fold every posting and count of a plain InvertedIndex into this index."""
        pass

    @abstractmethod
    def get_terms(self) -> List[str]:
        """All terms in ascending order."""
        pass

    @abstractmethod
    def get_locations(self, term: str) -> List[str]:
        """Locations containing term, in ascending order."""
        pass

    @abstractmethod
    def get_positions(self, term: str, location: str) -> List[int]:
        """Positions of term in location, ascending."""
        pass

    @abstractmethod
    def get_count(self, location: str) -> int:
        """Total words recorded for location, 0 if unknown."""
        pass

    @abstractmethod
    def get_counts(self) -> Dict[str, int]:
        """Snapshot of location -> word count in location order."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Dict[str, List[int]]]:
        """Nested term -> location -> positions snapshot in sorted order."""
        pass

    @abstractmethod
    def contains(self, term: str, location: str = None, position: int = None) -> bool:
        """Membership test for a term, a term/location pair or a full triple."""
        pass

    @abstractmethod
    def num_terms(self) -> int:
        pass

    @abstractmethod
    def num_locations(self) -> int:
        pass

    @abstractmethod
    def exact_search(self, terms: Collection[str]) -> List[QueryResult]:
        """Results for locations containing any of the exact terms."""
        pass

    @abstractmethod
    def partial_search(self, terms: Collection[str]) -> List[QueryResult]:
        """Results for locations containing any term starting with one of terms."""
        pass

    def search(self, terms: Collection[str], exact: bool) -> List[QueryResult]:
        """Dispatch to exact_search or partial_search."""
        return self.exact_search(terms) if exact else self.partial_search(terms)
