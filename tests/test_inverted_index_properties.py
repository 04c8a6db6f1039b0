"""
Property-based tests for the inverted index.

**Feature: search-engine, Property 1: Index add idempotence**
**Feature: search-engine, Property 2: Partial search covers exact search**
**Feature: search-engine, Property 3: Result ordering**
"""

import pytest
from hypothesis import given, strategies as st
from hypothesis import settings

from search_engine.index import InvertedIndex, QueryResult


terms_strategy = st.text(alphabet="abcde", min_size=1, max_size=4)
locations_strategy = st.sampled_from(["a.txt", "b.txt", "c.txt", "https://example.com/"])
postings_strategy = st.lists(
    st.tuples(terms_strategy, locations_strategy, st.integers(min_value=1, max_value=30)),
    max_size=60
)


def build_index(postings):
    index = InvertedIndex()
    for term, location, position in postings:
        index.add(term, location, position)
    return index


class TestIndexAddIdempotence:
    """Adding the same posting twice changes nothing."""

    @given(postings=postings_strategy)
    def test_adding_postings_twice_leaves_index_unchanged(self, postings):
        """
        **Feature: search-engine, Property 1: Index add idempotence**

        For any sequence of postings, replaying it leaves postings and
        word counts exactly as they were.
        """
        index = build_index(postings)
        snapshot = index.to_dict()
        counts = index.get_counts()

        for term, location, position in postings:
            assert index.add(term, location, position) is False

        assert index.to_dict() == snapshot
        assert index.get_counts() == counts

    @given(postings=postings_strategy)
    def test_count_equals_distinct_positions_per_location(self, postings):
        """Word count of a location is the number of distinct (term, position) pairs."""
        index = build_index(postings)

        expected = {}
        for term, location, position in set(postings):
            expected[location] = expected.get(location, 0) + 1

        assert index.get_counts() == dict(sorted(expected.items()))

    def test_add_reports_new_positions(self):
        index = InvertedIndex()

        assert index.add("cat", "a.txt", 1) is True
        assert index.add("cat", "a.txt", 1) is False
        assert index.add("cat", "a.txt", 2) is True
        assert index.get_count("a.txt") == 2

    @pytest.mark.parametrize("term,location,position", [
        ("", "a.txt", 1),
        ("cat", "", 1),
        ("cat", "a.txt", 0),
        ("cat", "a.txt", -3),
    ])
    def test_add_rejects_invalid_postings(self, term, location, position):
        index = InvertedIndex()

        with pytest.raises(ValueError):
            index.add(term, location, position)

        assert index.num_terms() == 0
        assert index.num_locations() == 0


class TestIndexAccessors:
    """Test read accessors and ordering."""

    def setup_method(self):
        self.index = InvertedIndex()
        self.index.add_all(["dog", "cat", "dog"], "b.txt")
        self.index.add_all(["cat", "bird"], "a.txt")

    def test_terms_sorted(self):
        assert self.index.get_terms() == ["bird", "cat", "dog"]

    def test_locations_sorted(self):
        assert self.index.get_locations("cat") == ["a.txt", "b.txt"]

    def test_positions_sorted(self):
        assert self.index.get_positions("dog", "b.txt") == [1, 3]

    def test_missing_entries_are_empty(self):
        assert self.index.get_locations("fish") == []
        assert self.index.get_positions("fish", "a.txt") == []
        assert self.index.get_positions("cat", "c.txt") == []
        assert self.index.get_count("c.txt") == 0

    def test_contains_at_each_level(self):
        assert self.index.contains("cat")
        assert self.index.contains("cat", "a.txt")
        assert self.index.contains("cat", "a.txt", 1)
        assert not self.index.contains("cat", "a.txt", 2)
        assert not self.index.contains("cat", "c.txt")
        assert not self.index.contains("fish")

    def test_sizes(self):
        assert self.index.num_terms() == 3
        assert self.index.num_locations() == 2

    def test_to_dict_nested_and_sorted(self):
        assert self.index.to_dict() == {
            "bird": {"a.txt": [2]},
            "cat": {"a.txt": [1], "b.txt": [2]},
            "dog": {"b.txt": [1, 3]}
        }

    def test_accessors_return_copies(self):
        terms = self.index.get_terms()
        terms.append("zebra")
        positions = self.index.get_positions("dog", "b.txt")
        positions.clear()

        assert self.index.get_terms() == ["bird", "cat", "dog"]
        assert self.index.get_positions("dog", "b.txt") == [1, 3]


class TestIndexMerge:
    """Test merging a private index into a shared one."""

    def test_merge_unions_postings_and_adds_counts(self):
        target = InvertedIndex()
        target.add("cat", "a.txt", 1)

        other = InvertedIndex()
        other.add("cat", "b.txt", 1)
        other.add("dog", "b.txt", 2)

        target.merge(other)

        assert target.get_locations("cat") == ["a.txt", "b.txt"]
        assert target.get_locations("dog") == ["b.txt"]
        assert target.get_counts() == {"a.txt": 1, "b.txt": 2}

    def test_merge_does_not_share_sets(self):
        target = InvertedIndex()
        other = InvertedIndex()
        other.add("cat", "b.txt", 1)

        target.merge(other)
        other.add("cat", "b.txt", 5)

        assert target.get_positions("cat", "b.txt") == [1]
        assert other.get_positions("cat", "b.txt") == [1, 5]

    @given(left=postings_strategy, right=postings_strategy)
    def test_merge_of_disjoint_locations_matches_direct_build(self, left, right):
        """Merging an index over other locations equals adding its postings directly."""
        left = [(t, "left/" + l, p) for t, l, p in left]
        right = [(t, "right/" + l, p) for t, l, p in right]

        merged = build_index(left)
        merged.merge(build_index(right))

        direct = build_index(left + right)

        assert merged.to_dict() == direct.to_dict()
        assert merged.get_counts() == direct.get_counts()
        assert merged.get_terms() == direct.get_terms()


class TestSearch:
    """Test exact and partial search."""

    def setup_method(self):
        self.index = InvertedIndex()
        self.index.add_all(["cat", "catalog", "dog"], "a.txt")
        self.index.add_all(["cat", "cat", "bird", "fish"], "b.txt")
        self.index.add_all(["category"], "c.txt")

    def test_exact_search_counts_and_scores(self):
        results = self.index.exact_search(["cat"])

        assert results == [
            QueryResult("b.txt", 2, 0.5),
            QueryResult("a.txt", 1, 1 / 3),
        ]

    def test_partial_search_matches_prefixes(self):
        results = self.index.partial_search(["cat"])

        assert [r.location for r in results] == ["c.txt", "a.txt", "b.txt"]
        assert results[0] == QueryResult("c.txt", 1, 1.0)
        assert results[1] == QueryResult("a.txt", 2, 2 / 3)
        assert results[2] == QueryResult("b.txt", 2, 0.5)

    def test_unknown_terms_give_no_results(self):
        assert self.index.exact_search(["zebra"]) == []
        assert self.index.partial_search(["zebra"]) == []
        assert self.index.exact_search([]) == []

    def test_exact_search_does_not_match_prefixes(self):
        assert self.index.exact_search(["ca"]) == []

    def test_search_dispatches_on_exact_flag(self):
        assert self.index.search(["ca"], exact=True) == []
        assert len(self.index.search(["ca"], exact=False)) == 3

    def test_overlapping_prefixes_count_each_match(self):
        # "cat" and "catalog" both match "catalog" at a.txt
        results = self.index.partial_search(["cat", "catal"])
        by_location = {r.location: r for r in results}

        assert by_location["a.txt"].count == 3

    def test_ties_broken_by_count_then_location(self):
        index = InvertedIndex()
        index.add_all(["x", "y"], "b.txt")
        index.add_all(["x", "y"], "a.txt")
        index.add_all(["x", "x", "y", "y"], "c.txt")

        results = index.exact_search(["x"])

        # all scores are 0.5
        assert [r.location for r in results] == ["c.txt", "a.txt", "b.txt"]

    @given(postings=postings_strategy, prefix=st.text(alphabet="abcde", min_size=1, max_size=2))
    def test_partial_search_equals_sum_of_exact_searches(self, postings, prefix):
        """
        **Feature: search-engine, Property 2: Partial search covers exact search**

        A single-prefix partial search returns, per location, the sum of the
        exact-search counts over every indexed term with that prefix.
        """
        index = build_index(postings)
        expected = {}
        for term in index.get_terms():
            if term.startswith(prefix):
                for result in index.exact_search([term]):
                    expected[result.location] = expected.get(result.location, 0) + result.count

        results = index.partial_search([prefix])

        assert {r.location: r.count for r in results} == expected

    @given(postings=postings_strategy, query=st.lists(terms_strategy, min_size=1, max_size=3))
    @settings(max_examples=50)
    def test_results_are_ranked(self, postings, query):
        """
        **Feature: search-engine, Property 3: Result ordering**

        Results are ordered by score descending, count descending, location
        ascending, and every score is count over the location's word count.
        """
        index = build_index(postings)

        for results in (index.exact_search(query), index.partial_search(query)):
            keys = [(-r.score, -r.count, r.location) for r in results]
            assert keys == sorted(keys)
            assert len({r.location for r in results}) == len(results)
            for result in results:
                assert result.score == result.count / index.get_count(result.location)
                assert 0 < result.score
