"""
Tokenizer and stemmer for documents and queries.

Text is Unicode-normalized, stripped of everything but letters and
whitespace, lowercased and split into words; words are reduced with the
English Snowball stemmer before they reach the index.
"""

import re
import unicodedata
from typing import Iterator, List

from nltk.stem.snowball import SnowballStemmer


STEMMER_LANGUAGE = "english"

_STEMMER = SnowballStemmer(STEMMER_LANGUAGE)
_SPLIT_REGEX = re.compile(r"\s+")


def clean(text: str) -> str:
    """Normalize text and keep only lowercase letters and whitespace."""
    normalized = unicodedata.normalize("NFD", text)
    kept = "".join(
        ch for ch in normalized
        if ch.isspace() or unicodedata.category(ch).startswith("L")
    )
    return kept.lower()


def parse(text: str) -> Iterator[str]:
    """
    Yield the cleaned words of text in order.

    Calling parse again restarts from the beginning.
    """
    for word in _SPLIT_REGEX.split(clean(text)):
        if word:
            yield word


def stem(word: str) -> str:
    """Return the Snowball stem of a cleaned word."""
    return _STEMMER.stem(word)


def stem_line(text: str) -> List[str]:
    """Stem every word of text, keeping order and duplicates."""
    return [stem(word) for word in parse(text)]


def unique_stems(text: str) -> List[str]:
    """Sorted, deduplicated stems of text (the canonical form of a query line)."""
    return sorted(set(stem_line(text)))
