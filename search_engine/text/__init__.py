"""
Text cleaning, tokenizing and stemming.
"""

from .text_parser import clean, parse, stem, stem_line, unique_stems

__all__ = ['clean', 'parse', 'stem', 'stem_line', 'unique_stems']
