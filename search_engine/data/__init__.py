"""
Serialization of index and query snapshots.
"""

from .json_writer import (
    index_to_dict,
    counts_to_dict,
    results_to_dict,
    write_json,
    write_index,
    write_counts,
    write_results
)

__all__ = [
    'index_to_dict',
    'counts_to_dict',
    'results_to_dict',
    'write_json',
    'write_index',
    'write_counts',
    'write_results'
]
