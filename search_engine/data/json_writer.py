"""
Pretty JSON snapshots of the index, the word counts and query results.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from search_engine.index.base import BaseInvertedIndex
from search_engine.index.models import QueryResult
from search_engine.utils.logging import get_logger


logger = get_logger(__name__)

SCORE_DECIMALS = 8


def index_to_dict(index: BaseInvertedIndex) -> Dict[str, Dict[str, List[int]]]:
    """term -> location -> positions, all in ascending order."""
    return index.to_dict()


def counts_to_dict(index: BaseInvertedIndex) -> Dict[str, int]:
    """location -> word count, in location order."""
    return index.get_counts()


def results_to_dict(results: Dict[str, List[QueryResult]]) -> Dict[str, List[Dict[str, Any]]]:
    """canonical query -> ranked where/count/score entries, in query order."""
    output = {}
    for query in sorted(results):
        entries = []
        for result in results[query]:
            entry = result.to_dict()
            entry["score"] = round(entry["score"], SCORE_DECIMALS)
            entries.append(entry)
        output[query] = entries
    return output


def write_json(data: Any, path: Union[str, Path]) -> None:
    """Write data as indented UTF-8 JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.info(f"Wrote {path}")


def write_index(index: BaseInvertedIndex, path: Union[str, Path]) -> None:
    write_json(index_to_dict(index), path)


def write_counts(index: BaseInvertedIndex, path: Union[str, Path]) -> None:
    write_json(counts_to_dict(index), path)


def write_results(results: Dict[str, List[QueryResult]], path: Union[str, Path]) -> None:
    write_json(results_to_dict(results), path)
