"""
Pytest configuration and fixtures for search engine tests.
"""

import pytest
from hypothesis import settings, Verbosity
from pathlib import Path
import os

from search_engine.concurrent.work_queue import WorkQueue

# Configure Hypothesis for faster test runs
settings.register_profile("fast", max_examples=20, deadline=5000, verbosity=Verbosity.quiet)
settings.register_profile("thorough", max_examples=200, deadline=30000, verbosity=Verbosity.normal)

# Use fast profile by default
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "fast"))


CORPUS = {
    "animals/cats.txt": "The cat sat.\nCats are sitting on the mat",
    "animals/dogs.TEXT": "A dog chased the cat\n\nDogs bark loudly",
    "animals/notes.md": "cat cat cat",
    "plants/trees.text": "Oak trees and pine trees",
    "plants/empty.txt": "",
    "readme.txt": "Café naïve résumé",
}


@pytest.fixture
def text_corpus(tmp_path) -> Path:
    """A small directory tree mixing text files with files that are skipped."""
    for relative, content in CORPUS.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def work_queue():
    """A three-worker queue, shut down after the test."""
    queue = WorkQueue(3)
    yield queue
    queue.shutdown()
    queue.join(timeout=5)


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "property: property-based test")
    config.addinivalue_line("markers", "unit: unit test")

    # Configure logging for tests
    import logging
    logging.getLogger("search_engine").setLevel(logging.WARNING)
    logging.getLogger("hypothesis").setLevel(logging.WARNING)


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Mark property-based tests
        if any(marker.name == "hypothesis" for marker in item.iter_markers()) or "propert" in item.name.lower():
            item.add_marker(pytest.mark.property)
        else:
            item.add_marker(pytest.mark.unit)
