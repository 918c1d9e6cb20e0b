"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from tests.unit.fakes import SAMPLE_DOCUMENT
from threads_tree.core.importer.json_reader import parse_threads_data
from threads_tree.models.entity import ThreadsData


@pytest.fixture
def sample_data() -> ThreadsData:
    """The sample document parsed into models."""
    return parse_threads_data(SAMPLE_DOCUMENT)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """A threads.json with the sample document on disk."""
    path = tmp_path / "threads.json"
    path.write_text(json.dumps(SAMPLE_DOCUMENT), encoding="utf-8")
    return path
