"""Tests for the domain models."""

import dataclasses

import pytest

from tests.unit.fakes import FakeStore, make_container, make_thread
from threads_tree.errors import DataQualityWarning, InvalidTimestamp, MalformedEntity, ThreadsError
from threads_tree.models.entity import DetailsEntry, ThreadsData
from threads_tree.protocols import StoreProtocol


def test_models_are_frozen() -> None:
    thread = make_thread("t1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        thread.name = "changed"  # type: ignore[misc]


def test_thread_defaults() -> None:
    thread = make_thread("t1")
    assert thread.status == "active"
    assert thread.importance == 3
    assert thread.parent_id is None
    assert thread.current_details is None


def test_current_details_is_the_latest_entry() -> None:
    details = (
        DetailsEntry(id="a", timestamp="2026-01-01", content="old"),
        DetailsEntry(id="b", timestamp="2026-02-01", content="new"),
    )
    assert make_container("c", details=details).current_details == details[1]


def test_entities_lists_threads_then_containers() -> None:
    data = ThreadsData(threads=(make_thread("t"),), containers=(make_container("c"),))
    assert [e.id for e in data.entities] == ["t", "c"]


def test_errors_share_a_base_class() -> None:
    assert issubclass(InvalidTimestamp, ThreadsError)
    assert issubclass(MalformedEntity, ThreadsError)
    assert str(MalformedEntity("bad", entity_id="x")) == "Malformed entity 'x': bad"
    assert str(MalformedEntity("bad", position=3)) == "Malformed entity at position 3: bad"


def test_data_quality_warning() -> None:
    warning = DataQualityWarning("parent-cycle", "a")
    assert warning.detail == ""


def test_fake_store_matches_protocol() -> None:
    store = FakeStore()
    assert isinstance(store, StoreProtocol)
    assert store.load() == ThreadsData()
    assert store.loads == 1
