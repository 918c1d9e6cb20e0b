"""Tests for thread/container classification."""

import pytest

from tests.unit.fakes import make_container, make_thread
from threads_tree.core.classify import classify, entity_kind, is_container, is_thread
from threads_tree.errors import MalformedEntity


def test_record_with_lifecycle_fields_is_thread() -> None:
    assert classify({"id": "a", "status": "active"}) == "thread"
    assert classify({"id": "a", "importance": 2}) == "thread"
    assert classify({"id": "a", "size": "small"}) == "thread"


def test_record_without_lifecycle_fields_is_container() -> None:
    assert classify({"id": "a", "name": "Folder", "tags": []}) == "container"


def test_explicit_type_tag_wins_over_shape() -> None:
    assert classify({"id": "a", "type": "container", "status": "active"}) == "container"
    assert classify({"id": "a", "type": "thread"}) == "thread"


def test_any_non_container_tag_is_thread() -> None:
    assert classify({"id": "a", "type": "note"}) == "thread"
    assert is_thread({"id": "a", "type": "task", "status": "active"})
    assert not is_container({"id": "a", "type": "task", "status": "active"})


def test_missing_id_raises_with_position() -> None:
    with pytest.raises(MalformedEntity) as exc_info:
        classify({"name": "Nameless", "status": "active"}, position=4)
    assert exc_info.value.position == 4
    assert "Nameless" in str(exc_info.value)
    assert "position 4" in str(exc_info.value)


def test_empty_id_raises() -> None:
    with pytest.raises(MalformedEntity):
        classify({"id": "", "status": "active"})


def test_non_mapping_raises() -> None:
    with pytest.raises(MalformedEntity, match="not an object"):
        classify(["id", "a"])  # type: ignore[arg-type]


def test_typed_entities_use_their_class() -> None:
    assert entity_kind(make_thread("t")) == "thread"
    assert entity_kind(make_container("c")) == "container"
    assert is_thread(make_thread("t"))
    assert not is_thread(make_container("c"))
    assert is_container(make_container("c"))
    assert not is_container(make_thread("t"))


def test_predicates_accept_raw_records() -> None:
    assert is_container({"id": "c", "name": "Folder"})
    assert is_thread({"id": "t", "status": "paused"})
