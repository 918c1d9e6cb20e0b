"""Tests for entity detail and summary text."""

from tests.unit.fakes import NOW, ago, make_container, make_thread
from threads_tree.core.detail import (
    format_container_detail,
    format_tags,
    format_thread_detail,
    format_thread_summary,
)
from threads_tree.models.entity import Dependency, DetailsEntry, ProgressEntry, ThreadsData


def test_format_tags() -> None:
    assert format_tags(("a", "b")) == "#a #b"
    assert format_tags(()) == ""


def test_thread_summary() -> None:
    thread = make_thread("t-123456789", name="Ship", description="Public API", importance=4, size="large")
    assert format_thread_summary(thread, now=NOW) == (
        "Ship [t-123456]\n"
        "  Status: ACTIVE | Temp: Hot | Size: Large | Importance: ★★★★☆\n"
        "  Public API"
    )


def test_thread_detail_sections(sample_data: ThreadsData) -> None:
    text = format_thread_detail(sample_data.threads[0], now=NOW)
    lines = text.split("\n")
    assert lines[0] == "Ship API"
    assert "Temperature: Hot" in lines
    assert "Tags:        #backend #urgent" in lines
    assert "Details: (updated " + ago(1) + ")" in lines
    assert "  current state" in lines
    assert "  second line" in lines
    assert "  → t-auth-0002" in lines
    assert "    Why: needs tokens" in lines
    assert "    What: " not in text
    assert lines[-1] == f"  [{ago(0.5)}] wrote tests"


def test_thread_detail_truncates_progress() -> None:
    progress = tuple(ProgressEntry(id=f"p{i}", timestamp=ago(10 - i), note=f"note {i}") for i in range(7))
    text = format_thread_detail(make_thread("t", progress=progress), now=NOW)
    assert "note 0" not in text
    assert "note 1" not in text
    assert "note 2" in text
    assert text.endswith("  ... and 2 more entries")


def test_thread_detail_minimal() -> None:
    text = format_thread_detail(make_thread("t"), now=NOW)
    assert "Dependencies:" not in text
    assert "Progress:" not in text
    assert "Parent:" not in text


def test_dependency_with_every_field() -> None:
    dep = Dependency(thread_id="other", why="w1", what="w2", how="w3", when="w4")
    text = format_thread_detail(make_thread("t", dependencies=(dep,)), now=NOW)
    assert "    Why: w1\n    What: w2\n    How: w3\n    When: w4" in text


def test_container_detail() -> None:
    container = make_container(
        "c1",
        name="Backend",
        tags=("infra",),
        parent_id="root",
        details=(DetailsEntry(id="d", timestamp="2026-02-01", content="notes"),),
    )
    lines = format_container_detail(container).split("\n")
    assert lines[0] == "Backend (container)"
    assert "ID:          c1" in lines
    assert "Tags:        #infra" in lines
    assert "  notes" in lines
    assert "Parent:      root" in lines
    assert not any(line.startswith("Status") for line in lines)
