"""Tests for thread filtering and sorting."""

from tests.unit.fakes import NOW, ago, make_container, make_group, make_thread
from threads_tree.core.filters import filter_containers, filter_threads, in_document_order, sort_threads
from threads_tree.models.entity import ThreadsData


def _ids(threads: list) -> list[str]:
    return [t.id for t in threads]


def test_archived_hidden_by_default(sample_data: ThreadsData) -> None:
    assert "t-old-0005" not in _ids(filter_threads(sample_data.threads))
    assert "t-old-0005" in _ids(filter_threads(sample_data.threads, include_archived=True))


def test_archived_status_filter_shows_archived(sample_data: ThreadsData) -> None:
    assert _ids(filter_threads(sample_data.threads, status="archived")) == ["t-old-0005"]


def test_filter_by_derived_temperature(sample_data: ThreadsData) -> None:
    assert _ids(filter_threads(sample_data.threads, temperature="hot", now=NOW)) == ["t-api-0001"]
    assert _ids(filter_threads(sample_data.threads, temperature="frozen", now=NOW)) == ["t-taxes-04"]


def test_filter_by_tag_is_case_insensitive(sample_data: ThreadsData) -> None:
    assert _ids(filter_threads(sample_data.threads, tag="BACKEND")) == ["t-api-0001"]


def test_combined_filters(sample_data: ThreadsData) -> None:
    result = filter_threads(sample_data.threads, min_importance=4, status="active")
    assert _ids(result) == ["t-api-0001", "t-taxes-04"]
    assert _ids(filter_threads(sample_data.threads, group_id="g-home")) == ["t-garden-03"]
    assert _ids(filter_threads(sample_data.threads, size="large")) == ["t-api-0001"]


def test_filter_containers_by_group() -> None:
    containers = [make_container("a", group_id="g"), make_container("b")]
    assert [c.id for c in filter_containers(containers, group_id="g")] == ["a"]
    assert [c.id for c in filter_containers(containers)] == ["a", "b"]


def test_sort_hottest_then_importance_then_recency() -> None:
    threads = [
        make_thread("cold", updated_at=ago(10), importance=5),
        make_thread("hot-low", updated_at=ago(0.5), importance=1),
        make_thread("hot-high-old", updated_at=ago(0.9), importance=5),
        make_thread("hot-high-new", updated_at=ago(0.1), importance=5),
    ]
    assert _ids(sort_threads(threads, NOW)) == ["hot-high-new", "hot-high-old", "hot-low", "cold"]


def test_in_document_order_interleaves_kinds_as_stored() -> None:
    folder = make_container("c1", group_id="g")
    task = make_thread("t1", group_id="g")
    archived = make_thread("t2", status="archived", group_id="g")
    data = ThreadsData(
        threads=(task, archived),
        containers=(folder,),
        groups=(make_group("g", "Work"),),
        document_order=(folder, task, archived),
    )
    kept = in_document_order(data, filter_threads(data.threads), filter_containers(data.containers))
    assert [e.id for e in kept] == ["c1", "t1"]


def test_in_document_order_without_stored_order_puts_threads_first() -> None:
    data = ThreadsData(threads=(make_thread("t1"),), containers=(make_container("c1"),))
    assert [e.id for e in in_document_order(data, data.threads, data.containers)] == ["t1", "c1"]
