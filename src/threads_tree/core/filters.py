"""Filtering and ordering for thread listings."""

from collections.abc import Iterable
from datetime import datetime

from threads_tree.core.temperature import TEMPERATURE_ORDER, derive_temperature, parse_timestamp
from threads_tree.models.entity import Container, Entity, Thread, ThreadsData


def filter_threads(
    threads: Iterable[Thread],
    *,
    status: str | None = None,
    temperature: str | None = None,
    size: str | None = None,
    min_importance: int | None = None,
    group_id: str | None = None,
    tag: str | None = None,
    include_archived: bool = False,
    now: datetime | None = None,
) -> list[Thread]:
    """Return the threads matching every given criterion, in input order.

    Archived threads are hidden unless ``include_archived`` is set or the
    status filter asks for them explicitly.
    """
    result = list(threads)

    if not include_archived and status != "archived":
        result = [t for t in result if t.status != "archived"]
    if status:
        result = [t for t in result if t.status == status]
    if temperature:
        result = [t for t in result if derive_temperature(t.updated_at, now) == temperature]
    if size:
        result = [t for t in result if t.size == size]
    if min_importance:
        result = [t for t in result if t.importance >= min_importance]
    if group_id:
        result = [t for t in result if t.group_id == group_id]
    if tag:
        tag_lower = tag.lower()
        result = [t for t in result if any(x.lower() == tag_lower for x in t.tags)]
    return result


def filter_containers(containers: Iterable[Container], *, group_id: str | None = None) -> list[Container]:
    if not group_id:
        return list(containers)
    return [c for c in containers if c.group_id == group_id]


def sort_threads(threads: Iterable[Thread], now: datetime | None = None) -> list[Thread]:
    """Hottest first, then most important, then most recently updated."""

    def key(thread: Thread) -> tuple[int, int, float]:
        temperature = derive_temperature(thread.updated_at, now)
        return (
            TEMPERATURE_ORDER.index(temperature),
            -thread.importance,
            -parse_timestamp(thread.updated_at).timestamp(),
        )

    return sorted(threads, key=key)


def in_document_order(
    data: ThreadsData, threads: Iterable[Thread], containers: Iterable[Container]
) -> list[Entity]:
    """Merge filtered threads and containers back into the order ``data`` stores them in."""
    kept = {id(entity) for entity in threads}
    kept.update(id(entity) for entity in containers)
    return [entity for entity in data.entities if id(entity) in kept]
