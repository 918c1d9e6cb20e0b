"""Progress notes across threads, in chronological order."""

from collections.abc import Iterable
from datetime import datetime

from threads_tree.core.temperature import parse_timestamp
from threads_tree.models.entity import Thread
from threads_tree.models.results import TimelineEntry

THREAD_COLUMN_WIDTH = 20


def collect_timeline(
    threads: Iterable[Thread],
    *,
    since: str | datetime | None = None,
    until: str | datetime | None = None,
    reverse: bool = False,
    limit: int | None = None,
) -> list[TimelineEntry]:
    """Gather every progress note of ``threads`` with its thread.

    Args:
        threads: Threads whose progress to collect.
        since: Drop notes older than this (inclusive bound).
        until: Drop notes newer than this (inclusive bound).
        reverse: Oldest first instead of newest first.
        limit: Keep at most this many entries (after sorting); ``None`` or
            ``0`` keeps all.

    Raises:
        InvalidTimestamp: If a bound or a progress timestamp cannot be parsed.
    """
    lower = parse_timestamp(since) if since is not None else None
    upper = parse_timestamp(until) if until is not None else None

    dated: list[tuple[datetime, TimelineEntry]] = []
    for thread in threads:
        for progress in thread.progress:
            when = parse_timestamp(progress.timestamp)
            if lower is not None and when < lower:
                continue
            if upper is not None and when > upper:
                continue
            dated.append((when, TimelineEntry(thread=thread, progress=progress)))

    dated.sort(key=lambda item: item[0], reverse=not reverse)
    entries = [entry for _, entry in dated]
    if limit:
        entries = entries[:limit]
    return entries


def truncate(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else text[: max_len - 1] + "…"


def format_timeline_entry(entry: TimelineEntry) -> str:
    when = parse_timestamp(entry.progress.timestamp).strftime("%Y-%m-%d %H:%M")
    name = truncate(entry.thread.name, THREAD_COLUMN_WIDTH).ljust(THREAD_COLUMN_WIDTH)
    return f"{when} {name} {entry.progress.note}"
