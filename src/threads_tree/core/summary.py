"""Dashboard-style overview of a threads snapshot."""

from datetime import UTC, datetime
from typing import Any

from threads_tree.core.temperature import TEMPERATURE_ORDER, derive_temperature, parse_timestamp
from threads_tree.models.entity import THREAD_STATUSES, Thread, ThreadsData


def _last_activity(thread: Thread) -> str:
    """Timestamp of the latest progress note, or creation when there is none."""
    return thread.progress[-1].timestamp if thread.progress else thread.created_at


def summarize(data: ThreadsData, *, now: datetime | None = None, days: int = 7) -> dict[str, Any]:
    """Summarize a snapshot: counts, hot threads, and threads going cold.

    Args:
        data: The snapshot to summarize.
        now: Reference time (defaults to wall clock).
        days: Active threads with no activity for longer than this are "going cold".
    """
    reference = parse_timestamp(now) if now is not None else datetime.now(UTC)
    temperatures = {t.id: derive_temperature(t.updated_at, reference) for t in data.threads}

    by_status = {status: 0 for status in THREAD_STATUSES}
    by_temperature = {temperature: 0 for temperature in TEMPERATURE_ORDER}
    for thread in data.threads:
        by_status[thread.status] = by_status.get(thread.status, 0) + 1
        by_temperature[temperatures[thread.id]] += 1

    live = [t for t in data.threads if t.status != "archived"]
    hot = [t for t in live if temperatures[t.id] == "hot"]
    going_cold = [
        t
        for t in live
        if t.status == "active"
        and (reference - parse_timestamp(_last_activity(t))).total_seconds() > days * 86_400
    ]

    return {
        "counts": {
            "threads": len(data.threads),
            "containers": len(data.containers),
            "groups": len(data.groups),
        },
        "by_status": by_status,
        "by_temperature": by_temperature,
        "hot": [{"id": t.id, "name": t.name, "importance": t.importance} for t in hot],
        "going_cold": [
            {"id": t.id, "name": t.name, "last_activity": _last_activity(t)} for t in going_cold
        ],
    }
