"""Recommend which active threads to work on next.

Score = importance * 3 + temperature * 2 + recency, where temperature maps
frozen..hot to 0..5 and recency decays as ``5 / (1 + days / 7)`` from the
latest of ``updated_at`` and the last progress note.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from threads_tree.core.temperature import derive_temperature, parse_timestamp
from threads_tree.models.entity import Temperature, Thread
from threads_tree.models.results import ScoredThread

TEMPERATURE_SCORES: dict[Temperature, int] = {
    "frozen": 0,
    "freezing": 1,
    "cold": 2,
    "tepid": 3,
    "warm": 4,
    "hot": 5,
}

IMPORTANCE_WEIGHT = 3
TEMPERATURE_WEIGHT = 2


def most_recent_activity(thread: Thread) -> datetime:
    latest = parse_timestamp(thread.updated_at)
    if thread.progress:
        last_note = parse_timestamp(thread.progress[-1].timestamp)
        latest = max(latest, last_note)
    return latest


def recency_score(when: datetime, now: datetime) -> float:
    days = (now - when).total_seconds() / 86_400
    return 5 / (1 + days / 7)


def score_thread(thread: Thread, now: datetime | None = None) -> ScoredThread:
    reference = parse_timestamp(now) if now is not None else datetime.now(UTC)
    temperature = TEMPERATURE_SCORES[derive_temperature(thread.updated_at, reference)]
    recency = recency_score(most_recent_activity(thread), reference)
    return ScoredThread(
        thread=thread,
        total=thread.importance * IMPORTANCE_WEIGHT + temperature * TEMPERATURE_WEIGHT + recency,
        importance=thread.importance,
        temperature=temperature,
        recency=recency,
    )


def recommend(threads: Iterable[Thread], *, count: int = 5, now: datetime | None = None) -> list[ScoredThread]:
    """Top ``count`` active threads by score, best first (ties keep input order)."""
    reference = parse_timestamp(now) if now is not None else datetime.now(UTC)
    scored = [score_thread(t, reference) for t in threads if t.status == "active"]
    scored.sort(key=lambda s: -s.total)
    return scored[:count]


def explain_score(scored: ScoredThread) -> str:
    return (
        f"importance={scored.importance}*{IMPORTANCE_WEIGHT} + "
        f"temp={scored.temperature}*{TEMPERATURE_WEIGHT} + recency={scored.recency:.2f}*1"
    )
