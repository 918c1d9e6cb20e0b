"""Result types for search, timeline and focus queries."""

from dataclasses import dataclass
from typing import Literal

from threads_tree.models.entity import ProgressEntry, Thread

SearchScope = Literal["name", "description", "progress", "details", "tags", "all"]

SEARCH_SCOPES: tuple[SearchScope, ...] = ("name", "description", "progress", "details", "tags", "all")


@dataclass(frozen=True)
class SearchMatch:
    """One occurrence of the query inside a field of a thread."""

    scope: SearchScope
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class SearchResult:
    thread: Thread
    matches: tuple[SearchMatch, ...]


@dataclass(frozen=True)
class TimelineEntry:
    """A progress note together with the thread it was logged on."""

    thread: Thread
    progress: ProgressEntry


@dataclass(frozen=True)
class ScoredThread:
    """A thread with its focus score and the parts that make it up."""

    thread: Thread
    total: float
    importance: int
    temperature: int
    recency: float
