"""Domain models for threads, containers and groups."""

from dataclasses import dataclass, field
from typing import Literal

ThreadStatus = Literal["active", "paused", "stopped", "completed", "archived"]
ThreadSize = Literal["tiny", "small", "medium", "large", "huge"]
Temperature = Literal["hot", "warm", "tepid", "cold", "freezing", "frozen"]
LinkType = Literal["web", "file", "thread", "custom"]
EntityKind = Literal["thread", "container"]

THREAD_STATUSES: tuple[ThreadStatus, ...] = ("active", "paused", "stopped", "completed", "archived")
THREAD_SIZES: tuple[ThreadSize, ...] = ("tiny", "small", "medium", "large", "huge")


@dataclass(frozen=True)
class ProgressEntry:
    """A self-reported progress note."""

    id: str
    timestamp: str
    note: str


@dataclass(frozen=True)
class DetailsEntry:
    """A snapshot of an entity's current state. The latest one wins."""

    id: str
    timestamp: str
    content: str


@dataclass(frozen=True)
class Link:
    """A related resource (URL, file, another thread)."""

    id: str
    uri: str
    type: LinkType
    added_at: str
    label: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Dependency:
    """A dependency on another thread, with context."""

    thread_id: str
    why: str = ""
    what: str = ""
    how: str = ""
    when: str = ""


@dataclass(frozen=True)
class Thread:
    """A trackable unit of work with lifecycle and momentum."""

    id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""
    status: ThreadStatus = "active"
    importance: int = 3
    size: ThreadSize = "medium"
    parent_id: str | None = None
    group_id: str | None = None
    tags: tuple[str, ...] = ()
    links: tuple[Link, ...] = ()
    dependencies: tuple[Dependency, ...] = ()
    progress: tuple[ProgressEntry, ...] = ()
    details: tuple[DetailsEntry, ...] = ()

    @property
    def current_details(self) -> DetailsEntry | None:
        return self.details[-1] if self.details else None


@dataclass(frozen=True)
class Container:
    """A purely organizational node without momentum semantics."""

    id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""
    parent_id: str | None = None
    group_id: str | None = None
    tags: tuple[str, ...] = ()
    details: tuple[DetailsEntry, ...] = ()

    @property
    def current_details(self) -> DetailsEntry | None:
        return self.details[-1] if self.details else None


Entity = Thread | Container


@dataclass(frozen=True)
class Group:
    """A flat label that entities can belong to. Groups never nest."""

    id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""


@dataclass(frozen=True)
class ThreadsData:
    """Everything the store holds, as one snapshot."""

    threads: tuple[Thread, ...] = ()
    containers: tuple[Container, ...] = ()
    groups: tuple[Group, ...] = ()
    version: str = "1.0.0"
    # Threads and containers interleaved as they appear in the stored document.
    document_order: tuple[Entity, ...] = field(default=(), compare=False, repr=False)

    @property
    def entities(self) -> tuple[Entity, ...]:
        if self.document_order:
            return self.document_order
        return (*self.threads, *self.containers)
