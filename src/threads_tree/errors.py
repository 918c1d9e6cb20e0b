"""Error types raised (or recorded) by the threads tree core."""

from dataclasses import dataclass
from typing import Any, Literal


class ThreadsError(Exception):
    """Base class for all threads-tree failures."""


class InvalidTimestamp(ThreadsError, ValueError):
    """A timestamp could not be parsed."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid timestamp: {value!r}")


class MalformedEntity(ThreadsError, ValueError):
    """A raw record cannot be classified as either a thread or a container."""

    def __init__(self, reason: str, *, entity_id: str | None = None, position: int | None = None) -> None:
        self.reason = reason
        self.entity_id = entity_id
        self.position = position
        where = f"entity {entity_id!r}" if entity_id else f"entity at position {position}"
        super().__init__(f"Malformed {where}: {reason}")


IssueKind = Literal["duplicate-id", "dangling-parent", "dangling-group", "parent-cycle"]


@dataclass(frozen=True)
class DataQualityWarning:
    """A non-fatal data problem found while assembling the hierarchy.

    These are collected and logged, never raised.
    """

    kind: IssueKind
    entity_id: str
    detail: str = ""
