"""Protocols for dependency injection of the storage collaborator."""

from typing import Protocol, runtime_checkable

from threads_tree.models.entity import ThreadsData


@runtime_checkable
class StoreProtocol(Protocol):
    """Anything that can hand over a full snapshot of threads, containers and groups."""

    def load(self) -> ThreadsData:
        """Read and return the current snapshot."""
        ...
