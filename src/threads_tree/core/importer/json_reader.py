"""Parse the stored threads.json document into domain models."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from threads_tree.core.classify import classify
from threads_tree.errors import MalformedEntity
from threads_tree.models.entity import (
    Container,
    Dependency,
    DetailsEntry,
    Entity,
    Group,
    Link,
    ProgressEntry,
    Thread,
    ThreadsData,
)


def _details(raw: Mapping[str, Any]) -> tuple[DetailsEntry, ...]:
    return tuple(
        DetailsEntry(id=d.get("id", ""), timestamp=d.get("timestamp", ""), content=d.get("content", ""))
        for d in raw.get("details") or []
    )


def _optional_id(value: Any) -> str | None:
    # Empty strings show up in hand-edited data; treat them as "no reference".
    return value if isinstance(value, str) and value else None


def parse_thread(raw: Mapping[str, Any]) -> Thread:
    """Build a Thread from its stored (camelCase) form."""
    return Thread(
        id=raw["id"],
        name=raw.get("name", ""),
        description=raw.get("description", ""),
        status=raw.get("status", "active"),
        importance=int(raw.get("importance", 3)),
        size=raw.get("size", "medium"),
        parent_id=_optional_id(raw.get("parentId")),
        group_id=_optional_id(raw.get("groupId")),
        tags=tuple(raw.get("tags") or ()),
        links=tuple(
            Link(
                id=link.get("id", ""),
                uri=link.get("uri", ""),
                type=link.get("type", "custom"),
                added_at=link.get("addedAt", ""),
                label=link.get("label"),
                description=link.get("description"),
            )
            for link in raw.get("links") or []
        ),
        dependencies=tuple(
            Dependency(
                thread_id=dep.get("threadId", ""),
                why=dep.get("why", ""),
                what=dep.get("what", ""),
                how=dep.get("how", ""),
                when=dep.get("when", ""),
            )
            for dep in raw.get("dependencies") or []
        ),
        progress=tuple(
            ProgressEntry(id=p.get("id", ""), timestamp=p.get("timestamp", ""), note=p.get("note", ""))
            for p in raw.get("progress") or []
        ),
        details=_details(raw),
        created_at=raw.get("createdAt", ""),
        updated_at=raw.get("updatedAt", raw.get("createdAt", "")),
    )


def parse_container(raw: Mapping[str, Any]) -> Container:
    """Build a Container from its stored (camelCase) form."""
    return Container(
        id=raw["id"],
        name=raw.get("name", ""),
        description=raw.get("description", ""),
        parent_id=_optional_id(raw.get("parentId")),
        group_id=_optional_id(raw.get("groupId")),
        tags=tuple(raw.get("tags") or ()),
        details=_details(raw),
        created_at=raw.get("createdAt", ""),
        updated_at=raw.get("updatedAt", raw.get("createdAt", "")),
    )


def parse_entity(raw: Mapping[str, Any], *, position: int | None = None) -> Entity:
    """Classify a raw record by shape and build the matching model."""
    if classify(raw, position=position) == "container":
        return parse_container(raw)
    return parse_thread(raw)


def parse_group(raw: Mapping[str, Any], *, position: int | None = None) -> Group:
    group_id = raw.get("id") if isinstance(raw, Mapping) else None
    if not isinstance(group_id, str) or not group_id:
        raise MalformedEntity("group without id", position=position)
    return Group(
        id=group_id,
        name=raw.get("name", ""),
        description=raw.get("description", ""),
        created_at=raw.get("createdAt", ""),
        updated_at=raw.get("updatedAt", raw.get("createdAt", "")),
    )


def parse_threads_data(data: Mapping[str, Any]) -> ThreadsData:
    """Parse a whole stored document.

    Records in both the ``threads`` and ``containers`` lists are classified
    by shape, so legacy containers kept in the threads list still come out
    as containers. ``document_order`` keeps every entity where it was found.

    Raises:
        MalformedEntity: If any record has no id.
    """
    threads: list[Thread] = []
    containers: list[Container] = []
    ordered: list[Entity] = []

    # Older files predate containers entirely.
    raw_entities = [*(data.get("threads") or []), *(data.get("containers") or [])]
    for position, raw in enumerate(raw_entities):
        entity = parse_entity(raw, position=position)
        ordered.append(entity)
        if isinstance(entity, Container):
            containers.append(entity)
        else:
            threads.append(entity)

    groups = tuple(
        parse_group(g, position=i) for i, g in enumerate(data.get("groups") or [])
    )

    logger.debug(
        "Parsed {} threads, {} containers, {} groups",
        len(threads), len(containers), len(groups),
    )
    return ThreadsData(
        threads=tuple(threads),
        containers=tuple(containers),
        groups=groups,
        version=str(data.get("version", "1.0.0")),
        document_order=tuple(ordered),
    )
