"""Tell threads and containers apart.

Typed entities are discriminated by class. Raw records (as stored on disk)
are discriminated by shape: a ``type`` tag of ``"container"`` makes a
container and any other explicit tag makes a thread. Untagged records carrying
any lifecycle field are threads, those carrying none are containers.
"""

from collections.abc import Mapping
from typing import Any

from threads_tree.errors import MalformedEntity
from threads_tree.models.entity import Container, Entity, EntityKind, Thread

THREAD_ONLY_FIELDS = ("status", "importance", "size")


def classify(raw: Mapping[str, Any], *, position: int | None = None) -> EntityKind:
    """Classify a raw record as ``"thread"`` or ``"container"``.

    Raises:
        MalformedEntity: If the record is not a mapping or has no usable id.
    """
    if not isinstance(raw, Mapping):
        raise MalformedEntity("record is not an object", position=position)

    entity_id = raw.get("id")
    if not isinstance(entity_id, str) or not entity_id:
        name = raw.get("name")
        reason = f"missing id (name={name!r})" if name else "missing id"
        raise MalformedEntity(reason, position=position)

    tag = raw.get("type")
    if tag is not None:
        return "container" if tag == "container" else "thread"

    if any(field in raw for field in THREAD_ONLY_FIELDS):
        return "thread"
    return "container"


def entity_kind(entity: Entity | Mapping[str, Any]) -> EntityKind:
    if isinstance(entity, Container):
        return "container"
    if isinstance(entity, Thread):
        return "thread"
    return classify(entity)


def is_container(entity: Entity | Mapping[str, Any]) -> bool:
    return entity_kind(entity) == "container"


def is_thread(entity: Entity | Mapping[str, Any]) -> bool:
    return entity_kind(entity) == "thread"
