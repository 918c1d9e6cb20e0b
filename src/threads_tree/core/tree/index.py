"""Lookup structures over flat entity and group lists."""

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from threads_tree.errors import DataQualityWarning
from threads_tree.models.entity import Container, Entity, Group


@dataclass(frozen=True)
class HierarchyIndex:
    """Entities and groups indexed for tree building.

    ``entities_by_group`` is keyed by a *resolved* group id: entities whose
    ``group_id`` is ``None`` or points at an unknown group share the ``None``
    bucket. Within each bucket, input order is preserved.
    """

    entity_by_id: dict[str, Entity]
    entities_by_group: dict[str | None, list[Entity]]
    group_by_id: dict[str, Group]
    issues: tuple[DataQualityWarning, ...] = ()

    def bucket_key(self, entity: Entity) -> str | None:
        return entity.group_id if entity.group_id in self.group_by_id else None


def build_index(
    threads: Iterable[Entity],
    containers: Iterable[Container],
    groups: Iterable[Group],
) -> HierarchyIndex:
    """Index threads, containers and groups.

    Duplicate ids are last-write-wins in the id maps. Duplicates, dangling
    group references and dangling parent references are recorded on
    ``issues`` and logged, never raised.
    """
    issues: list[DataQualityWarning] = []

    group_by_id: dict[str, Group] = {}
    for group in groups:
        group_by_id[group.id] = group

    entities: list[Entity] = [*threads, *containers]

    entity_by_id: dict[str, Entity] = {}
    for entity in entities:
        if entity.id in entity_by_id:
            issues.append(DataQualityWarning("duplicate-id", entity.id, "later entity wins lookups"))
        entity_by_id[entity.id] = entity

    entities_by_group: dict[str | None, list[Entity]] = {}
    for entity in entities:
        key = entity.group_id
        if key is not None and key not in group_by_id:
            issues.append(DataQualityWarning("dangling-group", entity.id, f"unknown group {key!r}"))
            key = None
        entities_by_group.setdefault(key, []).append(entity)

        if entity.parent_id is not None and entity.parent_id not in entity_by_id:
            issues.append(
                DataQualityWarning("dangling-parent", entity.id, f"unknown parent {entity.parent_id!r}")
            )

    for issue in issues:
        logger.debug("Data quality: {} on {} ({})", issue.kind, issue.entity_id, issue.detail)

    return HierarchyIndex(
        entity_by_id=entity_by_id,
        entities_by_group=entities_by_group,
        group_by_id=group_by_id,
        issues=tuple(issues),
    )
