"""Reconstruct the group → entity forest from flat entity lists."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

from threads_tree.core.classify import entity_kind
from threads_tree.core.temperature import derive_temperature
from threads_tree.core.tree.index import build_index
from threads_tree.models.entity import Container, Entity, EntityKind, Group, Thread


@dataclass(frozen=True)
class EntityNode:
    """A thread or container with its nested children."""

    entity: Entity
    children: tuple["EntityNode", ...] = ()

    @property
    def kind(self) -> EntityKind:
        return entity_kind(self.entity)


@dataclass(frozen=True)
class GroupNode:
    """A group header with its root entities."""

    group: Group
    children: tuple[EntityNode, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.group, Group):
            msg = f"GroupNode requires a Group, got {self.group!r}"
            raise TypeError(msg)


@dataclass(frozen=True)
class UngroupedNode:
    """The bucket for entities without a (known) group."""

    children: tuple[EntityNode, ...] = ()


TreeNode = GroupNode | UngroupedNode | EntityNode

K = TypeVar("K")


def group_sort_key(group: Group) -> tuple[str, str]:
    """Sort groups by name, case-insensitively first; on a case-only tie lowercase comes first."""
    return group.name.casefold(), group.name.swapcase()


def assemble_node(
    root: K,
    expand: Callable[[K, int], Iterable[K]],
    entity_of: Callable[[K], Entity],
    claim: Callable[[K], bool],
) -> EntityNode:
    """Build the node for ``root`` depth-first without recursion.

    Args:
        root: Key of the top node. It is claimed before anything else.
        expand: Returns the candidate child keys of a key at a given depth
            (the root is at depth ``0``).
        entity_of: Maps a key to its entity.
        claim: Marks a key as placed; returns ``False`` if it already was.
            Candidates are claimed lazily, so a key reached earlier in
            pre-order wins over a later sibling path.
    """
    claim(root)
    stack: list[tuple[K, Iterable[K], list[EntityNode]]] = [(root, iter(expand(root, 0)), [])]
    while True:
        key, pending, built = stack[-1]
        for child in pending:
            if claim(child):
                stack.append((child, iter(expand(child, len(stack))), []))
                break
        else:
            stack.pop()
            node = EntityNode(entity=entity_of(key), children=tuple(built))
            if not stack:
                return node
            stack[-1][2].append(node)


def build_entity_nodes(bucket: Sequence[Entity]) -> tuple[EntityNode, ...]:
    """Nest the entities of one bucket (a group, or the ungrouped set).

    Roots are entities without a parent, whose parent is outside the bucket,
    or which name themselves as parent. Children keep input order. Every
    entity is placed exactly once: entities caught in a parent cycle are
    promoted to roots at a member of the cycle.
    """
    first_position: dict[str, int] = {}
    for pos, entity in enumerate(bucket):
        first_position.setdefault(entity.id, pos)

    def in_bucket_parent(entity: Entity) -> int | None:
        if entity.parent_id is None or entity.parent_id == entity.id:
            return None
        return first_position.get(entity.parent_id)

    children_of: dict[str, list[int]] = {}
    roots: list[int] = []
    for pos, entity in enumerate(bucket):
        if in_bucket_parent(entity) is None:
            roots.append(pos)
        else:
            children_of.setdefault(entity.parent_id, []).append(pos)  # type: ignore[arg-type]

    placed: set[int] = set()

    def claim(pos: int) -> bool:
        if pos in placed:
            return False
        placed.add(pos)
        return True

    def build(pos: int) -> EntityNode:
        return assemble_node(
            pos,
            lambda key, _depth: children_of.get(bucket[key].id, ()),
            bucket.__getitem__,
            claim,
        )

    nodes = [build(pos) for pos in roots]

    for pos in range(len(bucket)):
        if pos in placed:
            continue
        # Walk up until a position repeats; that one sits on the cycle.
        seen: set[int] = set()
        cursor: int | None = pos
        while cursor is not None and cursor not in seen:
            seen.add(cursor)
            cursor = in_bucket_parent(bucket[cursor])
        start = cursor if cursor is not None else pos
        logger.debug("Data quality: parent-cycle on {}, promoting to root", bucket[start].id)
        nodes.append(build(start))

    return tuple(nodes)


def build_forest(
    threads: Iterable[Entity],
    groups: Iterable[Group],
    containers: Iterable[Container] = (),
) -> list[TreeNode]:
    """Build the display forest: one node per non-empty group, then ungrouped.

    Args:
        threads: Entities in display order. Threads and containers may be
            interleaved here, as loaded documents keep them.
        groups: All known groups.
        containers: Containers in display order (after ``threads``).

    Returns:
        Group nodes sorted by name, followed by an ungrouped node when any
        entity has no known group. Empty groups are left out.
    """
    index = build_index(threads, containers, groups)
    forest: list[TreeNode] = []

    for group in sorted(index.group_by_id.values(), key=group_sort_key):
        bucket = index.entities_by_group.get(group.id, [])
        if not bucket:
            continue
        forest.append(GroupNode(group=group, children=build_entity_nodes(bucket)))

    ungrouped = index.entities_by_group.get(None, [])
    if ungrouped:
        forest.append(UngroupedNode(children=build_entity_nodes(ungrouped)))

    return forest


def _entity_fields(node: EntityNode, now: datetime | None) -> dict[str, Any]:
    entity = node.entity
    data: dict[str, Any] = {
        "type": node.kind,
        "id": entity.id,
        "name": entity.name,
        "tags": list(entity.tags),
    }
    if isinstance(entity, Thread):
        data["status"] = entity.status
        data["importance"] = entity.importance
        data["size"] = entity.size
        data["temperature"] = derive_temperature(entity.updated_at, now)
    data["children"] = []
    return data


def _entity_to_dict(node: EntityNode, now: datetime | None) -> dict[str, Any]:
    root = _entity_fields(node, now)
    stack = [(node, root)]
    while stack:
        current, data = stack.pop()
        for child in current.children:
            child_data = _entity_fields(child, now)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return root


def forest_to_dicts(forest: Iterable[TreeNode], now: datetime | None = None) -> list[dict[str, Any]]:
    """Serialize a forest to plain dicts (for JSON output)."""
    result: list[dict[str, Any]] = []
    for node in forest:
        if isinstance(node, GroupNode):
            result.append({
                "type": "group",
                "group": {"id": node.group.id, "name": node.group.name},
                "children": [_entity_to_dict(c, now) for c in node.children],
            })
        elif isinstance(node, UngroupedNode):
            result.append({
                "type": "ungrouped",
                "children": [_entity_to_dict(c, now) for c in node.children],
            })
        else:
            result.append(_entity_to_dict(node, now))
    return result
