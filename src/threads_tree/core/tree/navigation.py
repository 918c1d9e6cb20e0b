"""Tree navigation: lookup, ancestry, siblings, focused subtrees."""

from collections.abc import Mapping, Sequence
from datetime import datetime

from threads_tree.config import DEFAULT_LABELS, NodeLabels
from threads_tree.core.tree.builder import EntityNode, assemble_node
from threads_tree.core.tree.render import format_entity_label, render_entity_children
from threads_tree.models.entity import Container, Entity, Group

PATH_SEPARATOR = " › "


def find_entity(entities: Sequence[Entity], identifier: str) -> Entity | None:
    """Find an entity by id, name, or unambiguous partial match.

    Tries, in order: exact id, case-insensitive exact name, then an id
    prefix or name substring match that hits exactly one entity.
    """
    for entity in entities:
        if entity.id == identifier:
            return entity

    needle = identifier.lower()
    for entity in entities:
        if entity.name.lower() == needle:
            return entity

    matches = [
        e for e in entities if e.id.lower().startswith(needle) or needle in e.name.lower()
    ]
    return matches[0] if len(matches) == 1 else None


def get_ancestry(entity: Entity, entity_by_id: Mapping[str, Entity]) -> list[Entity]:
    """Return the path from the top-most ancestor down to ``entity``.

    Stops at a missing parent or when a parent chain loops back on itself.
    """
    path = [entity]
    seen = {entity.id}
    current = entity
    while current.parent_id is not None and current.parent_id not in seen:
        parent = entity_by_id.get(current.parent_id)
        if parent is None:
            break
        path.append(parent)
        seen.add(parent.id)
        current = parent
    path.reverse()
    return path


def get_siblings(entity: Entity, entities: Sequence[Entity]) -> list[Entity]:
    """Other entities sharing ``entity``'s parent (top-level entities share ``None``)."""
    return [e for e in entities if e.parent_id == entity.parent_id and e.id != entity.id]


def build_subtree(
    root: Entity,
    entities: Sequence[Entity],
    *,
    max_depth: int | None = None,
) -> EntityNode:
    """Build a node for ``root`` with its descendants, regardless of group.

    Args:
        root: The entity to focus on.
        entities: All entities to search for descendants.
        max_depth: Levels below the root to include (``0`` = root only,
            ``None`` = unlimited).
    """
    children_of: dict[str, list[Entity]] = {}
    for entity in entities:
        if entity.parent_id is not None:
            children_of.setdefault(entity.parent_id, []).append(entity)

    visited: set[str] = set()

    def claim(entity: Entity) -> bool:
        if entity.id in visited:
            return False
        visited.add(entity.id)
        return True

    def expand(entity: Entity, depth: int) -> Sequence[Entity]:
        if max_depth is not None and depth >= max_depth:
            return ()
        return children_of.get(entity.id, ())

    return assemble_node(root, expand, lambda entity: entity, claim)


def render_subtree(
    node: EntityNode,
    *,
    labels: NodeLabels = DEFAULT_LABELS,
    now: datetime | None = None,
) -> list[str]:
    """Render a focused subtree: the root on its own line, descendants below it."""
    lines = [format_entity_label(node.entity, labels=labels, now=now)]
    render_entity_children(node.children, "", lines, labels=labels, now=now)
    return lines


def render_path(
    path: Sequence[Entity],
    *,
    group: Group | None = None,
    labels: NodeLabels = DEFAULT_LABELS,
) -> str:
    """Render an ancestry path as a one-line breadcrumb."""
    crumbs = []
    for entity in path:
        label = labels.container if isinstance(entity, Container) else labels.thread
        crumbs.append(f"{label} {entity.name}" if label else entity.name)
    breadcrumb = PATH_SEPARATOR.join(crumbs)
    if group is None:
        return breadcrumb
    header = f"{labels.group}  {group.name}" if labels.group else group.name
    return header + PATH_SEPARATOR + breadcrumb
