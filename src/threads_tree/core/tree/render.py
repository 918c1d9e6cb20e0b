"""Render a forest as indented box-drawing text lines.

Rendering is pure: it returns plain strings and does no I/O. Colour is
applied afterwards by :mod:`threads_tree.core.tree.style`.
"""

from collections.abc import Sequence
from datetime import datetime

from threads_tree.config import DEFAULT_LABELS, NodeLabels
from threads_tree.core.temperature import derive_temperature
from threads_tree.core.tree.builder import EntityNode, GroupNode, TreeNode, UngroupedNode
from threads_tree.models.entity import Container, Entity, Group, Thread

BRANCH = "├── "
LAST_BRANCH = "└── "
VERTICAL = "│   "
EMPTY = "    "

UNGROUPED_HEADER = "Ungrouped"


def short_id(entity_id: str) -> str:
    return f"[{entity_id[:8]}]"


def format_importance_stars(importance: int) -> str:
    filled = max(0, min(importance, 5))
    return "★" * filled + "☆" * (5 - filled)


def _primary_tag(entity: Entity) -> str:
    return f" #{entity.tags[0]}" if entity.tags else ""


def format_thread_label(
    thread: Thread, *, labels: NodeLabels = DEFAULT_LABELS, now: datetime | None = None
) -> str:
    prefix = f"{labels.thread} " if labels.thread else ""
    temperature = derive_temperature(thread.updated_at, now).capitalize()
    stars = format_importance_stars(thread.importance)
    return f"{prefix}{thread.name} {short_id(thread.id)} {temperature} {stars}{_primary_tag(thread)}"


def format_container_label(container: Container, *, labels: NodeLabels = DEFAULT_LABELS) -> str:
    prefix = f"{labels.container} " if labels.container else ""
    return f"{prefix}{container.name} {short_id(container.id)}{_primary_tag(container)}"


def format_entity_label(
    entity: Entity, *, labels: NodeLabels = DEFAULT_LABELS, now: datetime | None = None
) -> str:
    if isinstance(entity, Container):
        return format_container_label(entity, labels=labels)
    return format_thread_label(entity, labels=labels, now=now)


def format_group_header(group: Group, *, labels: NodeLabels = DEFAULT_LABELS) -> str:
    return f"{labels.group}  {group.name}" if labels.group else group.name


def render_entity_children(
    children: Sequence[EntityNode],
    prefix: str,
    lines: list[str],
    *,
    labels: NodeLabels,
    now: datetime | None,
) -> None:
    """Append one line per node in ``children`` (and their descendants) to ``lines``."""
    stack = [(child, prefix, i == len(children) - 1) for i, child in enumerate(children)]
    stack.reverse()
    while stack:
        node, node_prefix, is_last = stack.pop()
        connector = LAST_BRANCH if is_last else BRANCH
        lines.append(node_prefix + connector + format_entity_label(node.entity, labels=labels, now=now))
        child_prefix = node_prefix + (EMPTY if is_last else VERTICAL)
        last = len(node.children) - 1
        for i in range(last, -1, -1):
            stack.append((node.children[i], child_prefix, i == last))


def render_tree(
    forest: Sequence[TreeNode],
    *,
    labels: NodeLabels = DEFAULT_LABELS,
    now: datetime | None = None,
) -> list[str]:
    """Render a forest depth-first into display lines.

    Group and ungrouped headers start at the left margin and are each
    followed by a blank line, including the last one. Entity lines are
    ``prefix + connector + label``.

    Args:
        forest: Nodes from :func:`~threads_tree.core.tree.builder.build_forest`.
        labels: Node-type prefixes.
        now: Reference time for temperatures (defaults to wall clock).

    Returns:
        The lines, without trailing newlines.
    """
    lines: list[str] = []
    for node in forest:
        if isinstance(node, GroupNode):
            lines.append(format_group_header(node.group, labels=labels))
            render_entity_children(node.children, "", lines, labels=labels, now=now)
            lines.append("")
        elif isinstance(node, UngroupedNode):
            lines.append(UNGROUPED_HEADER)
            render_entity_children(node.children, "", lines, labels=labels, now=now)
            lines.append("")
        else:
            render_entity_children([node], "", lines, labels=labels, now=now)
    return lines
