"""Plain-text detail and summary blocks for single entities."""

from datetime import datetime

from threads_tree.core.temperature import derive_temperature
from threads_tree.core.tree.render import format_importance_stars, short_id
from threads_tree.models.entity import Container, DetailsEntry, Thread

MAX_PROGRESS_SHOWN = 5


def format_tags(tags: tuple[str, ...]) -> str:
    return " ".join(f"#{t}" for t in tags)


def _details_block(entry: DetailsEntry) -> list[str]:
    lines = ["", f"Details: (updated {entry.timestamp})"]
    lines.extend(f"  {line}" for line in entry.content.split("\n"))
    return lines


def format_thread_summary(thread: Thread, *, now: datetime | None = None) -> str:
    """Two or three lines: name, status line, optional description."""
    temperature = derive_temperature(thread.updated_at, now).capitalize()
    lines = [
        f"{thread.name} {short_id(thread.id)}",
        f"  Status: {thread.status.upper()} | Temp: {temperature} | "
        f"Size: {thread.size.capitalize()} | Importance: {format_importance_stars(thread.importance)}",
    ]
    if thread.description:
        lines.append(f"  {thread.description}")
    return "\n".join(lines)


def format_thread_detail(thread: Thread, *, now: datetime | None = None) -> str:
    lines = [
        thread.name,
        "",
        f"ID:          {thread.id}",
        f"Status:      {thread.status.upper()}",
        f"Temperature: {derive_temperature(thread.updated_at, now).capitalize()}",
        f"Size:        {thread.size.capitalize()}",
        f"Importance:  {format_importance_stars(thread.importance)}",
        f"Created:     {thread.created_at}",
        f"Updated:     {thread.updated_at}",
    ]
    if thread.tags:
        lines.append(f"Tags:        {format_tags(thread.tags)}")
    if thread.description:
        lines.extend(["", f"Description: {thread.description}"])
    if thread.current_details is not None:
        lines.extend(_details_block(thread.current_details))
    if thread.parent_id:
        lines.append(f"Parent:      {thread.parent_id}")
    if thread.group_id:
        lines.append(f"Group:       {thread.group_id}")

    if thread.dependencies:
        lines.extend(["", "Dependencies:"])
        for dep in thread.dependencies:
            lines.append(f"  → {dep.thread_id}")
            for label, value in (("Why", dep.why), ("What", dep.what), ("How", dep.how), ("When", dep.when)):
                if value:
                    lines.append(f"    {label}: {value}")

    if thread.progress:
        lines.extend(["", "Progress:"])
        for entry in thread.progress[-MAX_PROGRESS_SHOWN:]:
            lines.append(f"  [{entry.timestamp}] {entry.note}")
        hidden = len(thread.progress) - MAX_PROGRESS_SHOWN
        if hidden > 0:
            lines.append(f"  ... and {hidden} more entries")

    return "\n".join(lines)


def format_container_detail(container: Container) -> str:
    lines = [
        f"{container.name} (container)",
        "",
        f"ID:          {container.id}",
        f"Created:     {container.created_at}",
        f"Updated:     {container.updated_at}",
    ]
    if container.tags:
        lines.append(f"Tags:        {format_tags(container.tags)}")
    if container.description:
        lines.extend(["", f"Description: {container.description}"])
    if container.current_details is not None:
        lines.extend(_details_block(container.current_details))
    if container.parent_id:
        lines.append(f"Parent:      {container.parent_id}")
    if container.group_id:
        lines.append(f"Group:       {container.group_id}")
    return "\n".join(lines)
