"""CLI for threads-tree (tree listing, details, search, timeline, focus, labels, MCP server)."""

import json
from pathlib import Path
from typing import Annotated

import requests
import typer
from loguru import logger

from threads_tree.api import ThreadsApi
from threads_tree.config import (
    CONFIG_FILE_NAME,
    LABEL_KINDS,
    load_labels,
    reset_labels,
    resolve_data_directory,
    set_label,
)
from threads_tree.core.detail import (
    format_container_detail,
    format_thread_detail,
    format_thread_summary,
)
from threads_tree.core.filters import filter_containers, filter_threads, in_document_order, sort_threads
from threads_tree.core.focus import explain_score, recommend
from threads_tree.core.search.searcher import format_match_snippet, search_threads
from threads_tree.core.summary import summarize
from threads_tree.core.timeline import collect_timeline, format_timeline_entry, truncate
from threads_tree.core.tree.builder import build_forest, forest_to_dicts, group_sort_key
from threads_tree.core.tree.index import build_index
from threads_tree.core.tree.navigation import (
    build_subtree,
    find_entity,
    get_ancestry,
    get_siblings,
    render_path,
    render_subtree,
)
from threads_tree.core.tree.render import format_entity_label, format_importance_stars, render_tree, short_id
from threads_tree.core.tree.style import Styler, style_label, style_line, style_lines
from threads_tree.errors import InvalidTimestamp, ThreadsError
from threads_tree.logging_config import configure_logging
from threads_tree.models.entity import Container, Entity, ThreadsData
from threads_tree.protocols import StoreProtocol
from threads_tree.store import JsonFileStore

app = typer.Typer(help="Threads: track units of work and render them as a grouped tree.")
labels_app = typer.Typer(help="Show or change the labels printed in front of each node type.")
app.add_typer(labels_app, name="labels")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _config_file() -> Path:
    return resolve_data_directory() / CONFIG_FILE_NAME


def _open_store(data_file: Path | None, remote: bool) -> StoreProtocol:
    if remote:
        try:
            return ThreadsApi()
        except RuntimeError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from None
    return JsonFileStore(data_file)


def _load_data(data_file: Path | None, remote: bool = False) -> ThreadsData:
    """Load a snapshot, turning storage and data errors into a clean exit."""
    store = _open_store(data_file, remote)
    try:
        return store.load()
    except (ThreadsError, RuntimeError, requests.RequestException) as e:
        logger.error("Cannot load threads: {}", e)
        raise typer.Exit(1) from None


def _styler(color: bool) -> Styler:
    return style_line if color else str


def _label_styler(color: bool) -> Styler:
    return style_label if color else str


def _echo_lines(lines: list[str], styler: Styler) -> None:
    for line in style_lines(lines, styler):
        typer.echo(line)


DataFileOption = Annotated[
    Path | None,
    typer.Option("--data-file", "-f", help="threads.json to read (default: data directory)"),
]
RemoteOption = Annotated[bool, typer.Option("--remote", help="Read threads from the hosted API")]
ColorOption = Annotated[bool, typer.Option("--color/--no-color", help="Colour the output")]


def _focused_view(
    data: ThreadsData,
    identifier: str,
    *,
    depth: int | None,
    parent: bool,
    siblings: bool,
    path: bool,
    output_json: bool,
    color: bool,
) -> None:
    """Show the subtree, ancestry or siblings of a single entity."""
    labels = load_labels(_config_file())
    entities = data.entities
    entity = find_entity(entities, identifier)
    if entity is None:
        typer.echo(f'Entity "{identifier}" not found')
        raise typer.Exit(1)

    if path:
        entity_by_id = {e.id: e for e in entities}
        ancestry = get_ancestry(entity, entity_by_id)
        group = next((g for g in data.groups if g.id == ancestry[0].group_id), None)
        typer.echo(render_path(ancestry, group=group, labels=labels))
        return

    if siblings:
        others = get_siblings(entity, entities)
        if not others:
            typer.echo("No siblings found")
            return
        parent_entity = next((e for e in entities if e.id == entity.parent_id), None)
        if parent_entity is not None:
            typer.echo(f"Siblings under {parent_entity.name}:\n")
        else:
            typer.echo("Siblings at root level:\n")
        level: list[Entity] = sorted([entity, *others], key=lambda e: e.name.casefold())
        for e in level:
            marker = " ◀" if e.id == entity.id else ""
            label = _label_styler(color)(format_entity_label(e, labels=labels))
            typer.echo(f"  {label}{marker}")
        return

    target = entity
    if parent:
        if entity.parent_id is None:
            typer.echo(f'"{entity.name}" has no parent')
            return
        found = next((e for e in entities if e.id == entity.parent_id), None)
        if found is None:
            typer.echo("Parent not found")
            raise typer.Exit(1)
        target = found

    node = build_subtree(target, entities, max_depth=depth)
    if output_json:
        typer.echo(json.dumps(forest_to_dicts([node]), indent=2, ensure_ascii=False))
        return
    _echo_lines(render_subtree(node, labels=labels), _styler(color))


@app.command(name="list")
def list_cmd(
    identifier: str | None = typer.Argument(None, help="Thread/container to root the view at"),
    status: Annotated[
        str | None,
        typer.Option("--status", "-s", help="active, paused, stopped, completed, archived"),
    ] = None,
    temp: Annotated[
        str | None,
        typer.Option("--temp", "-t", help="hot, warm, tepid, cold, freezing, frozen"),
    ] = None,
    size: Annotated[
        str | None,
        typer.Option("--size", "-z", help="tiny, small, medium, large, huge"),
    ] = None,
    importance: Annotated[
        int | None,
        typer.Option("--importance", "-i", min=1, max=5, help="Minimum importance (1-5)"),
    ] = None,
    group: Annotated[str | None, typer.Option("--group", "-g", help="Group name")] = None,
    tag: Annotated[str | None, typer.Option("--tag", help="Filter by tag")] = None,
    hot: bool = typer.Option(False, "--hot", help="Shortcut for --temp hot"),
    active: bool = typer.Option(False, "--active", help="Shortcut for --status active"),
    show_all: bool = typer.Option(False, "--all", help="Include archived threads"),
    flat: bool = typer.Option(False, "--flat", help="Flat list instead of a tree"),
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", min=0, help="Limit subtree depth (0 = node only)"),
    ] = None,
    parent: bool = typer.Option(False, "--parent", "-p", help="Show the parent's subtree"),
    siblings: bool = typer.Option(False, "--siblings", help="Show siblings at the same level"),
    path: bool = typer.Option(False, "--path", help="Show the ancestry breadcrumb"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    color: ColorOption = True,
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
) -> None:
    """List threads as a grouped tree, or focus on one entity."""
    data = _load_data(data_file, remote)

    if identifier:
        _focused_view(
            data, identifier,
            depth=depth, parent=parent, siblings=siblings, path=path,
            output_json=output_json, color=color,
        )
        return

    group_id: str | None = None
    if group:
        match = next((g for g in data.groups if g.name.lower() == group.lower()), None)
        if match is None:
            typer.echo(f'Group "{group}" not found')
            raise typer.Exit(1)
        group_id = match.id

    threads = filter_threads(
        data.threads,
        status=status or ("active" if active else None),
        temperature=temp or ("hot" if hot else None),
        size=size,
        min_importance=importance,
        group_id=group_id,
        tag=tag,
        include_archived=show_all,
    )
    if not threads:
        typer.echo("No threads found matching criteria")
        return

    if flat:
        ordered = sort_threads(threads)
        if output_json:
            typer.echo(json.dumps([{"id": t.id, "name": t.name} for t in ordered], indent=2))
            return
        typer.echo(f"\nThreads ({len(ordered)}):\n")
        for t in ordered:
            typer.echo(format_thread_summary(t))
            typer.echo()
        return

    containers = filter_containers(data.containers, group_id=group_id)
    forest = build_forest(in_document_order(data, threads, containers), data.groups)
    if output_json:
        typer.echo(json.dumps(forest_to_dicts(forest), indent=2, ensure_ascii=False))
        return

    typer.echo(f"\nThreads ({len(threads)}):\n")
    _echo_lines(render_tree(forest, labels=load_labels(_config_file())), _styler(color))


@app.command()
def show(
    identifier: str = typer.Argument(..., help="Id, name, or unique partial match"),
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
) -> None:
    """Show a thread or container in detail."""
    data = _load_data(data_file, remote)
    entity = find_entity(data.entities, identifier)
    if entity is None:
        typer.echo(f'Entity "{identifier}" not found')
        raise typer.Exit(1)
    if isinstance(entity, Container):
        typer.echo(format_container_detail(entity))
    else:
        typer.echo(format_thread_detail(entity))


@app.command()
def groups(
    data_file: DataFileOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List groups with the number of entities in each."""
    data = _load_data(data_file)
    index = build_index(data.threads, data.containers, data.groups)
    rows = [
        (g, len(index.entities_by_group.get(g.id, [])))
        for g in sorted(index.group_by_id.values(), key=group_sort_key)
    ]
    ungrouped = len(index.entities_by_group.get(None, []))

    if output_json:
        payload = {
            "groups": [{"id": g.id, "name": g.name, "entities": n} for g, n in rows],
            "ungrouped": ungrouped,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"{len(rows)} groups:\n")
    for g, n in rows:
        typer.echo(f"  {g.name} - {n} entities  [id={g.id}]")
    typer.echo(f"  (ungrouped) - {ungrouped} entities")


@app.command()
def overview(
    days: int = typer.Option(7, "--days", "-d", min=1, help="Days without activity before 'going cold'"),
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Dashboard: counts, hot threads, and active threads going cold."""
    data = _load_data(data_file, remote)
    summary = summarize(data, days=days)

    if output_json:
        typer.echo(json.dumps(summary, indent=2, ensure_ascii=False))
        return

    counts = summary["counts"]
    typer.echo(
        f"{counts['threads']} threads, {counts['containers']} containers, {counts['groups']} groups\n"
    )
    typer.echo("By status:   " + ", ".join(f"{k} {v}" for k, v in summary["by_status"].items() if v))
    typer.echo("By temp:     " + ", ".join(f"{k} {v}" for k, v in summary["by_temperature"].items() if v))

    typer.echo(f"\nHot ({len(summary['hot'])}):")
    for t in summary["hot"]:
        typer.echo(f"  {t['name']} [{t['id'][:8]}]")
    typer.echo(f"\nGoing cold, no activity in {days}+ days ({len(summary['going_cold'])}):")
    for t in summary["going_cold"]:
        typer.echo(f"  {t['name']} [{t['id'][:8]}]  last {t['last_activity']}")


MAX_SNIPPETS = 3


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to search for"),
    scope: Annotated[
        str,
        typer.Option("--in", help="name, description, progress, details, tags or all"),
    ] = "all",
    case_sensitive: bool = typer.Option(False, "--case-sensitive", "-c", help="Match case exactly"),
    limit: Annotated[int | None, typer.Option("--limit", "-l", min=1, help="Max threads shown")] = None,
    show_all: bool = typer.Option(False, "--all", help="Include archived threads"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
) -> None:
    """Search thread names, descriptions, progress notes, details and tags."""
    data = _load_data(data_file, remote)
    threads = filter_threads(data.threads, include_archived=show_all)
    try:
        results = search_threads(threads, query, scope=scope, case_sensitive=case_sensitive)
    except ValueError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None

    shown = results[:limit] if limit else results
    if output_json:
        payload = [
            {
                "id": r.thread.id,
                "name": r.thread.name,
                "matches": [{"scope": m.scope, "snippet": format_match_snippet(m)} for m in r.matches],
            }
            for r in shown
        ]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not results:
        typer.echo(f'No matches found for "{query}"')
        return

    total = sum(len(r.matches) for r in results)
    typer.echo(
        f"\nFound {total} match{'' if total == 1 else 'es'} "
        f"in {len(results)} thread{'' if len(results) == 1 else 's'}:\n"
    )
    for result in shown:
        typer.echo(f"{result.thread.name} {short_id(result.thread.id)}")
        for match in result.matches[:MAX_SNIPPETS]:
            typer.echo(f"  {match.scope}: {format_match_snippet(match)}")
        if len(result.matches) > MAX_SNIPPETS:
            typer.echo(f"  ({len(result.matches)} total matches)")
        typer.echo()
    if limit and len(results) > limit:
        typer.echo(f"... {len(results) - limit} more threads with matches (use --limit to show more)")


@app.command()
def timeline(
    since: Annotated[str | None, typer.Option("--since", help="Only entries at or after this ISO date")] = None,
    until: Annotated[str | None, typer.Option("--until", help="Only entries at or before this ISO date")] = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", min=1, help="Max entries shown")] = None,
    thread: Annotated[str | None, typer.Option("--thread", "-t", help="Only this thread (id or name)")] = None,
    reverse: bool = typer.Option(False, "--reverse", "-r", help="Oldest first"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
) -> None:
    """Show progress notes across threads, newest first."""
    data = _load_data(data_file, remote)
    threads = list(data.threads)
    if thread:
        found = find_entity(threads, thread)
        if found is None:
            typer.echo(f'Thread "{thread}" not found')
            raise typer.Exit(1)
        threads = [found]

    try:
        entries = collect_timeline(threads, since=since, until=until, reverse=reverse, limit=limit)
    except InvalidTimestamp as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None

    if output_json:
        payload = [
            {
                "thread_id": e.thread.id,
                "thread": e.thread.name,
                "timestamp": e.progress.timestamp,
                "note": e.progress.note,
            }
            for e in entries
        ]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not entries:
        typer.echo("No progress entries found")
        return

    order = "oldest" if reverse else "newest"
    typer.echo(f"\nTimeline ({len(entries)} entries, {order} first):\n")
    for entry in entries:
        typer.echo(format_timeline_entry(entry))


@app.command(name="next")
def next_cmd(
    count: Annotated[int, typer.Option("--count", "-c", min=1, help="Number of recommendations")] = 5,
    explain: bool = typer.Option(False, "--explain", "-e", help="Show the score breakdown"),
    data_file: DataFileOption = None,
    remote: RemoteOption = False,
) -> None:
    """Recommend active threads to work on next."""
    data = _load_data(data_file, remote)
    active = [t for t in data.threads if t.status == "active"]
    if not active:
        typer.echo("No active threads to recommend")
        return

    top = recommend(active, count=count)
    typer.echo(f"\nNext focus (top {len(top)} of {len(active)} active):\n")
    for rank, scored in enumerate(top, start=1):
        t = scored.thread
        typer.echo(f"#{rank} [{scored.total:.1f}] {t.name} {short_id(t.id)}")
        if explain:
            typer.echo(f"     = {explain_score(scored)}")
        typer.echo(f"     {format_importance_stars(t.importance)}")
        if t.progress:
            typer.echo(f'     Last: "{truncate(t.progress[-1].note, 50)}"')
        typer.echo()


@labels_app.command(name="show")
def labels_show() -> None:
    """Print the current labels."""
    labels = load_labels(_config_file())
    for kind in LABEL_KINDS:
        typer.echo(f"{kind:<10} {getattr(labels, kind)!r}")


@labels_app.command(name="set")
def labels_set(
    kind: str = typer.Argument(..., help="thread, container or group"),
    value: str = typer.Argument(..., help="New label (empty string for none)"),
) -> None:
    """Change the label for one node type."""
    try:
        set_label(_config_file(), kind, value)
    except ValueError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None
    typer.echo(f"Label for {kind} set to {value!r}")


@labels_app.command(name="reset")
def labels_reset() -> None:
    """Restore the default labels."""
    reset_labels(_config_file())
    typer.echo("Labels reset to defaults")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from threads_tree.mcp.server import run_mcp_server

    run_mcp_server()
