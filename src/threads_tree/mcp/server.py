"""MCP server exposing the threads tree, entity details, search, timeline and a summary."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from threads_tree.config import (
    CONFIG_FILE_NAME,
    DATA_FILE_NAME,
    DEFAULT_LABELS,
    NodeLabels,
    load_labels,
    resolve_data_directory,
)
from threads_tree.core.classify import entity_kind
from threads_tree.core.detail import format_container_detail, format_thread_detail
from threads_tree.core.filters import filter_containers, filter_threads, in_document_order
from threads_tree.core.focus import explain_score, recommend
from threads_tree.core.search.searcher import format_match_snippet, search_threads
from threads_tree.core.summary import summarize
from threads_tree.core.timeline import collect_timeline
from threads_tree.core.tree.builder import build_forest, forest_to_dicts
from threads_tree.core.tree.navigation import find_entity, get_ancestry, render_path
from threads_tree.core.tree.render import render_tree
from threads_tree.errors import InvalidTimestamp, ThreadsError
from threads_tree.models.entity import Container, ThreadsData
from threads_tree.protocols import StoreProtocol
from threads_tree.store import JsonFileStore


def _resolve_group_id(data: ThreadsData, group: str) -> str | None:
    """Resolve a group name (case-insensitive) or id to a group id."""
    for g in data.groups:
        if g.id == group or g.name.lower() == group.lower():
            return g.id
    return None


# --- Core functions (testable without MCP context) ---


def threads_tree(
    data: ThreadsData,
    *,
    group: str | None = None,
    include_archived: bool = False,
    labels: NodeLabels = DEFAULT_LABELS,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Render the grouped thread/container tree.

    Args:
        group: Restrict to one group (name or id).
        include_archived: Include archived threads.
    """
    group_id: str | None = None
    if group:
        group_id = _resolve_group_id(data, group)
        if group_id is None:
            return {"error": f"Group '{group}' not found.", "text": "", "forest": [], "count": 0}

    threads = filter_threads(data.threads, group_id=group_id, include_archived=include_archived, now=now)
    containers = filter_containers(data.containers, group_id=group_id)
    forest = build_forest(in_document_order(data, threads, containers), data.groups)
    return {
        "text": "\n".join(render_tree(forest, labels=labels, now=now)),
        "forest": forest_to_dicts(forest, now),
        "count": len(threads) + len(containers),
    }


def threads_show(
    data: ThreadsData,
    *,
    identifier: str,
    labels: NodeLabels = DEFAULT_LABELS,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Show one thread or container by id, name, or unique partial match."""
    entity = find_entity(data.entities, identifier)
    if entity is None:
        return {"error": f"Entity '{identifier}' not found."}

    entity_by_id = {e.id: e for e in data.entities}
    path = get_ancestry(entity, entity_by_id)
    group = next((g for g in data.groups if g.id == path[0].group_id), None)

    if isinstance(entity, Container):
        content = format_container_detail(entity)
    else:
        content = format_thread_detail(entity, now=now)
    return {
        "id": entity.id,
        "type": entity_kind(entity),
        "content": content,
        "path": render_path(path, group=group, labels=labels),
    }


def threads_summary(data: ThreadsData, *, days: int = 7, now: datetime | None = None) -> dict[str, Any]:
    """Counts by status and temperature, hot threads, and threads going cold."""
    return summarize(data, now=now, days=days)


def threads_search(
    data: ThreadsData,
    *,
    query: str,
    scope: str = "all",
    case_sensitive: bool = False,
    limit: int | None = None,
) -> dict[str, Any]:
    """Search non-archived threads for a substring."""
    threads = filter_threads(data.threads)
    try:
        results = search_threads(threads, query, scope=scope, case_sensitive=case_sensitive)
    except ValueError as e:
        return {"error": str(e), "results": [], "total_matches": 0}
    shown = results[:limit] if limit else results
    return {
        "results": [
            {
                "id": r.thread.id,
                "name": r.thread.name,
                "matches": [{"scope": m.scope, "snippet": format_match_snippet(m)} for m in r.matches],
            }
            for r in shown
        ],
        "thread_count": len(results),
        "total_matches": sum(len(r.matches) for r in results),
    }


def threads_timeline(
    data: ThreadsData,
    *,
    since: str | None = None,
    until: str | None = None,
    thread: str | None = None,
    reverse: bool = False,
    limit: int | None = 50,
) -> dict[str, Any]:
    """Progress notes across threads, newest first unless ``reverse``."""
    threads = list(data.threads)
    if thread:
        found = find_entity(threads, thread)
        if found is None:
            return {"error": f"Thread '{thread}' not found.", "entries": []}
        threads = [found]
    try:
        entries = collect_timeline(threads, since=since, until=until, reverse=reverse, limit=limit)
    except InvalidTimestamp as e:
        return {"error": str(e), "entries": []}
    return {
        "entries": [
            {
                "thread_id": e.thread.id,
                "thread": e.thread.name,
                "timestamp": e.progress.timestamp,
                "note": e.progress.note,
            }
            for e in entries
        ],
    }


def threads_next(data: ThreadsData, *, count: int = 5, now: datetime | None = None) -> dict[str, Any]:
    """Recommend active threads to work on next, best first."""
    top = recommend(data.threads, count=count, now=now)
    return {
        "recommendations": [
            {
                "id": s.thread.id,
                "name": s.thread.name,
                "score": round(s.total, 2),
                "explain": explain_score(s),
            }
            for s in top
        ],
    }


# --- MCP server wiring ---


@dataclass
class ServerContext:
    """Lifespan context for the MCP server."""

    store: StoreProtocol


def _labels() -> NodeLabels:
    return load_labels(resolve_data_directory() / CONFIG_FILE_NAME)


def _resolve_data_file() -> Path:
    data_file_env = os.environ.get("THREADS_DATA_FILE")
    return Path(data_file_env) if data_file_env else resolve_data_directory() / DATA_FILE_NAME


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    data_file = _resolve_data_file()
    logger.info("Serving threads from {}", data_file)
    yield ServerContext(store=JsonFileStore(data_file))


mcp_server = FastMCP(
    "threads-tree",
    instructions="""\
Threads are units of ongoing work; containers are organizational nodes. Both
can be nested under a parent and belong to a group.

1. Call threads_tree_tool to see the whole hierarchy, grouped.
2. Call threads_show_tool with an id or name from the tree for full details,
   progress notes and dependencies.
3. Call threads_summary_tool for a quick dashboard (hot / going cold).
4. Call threads_search_tool to find threads by text, threads_timeline_tool
   for recent progress notes, and threads_next_tool for what to work on next.

Temperature is derived from the last update: Hot (<=1 day) to Frozen (>30 days).
""",
    lifespan=server_lifespan,
)


def _load(mcp_ctx: Context) -> ThreadsData:
    ctx: ServerContext = mcp_ctx.request_context.lifespan_context  # type: ignore[assignment]
    return ctx.store.load()


@mcp_server.tool()
async def threads_tree_tool(
    ctx: Context,
    group: str | None = None,
    include_archived: bool = False,
) -> dict[str, Any]:
    """Render all threads and containers as a tree, grouped by group name.

    Args:
        group: Restrict to one group (name or id).
        include_archived: Include archived threads.
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_tree(data, group=group, include_archived=include_archived, labels=_labels())


@mcp_server.tool()
async def threads_show_tool(ctx: Context, identifier: str) -> dict[str, Any]:
    """Show a thread or container in detail.

    Args:
        identifier: Id, name, or unambiguous partial id/name.
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_show(data, identifier=identifier, labels=_labels())


@mcp_server.tool()
async def threads_summary_tool(ctx: Context, days: int = 7) -> dict[str, Any]:
    """Summarize threads: counts, hot threads, and active threads going cold.

    Args:
        days: Inactivity threshold for "going cold".
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_summary(data, days=days)


@mcp_server.tool()
async def threads_search_tool(
    ctx: Context,
    query: str,
    scope: str = "all",
    case_sensitive: bool = False,
    limit: int | None = None,
) -> dict[str, Any]:
    """Search thread names, descriptions, progress notes, details and tags.

    Args:
        query: Text to look for (at least 2 characters).
        scope: name, description, progress, details, tags or all.
        case_sensitive: Match case exactly.
        limit: Max threads returned.
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_search(data, query=query, scope=scope, case_sensitive=case_sensitive, limit=limit)


@mcp_server.tool()
async def threads_timeline_tool(
    ctx: Context,
    since: str | None = None,
    until: str | None = None,
    thread: str | None = None,
    reverse: bool = False,
    limit: int = 50,
) -> dict[str, Any]:
    """List progress notes across threads in chronological order.

    Args:
        since: ISO date; only notes at or after it.
        until: ISO date; only notes at or before it.
        thread: Restrict to one thread (id or name).
        reverse: Oldest first.
        limit: Max entries returned.
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_timeline(data, since=since, until=until, thread=thread, reverse=reverse, limit=limit)


@mcp_server.tool()
async def threads_next_tool(ctx: Context, count: int = 5) -> dict[str, Any]:
    """Recommend active threads to work on next.

    Args:
        count: Number of recommendations.
    """
    try:
        data = _load(ctx)
    except ThreadsError as e:
        return {"error": str(e)}
    return threads_next(data, count=count)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from threads_tree.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
