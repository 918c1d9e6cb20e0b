"""Substring search across thread names, descriptions, notes and tags."""

from collections.abc import Iterable

from threads_tree.models.entity import Thread
from threads_tree.models.results import SEARCH_SCOPES, SearchMatch, SearchResult, SearchScope

MIN_QUERY_LENGTH = 2


def find_matches(text: str, query: str, scope: SearchScope, *, case_sensitive: bool = False) -> list[SearchMatch]:
    """All (possibly overlapping) occurrences of ``query`` in ``text``."""
    haystack = text if case_sensitive else text.lower()
    needle = query if case_sensitive else query.lower()

    matches: list[SearchMatch] = []
    pos = haystack.find(needle)
    while pos != -1:
        matches.append(SearchMatch(scope=scope, text=text, start=pos, end=pos + len(query)))
        pos = haystack.find(needle, pos + 1)
    return matches


def _fields(thread: Thread, scope: SearchScope) -> Iterable[tuple[SearchScope, str]]:
    if scope in ("all", "name"):
        yield "name", thread.name
    if scope in ("all", "description") and thread.description:
        yield "description", thread.description
    if scope in ("all", "progress"):
        for entry in thread.progress:
            yield "progress", entry.note
    if scope in ("all", "details"):
        for entry in thread.details:
            yield "details", entry.content
    if scope in ("all", "tags"):
        for tag in thread.tags:
            yield "tags", tag


def search_thread(
    thread: Thread, query: str, *, scope: SearchScope = "all", case_sensitive: bool = False
) -> list[SearchMatch]:
    matches: list[SearchMatch] = []
    for field_scope, text in _fields(thread, scope):
        matches.extend(find_matches(text, query, field_scope, case_sensitive=case_sensitive))
    return matches


def search_threads(
    threads: Iterable[Thread],
    query: str,
    *,
    scope: str = "all",
    case_sensitive: bool = False,
) -> list[SearchResult]:
    """Search threads for a plain substring.

    Args:
        threads: Threads to search, in display order.
        query: Text to look for (at least two characters).
        scope: One of ``name``, ``description``, ``progress``, ``details``,
            ``tags`` or ``all``.
        case_sensitive: Match case exactly.

    Returns:
        Threads with at least one match, most matches first. Ties keep
        input order.

    Raises:
        ValueError: If the scope is unknown or the query is too short.
    """
    if scope not in SEARCH_SCOPES:
        msg = f"Invalid scope {scope!r}. Use: {', '.join(SEARCH_SCOPES)}"
        raise ValueError(msg)
    if len(query) < MIN_QUERY_LENGTH:
        msg = f"Search query must be at least {MIN_QUERY_LENGTH} characters"
        raise ValueError(msg)

    results = []
    for thread in threads:
        matches = search_thread(thread, query, scope=scope, case_sensitive=case_sensitive)  # type: ignore[arg-type]
        if matches:
            results.append(SearchResult(thread=thread, matches=tuple(matches)))
    results.sort(key=lambda r: -len(r.matches))
    return results


def format_match_snippet(match: SearchMatch, max_len: int = 80) -> str:
    """A window of text around the match, trimmed at word boundaries.

    Newlines become spaces and ``...`` marks text cut off on either side.
    """
    text = match.text
    match_len = match.end - match.start
    before = max(0, (max_len - match_len) // 2)
    after = max(0, max_len - match_len - before)

    start = max(0, match.start - before)
    end = min(len(text), match.end + after)

    if start > 0:
        space = text.find(" ", start)
        if space != -1 and space < match.start:
            start = space + 1
    if end < len(text):
        space = text.rfind(" ", 0, end + 1)
        if space != -1 and space > match.end:
            end = space

    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return prefix + text[start:end].replace("\n", " ") + suffix
