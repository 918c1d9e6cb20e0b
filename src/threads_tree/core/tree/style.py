"""Terminal colouring applied to already-rendered tree lines."""

import re
from collections.abc import Callable, Iterable

import typer

from threads_tree.core.tree.render import BRANCH, EMPTY, LAST_BRANCH, UNGROUPED_HEADER, VERTICAL

Styler = Callable[[str], str]

TEMPERATURE_COLORS: dict[str, str] = {
    "Hot": typer.colors.RED,
    "Warm": typer.colors.YELLOW,
    "Tepid": typer.colors.WHITE,
    "Cold": typer.colors.BLUE,
    "Freezing": typer.colors.CYAN,
    "Frozen": typer.colors.BRIGHT_BLUE,
}

_TREE_GLYPHS = (BRANCH, LAST_BRANCH, VERTICAL, EMPTY)

_SHORT_ID_RE = re.compile(r"\[[^\]\s]{1,8}\]")
_TEMPERATURE_RE = re.compile(r"(?<= )(" + "|".join(TEMPERATURE_COLORS) + r")(?= [★☆])")
_STARS_RE = re.compile(r"(★*)(☆*)(?=$| #)")
_TAG_RE = re.compile(r"(?<= )#\S+$")


def _style_stars(match: re.Match[str]) -> str:
    filled, empty = match.group(1), match.group(2)
    styled = typer.style(filled, fg=typer.colors.YELLOW) if filled else ""
    if empty:
        styled += typer.style(empty, dim=True)
    return styled


def style_label(line: str) -> str:
    """Colour an entity label (temperature, stars, tag, short id)."""
    # Order matters: each pattern looks at the plain text after it.
    line = _TEMPERATURE_RE.sub(lambda m: typer.style(m.group(1), fg=TEMPERATURE_COLORS[m.group(1)]), line)
    line = _STARS_RE.sub(lambda m: _style_stars(m) if m.group(0) else "", line)
    line = _TAG_RE.sub(lambda m: typer.style(m.group(0), fg=typer.colors.CYAN), line)
    return _SHORT_ID_RE.sub(lambda m: typer.style(m.group(0), fg=typer.colors.BRIGHT_BLACK), line, count=1)


def style_line(line: str) -> str:
    """Colour a single rendered tree line. Blank lines pass through."""
    if not line:
        return line
    if not line.startswith(_TREE_GLYPHS):
        # Group / ungrouped header, or the root of a focused subtree.
        if line == UNGROUPED_HEADER or not _SHORT_ID_RE.search(line):
            return typer.style(line, bold=True, underline=line == UNGROUPED_HEADER)
        return style_label(line)

    prefix_len = 0
    while line.startswith(_TREE_GLYPHS, prefix_len):
        prefix_len += len(BRANCH)
    return line[:prefix_len] + style_label(line[prefix_len:])


def style_lines(lines: Iterable[str], styler: Styler = style_line) -> list[str]:
    """Apply ``styler`` to every line, returning a new list."""
    return [styler(line) for line in lines]
