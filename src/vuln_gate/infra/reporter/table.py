"""Human-readable table output."""

from __future__ import annotations

from typing import TextIO

from ...core.domain.models import DiffResult
from .rows import HEADERS, hidden_note, split_visible, to_row

_GAP = " | "
_MIN_SOURCE_WIDTH = 10


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."


def format_table(diff: DiffResult, term_width: int = 0, show_all: bool = False) -> str:
    """Format the diff as a fixed-width table.

    Args:
        diff: Diff to render
        term_width: Terminal width hint; 0 disables fitting
        show_all: Include uncalled and unimportant findings

    Returns:
        Formatted string for display
    """
    visible, hidden = split_visible(diff, show_all)
    lines: list[str] = []

    if not visible:
        lines.append("No issues found")
    else:
        rows = [to_row(flat).cells() for flat in visible]
        widths = [len(h) for h in HEADERS]
        for cells in rows:
            for i, cell in enumerate(cells):
                widths[i] = max(widths[i], len(cell))

        # SOURCE is last and usually longest; shrink it to fit the terminal
        total = sum(widths) + len(_GAP) * (len(widths) - 1)
        if term_width > 0 and total > term_width:
            widths[-1] = max(_MIN_SOURCE_WIDTH, widths[-1] - (total - term_width))

        def fmt(cells: tuple[str, ...]) -> str:
            return _GAP.join(
                _truncate(cell, widths[i]).ljust(widths[i]) for i, cell in enumerate(cells)
            ).rstrip()

        rule = "-+-".join("-" * w for w in widths)
        lines.append(rule)
        lines.append(fmt(HEADERS))
        lines.append(rule)
        for cells in rows:
            lines.append(fmt(cells))
        lines.append(rule)

    if hidden:
        lines.append(hidden_note(hidden))

    return "\n".join(lines)


def render_table(diff: DiffResult, stream: TextIO, term_width: int, show_all: bool) -> None:
    stream.write(format_table(diff, term_width, show_all) + "\n")
