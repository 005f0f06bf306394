from __future__ import annotations

from typing import TextIO

from ...core.domain.models import DiffResult
from .rows import HEADERS, hidden_note, split_visible, to_row


def _cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown(diff: DiffResult, stream: TextIO, term_width: int, show_all: bool) -> None:
    visible, hidden = split_visible(diff, show_all)

    if not visible:
        stream.write("No issues found\n")
    else:
        stream.write("| " + " | ".join(HEADERS) + " |\n")
        stream.write("| " + " | ".join("---" for _ in HEADERS) + " |\n")
        for flat in visible:
            row = to_row(flat)
            cells = list(row.cells())
            cells[0] = f"[{flat.group.primary_id}]({row.url})"
            stream.write("| " + " | ".join(_cell(c) for c in cells) + " |\n")

    if hidden:
        stream.write("\n" + hidden_note(hidden) + "\n")
