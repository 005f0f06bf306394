"""GitHub Actions workflow-command annotations."""

from __future__ import annotations

from typing import TextIO

from ...core.domain.models import DiffResult, FlatFinding
from .rows import split_visible


def escape_data(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(text: str) -> str:
    return escape_data(text).replace(":", "%3A").replace(",", "%2C")


def _message(flat: FlatFinding) -> str:
    pkg = flat.package
    vuln_id = flat.group.primary_id
    text = f"{pkg.name}@{pkg.version} ({pkg.ecosystem}) is vulnerable to {vuln_id}"
    if flat.group.aliases:
        text += f" (also known as {', '.join(flat.group.aliases)})"
    summary = next((v.summary for v in flat.vulnerabilities if v.summary), None)
    if summary:
        text += f"\n{summary}"
    return text


def render_annotations(diff: DiffResult, stream: TextIO, term_width: int, show_all: bool) -> None:
    visible, _ = split_visible(diff, show_all)
    for flat in visible:
        props = f"file={escape_property(flat.source.source)},title={escape_property(flat.group.primary_id)}"
        stream.write(f"::error {props}::{escape_data(_message(flat))}\n")
