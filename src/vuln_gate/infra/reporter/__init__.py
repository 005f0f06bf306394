from __future__ import annotations

import json
from typing import Callable, TextIO

from ...core.domain.exceptions import UnknownFormatError
from ...core.domain.models import DiffResult
from ..osv_schema import snapshot_to_dict
from .annotations import render_annotations
from .markdown import render_markdown
from .sarif import render_sarif
from .table import render_table

RenderFn = Callable[[DiffResult, TextIO, int, bool], None]


def render_json(diff: DiffResult, stream: TextIO, term_width: int, show_all: bool) -> None:
    json.dump(snapshot_to_dict(diff), stream, ensure_ascii=False, indent=2)
    stream.write("\n")


class ReportRenderer:
    """Renders a diff into one of the supported output formats."""

    def __init__(self) -> None:
        self._renderers: dict[str, RenderFn] = {
            "sarif": render_sarif,
            "json": render_json,
            "table": render_table,
            "markdown": render_markdown,
            "gh-annotations": render_annotations,
        }

    @property
    def formats(self) -> tuple[str, ...]:
        return tuple(self._renderers)

    def render(
        self,
        diff: DiffResult,
        fmt: str,
        stream: TextIO,
        term_width: int,
        show_all: bool,
    ) -> None:
        try:
            fn = self._renderers[fmt]
        except KeyError:
            raise UnknownFormatError(fmt, self.formats) from None
        fn(diff, stream, term_width, show_all)


__all__ = ["ReportRenderer", "render_json"]
