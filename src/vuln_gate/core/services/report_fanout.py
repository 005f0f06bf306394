from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from typing import Iterable, Sequence, TextIO

from ..domain.exceptions import (
    InvalidOutputDirectiveError,
    RenderError,
    SinkOpenError,
    UnknownFormatError,
)
from ..domain.models import DiffResult
from ..domain.sinks import Sink, StderrSink, StdoutSink, is_terminal, parse_sink
from ..ports import LoggerPort, RendererPort, SinkOpenerPort


DEFAULT_FORMAT = "sarif"
TABLE_FORMAT = "table"
ANNOTATIONS_FORMAT = "gh-annotations"


@dataclass(frozen=True)
class OutputDirective:
    format: str
    sink: Sink
    # Only planned renders (implicit table, legacy annotations) may use the terminal width
    implicit: bool = False

    def __str__(self) -> str:
        return f"{self.format}:{self.sink}"


def parse_output_directive(text: str) -> OutputDirective:
    """Parse ``format:path`` (split on the first colon) or a bare ``path``."""
    fmt, sep, target = text.partition(":")
    if not sep:
        fmt, target = DEFAULT_FORMAT, text
    fmt = fmt.strip()
    target = target.strip()
    if not fmt:
        raise InvalidOutputDirectiveError(text, f"missing format in output directive: {text!r}")
    if not target:
        raise InvalidOutputDirectiveError(text, f"missing path in output directive: {text!r}")
    return OutputDirective(format=fmt, sink=parse_sink(target))


def split_directives(values: Iterable[str]) -> list[str]:
    """Split comma separated values (``--output=a:x,b:y``) into single directives."""
    out: list[str] = []
    for value in values:
        out.extend(part for part in value.split(",") if part.strip())
    return out


def plan_directives(raw: Sequence[str], *, gh_annotations: bool = False) -> list[OutputDirective]:
    """Build the ordered list of renders for a run.

    A human table goes to standard output unless some directive already writes
    to a terminal stream. The legacy annotations flag adds one render to
    standard error on top of whatever was requested.
    """
    directives = [parse_output_directive(item) for item in split_directives(raw)]

    if not any(is_terminal(d.sink) for d in directives):
        directives.append(OutputDirective(format=TABLE_FORMAT, sink=StdoutSink(), implicit=True))

    if gh_annotations:
        directives.append(OutputDirective(format=ANNOTATIONS_FORMAT, sink=StderrSink(), implicit=True))

    return directives


class ReportFanout:
    """Dispatches one diff to every requested (format, sink) pair.

    Renders run one after another; each sink is opened, written once and
    released before the next directive. The first failure aborts the rest.
    """

    def __init__(
        self,
        *,
        renderer: RendererPort,
        sink_opener: SinkOpenerPort,
        logger: LoggerPort,
    ) -> None:
        self._renderer = renderer
        self._sink_opener = sink_opener
        self._logger = logger

    def publish(
        self,
        diff: DiffResult,
        directives: Sequence[OutputDirective],
        *,
        stdout: TextIO,
        stderr: TextIO,
        term_width: int = 0,
        show_all: bool = False,
    ) -> None:
        # Any explicit output disables width fitting for the whole run
        if any(not d.implicit for d in directives):
            term_width = 0

        for directive in directives:
            if directive.format not in self._renderer.formats:
                raise UnknownFormatError(directive.format, tuple(self._renderer.formats))

            with ExitStack() as stack:
                try:
                    stream = stack.enter_context(
                        self._sink_opener.open(directive.sink, stdout=stdout, stderr=stderr)
                    )
                except OSError as e:
                    raise SinkOpenError(str(directive.sink), e) from e

                try:
                    self._renderer.render(diff, directive.format, stream, term_width, show_all)
                except UnknownFormatError:
                    raise
                except Exception as e:
                    raise RenderError(directive.format, e) from e

            self._logger.info(
                f"wrote {directive.format} report to {directive.sink}",
                report_format=directive.format,
                target=str(directive.sink),
            )
