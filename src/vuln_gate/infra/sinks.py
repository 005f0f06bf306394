from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TextIO

from ..core.domain.sinks import FileSink, Sink, StderrSink, StdoutSink


class StreamSinkOpener:
    """Resolves sinks to writable text streams.

    Files are truncated and closed after use; the process streams are only
    flushed, never closed.
    """

    @contextmanager
    def open(self, sink: Sink, *, stdout: TextIO, stderr: TextIO) -> Iterator[TextIO]:
        if isinstance(sink, StdoutSink):
            yield stdout
            stdout.flush()
        elif isinstance(sink, StderrSink):
            yield stderr
            stderr.flush()
        elif isinstance(sink, FileSink):
            with open(sink.path, "w", encoding="utf-8", newline="") as fh:
                yield fh
        else:
            raise TypeError(f"unsupported sink: {sink!r}")
