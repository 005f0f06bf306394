from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


STDOUT_TARGET = "#stdout"
STDERR_TARGET = "#stderr"


@dataclass(frozen=True)
class FileSink:
    path: Path

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class StdoutSink:
    def __str__(self) -> str:
        return STDOUT_TARGET


@dataclass(frozen=True)
class StderrSink:
    def __str__(self) -> str:
        return STDERR_TARGET


Sink = Union[FileSink, StdoutSink, StderrSink]


def parse_sink(target: str) -> Sink:
    """Resolve a sink name; the two reserved names select the process streams."""
    if target == STDOUT_TARGET:
        return StdoutSink()
    if target == STDERR_TARGET:
        return StderrSink()
    return FileSink(Path(target))


def is_terminal(sink: Sink) -> bool:
    return isinstance(sink, (StdoutSink, StderrSink))
