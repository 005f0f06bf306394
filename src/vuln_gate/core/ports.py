from __future__ import annotations

from pathlib import Path
from typing import ContextManager, Protocol, TextIO

from .domain.models import CommitInventory, DiffResult, VulnerabilitySnapshot
from .domain.sinks import Sink


class SnapshotLoaderPort(Protocol):
    """Port for reading a serialized scan snapshot."""

    def load(self, path: Path) -> VulnerabilitySnapshot:
        """Load the snapshot stored at ``path``.

        Raises:
            SnapshotLoadError: If the file is missing or cannot be parsed
        """
        ...


class RendererPort(Protocol):
    """Port for turning a diff into one output format."""

    formats: tuple[str, ...]

    def render(
        self,
        diff: DiffResult,
        fmt: str,
        stream: TextIO,
        term_width: int,
        show_all: bool,
    ) -> None:
        """Write ``diff`` to ``stream`` in format ``fmt``.

        Raises:
            UnknownFormatError: If ``fmt`` is not supported
        """
        ...


class SinkOpenerPort(Protocol):
    """Port for turning a sink into a writable text stream."""

    def open(self, sink: Sink, *, stdout: TextIO, stderr: TextIO) -> ContextManager[TextIO]:
        """Open ``sink`` for one render; files are created or truncated.

        Raises:
            OSError: If a file sink cannot be created
        """
        ...


class ProvenanceExtractorPort(Protocol):
    """Port for deriving commit inventory from version-control metadata."""

    def file_required(self, path: Path) -> bool:
        ...

    def extract(self, root: Path, path: Path) -> list[CommitInventory]:
        """Extract commits for the metadata directory at ``root / path``.

        Raises:
            ProvenanceError: If the repository itself cannot be opened
        """
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Extra keyword arguments are attached to the record as structured fields.
    """

    def debug(self, message: str, **fields) -> None:
        ...

    def info(self, message: str, **fields) -> None:
        ...

    def warning(self, message: str, **fields) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        ...

    def exception(self, message: str, **fields) -> None:
        ...
