from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..domain.models import CommitInventory
from ..domain.outcome import RunOutcome
from ..ports import LoggerPort, ProvenanceExtractorPort


def plural(count: int, singular: str, plural_form: str) -> str:
    return singular if count == 1 else plural_form


@dataclass(frozen=True)
class CommitsReport:
    inventories: tuple[CommitInventory, ...]

    @property
    def outcome(self) -> RunOutcome:
        if not self.inventories:
            return RunOutcome.NO_PACKAGES_FOUND
        return RunOutcome.SUCCESS


class CommitsUseCase:
    """Use case for collecting commit identifiers from git metadata under a directory."""

    def __init__(self, *, extractor: ProvenanceExtractorPort, logger: LoggerPort) -> None:
        self._extractor = extractor
        self._logger = logger

    def execute(self, *, root: Path) -> CommitsReport:
        """Walk ``root`` and extract commits from every git metadata directory.

        Raises:
            ProvenanceError: If a repository found during the walk cannot be opened
        """
        inventories: list[CommitInventory] = []

        for dirpath, dirnames, _ in os.walk(root):
            current = Path(dirpath)
            for name in sorted(dirnames):
                rel = (current / name).relative_to(root)
                if not self._extractor.file_required(root / rel):
                    continue
                found = self._extractor.extract(root, rel)
                inventories.extend(found)
                self._logger.info(
                    f"Scanned {root / rel} file and found {len(found)} {plural(len(found), 'package', 'packages')}",
                    path=str(root / rel),
                    count=len(found),
                )
            # never descend into repository metadata
            dirnames[:] = sorted(d for d in dirnames if d != ".git")

        return CommitsReport(inventories=tuple(inventories))
