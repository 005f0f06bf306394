from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO

from ..domain.exceptions import SnapshotLoadError
from ..domain.models import DiffResult, LoadedSnapshot, SnapshotState, VulnerabilitySnapshot
from ..domain.outcome import RunOutcome
from ..ports import LoggerPort, SnapshotLoaderPort
from ..services import DiffService, ReportFanout, Verdict, evaluate_gate, plan_directives


@dataclass(frozen=True)
class ReportRun:
    diff: DiffResult
    verdict: Verdict
    old: LoadedSnapshot
    new: LoadedSnapshot

    @property
    def outcome(self) -> RunOutcome:
        if self.verdict.failed:
            return RunOutcome.VULNERABILITIES_FOUND
        return RunOutcome.SUCCESS


class ReportUseCase:
    """Use case for diffing two scan snapshots and reporting new findings.

    Loads both snapshots (degrading to empty ones when they cannot be read),
    computes the diff, writes every requested report and evaluates the gate.
    """

    def __init__(
        self,
        *,
        loader: SnapshotLoaderPort,
        diff_service: DiffService,
        fanout: ReportFanout,
        logger: LoggerPort,
    ) -> None:
        self._loader = loader
        self._diff_service = diff_service
        self._fanout = fanout
        self._logger = logger

    def execute(
        self,
        *,
        new_path: Path,
        old_path: Path | None = None,
        outputs: Sequence[str] = (),
        gh_annotations: bool = False,
        fail_on_vuln: bool = True,
        show_all: bool = False,
        stdout: TextIO,
        stderr: TextIO,
        term_width: int = 0,
    ) -> ReportRun:
        """Execute the report workflow.

        Raises:
            ConfigurationError: If an output directive or format is invalid
            SinkOpenError: If an output file cannot be created
            RenderError: If a report cannot be written
        """
        # Parse directives first so a typo fails before any output is written
        directives = plan_directives(outputs, gh_annotations=gh_annotations)

        old = self._load_old(old_path)
        new = self._load_new(new_path)

        diff = self._diff_service.diff(old.snapshot, new.snapshot)
        self._logger.info(
            f"found {len(diff.flatten())} new vulnerability group(s) in {len(diff.results)} source(s)",
            old_state=old.state.value,
            new_state=new.state.value,
        )

        self._fanout.publish(
            diff,
            directives,
            stdout=stdout,
            stderr=stderr,
            term_width=term_width,
            show_all=show_all,
        )

        verdict = evaluate_gate(diff, fail_on_vuln=fail_on_vuln)
        return ReportRun(diff=diff, verdict=verdict, old=old, new=new)

    def _load_old(self, path: Path | None) -> LoadedSnapshot:
        if path is None:
            return LoadedSnapshot(state=SnapshotState.ABSENT)
        try:
            return LoadedSnapshot(snapshot=self._loader.load(path), state=SnapshotState.PRESENT)
        except SnapshotLoadError as e:
            self._logger.warning(
                f"failed to open old results at {path}: {e.cause} - likely because target branch has no lockfiles.",
                path=str(path),
            )
            return LoadedSnapshot(
                snapshot=VulnerabilitySnapshot(),
                state=SnapshotState.LOAD_FAILED,
                error=str(e),
            )

    def _load_new(self, path: Path) -> LoadedSnapshot:
        try:
            return LoadedSnapshot(snapshot=self._loader.load(path), state=SnapshotState.PRESENT)
        except SnapshotLoadError as e:
            # Not a failure of this run: the scan step before us produced nothing
            self._logger.warning(
                f"failed to open new results at {path}: {e.cause} - likely because previous step failed.",
                path=str(path),
            )
            return LoadedSnapshot(
                snapshot=VulnerabilitySnapshot(),
                state=SnapshotState.LOAD_FAILED,
                error=str(e),
            )
