from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from ..core.domain.outcome import RunDiagnostics
from ..core.services import DiffService, ReportFanout
from ..core.usecases.commits import CommitsUseCase
from ..core.usecases.report import ReportUseCase
from ..infra.git_provenance import GitRepoExtractor
from ..infra.logging import RunLogger
from ..infra.reporter import ReportRenderer
from ..infra.sinks import StreamSinkOpener
from ..infra.snapshot_loader import JsonSnapshotLoader


def json_log_path(*, enabled: bool, logs_dir: Path) -> Path | None:
    return Path(logs_dir) / "vuln-gate.jsonl" if enabled else None


class Container(containers.DeclarativeContainer):
    """DI container; populate with ``container.config.from_pydantic(AppConfig())``."""

    config = providers.Configuration()

    diagnostics = providers.Singleton(RunDiagnostics)

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        RunLogger,
        diagnostics=diagnostics,
        json_log_file=providers.Callable(
            json_log_path,
            enabled=config.logging.json_log,
            logs_dir=config.directories.logs_dir,
        ),
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Adapters
    snapshot_loader = providers.Singleton(JsonSnapshotLoader)

    renderer = providers.Singleton(ReportRenderer)

    sink_opener = providers.Singleton(StreamSinkOpener)

    git_extractor = providers.Factory(
        GitRepoExtractor,
        include_root_git=config.provenance.include_root_git,
        disabled=config.provenance.disabled,
        logger=logger,
    )

    # Domain services
    diff_service = providers.Factory(DiffService, logger=logger)

    report_fanout = providers.Factory(
        ReportFanout,
        renderer=renderer,
        sink_opener=sink_opener,
        logger=logger,
    )

    # Use cases
    report_uc = providers.Factory(
        ReportUseCase,
        loader=snapshot_loader,
        diff_service=diff_service,
        fanout=report_fanout,
        logger=logger,
    )

    commits_uc = providers.Factory(
        CommitsUseCase,
        extractor=git_extractor,
        logger=logger,
    )
