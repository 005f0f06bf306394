from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence, TextIO

from .config import AppConfig
from .container import Container
from ..core.usecases.commits import CommitsReport
from ..core.usecases.report import ReportRun


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        # Load from environment variables (BaseSettings default behavior)
        config = AppConfig()

    container.config.from_pydantic(config)
    container.init_resources()

    return container


def report(
    new: Path | str,
    *,
    old: Path | str | None = None,
    outputs: Sequence[str] = (),
    gh_annotations: bool = False,
    fail_on_vuln: bool | None = None,
    show_all: bool | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    config: AppConfig | None = None,
) -> ReportRun:
    """Diff two scan results, write the requested reports and evaluate the gate.

    Args:
        new: Path to the current scan results
        old: Optional path to the baseline scan results
        outputs: ``format:path`` directives
        gh_annotations: Also print GitHub annotations to stderr
        fail_on_vuln: Override ``report.fail_on_vuln`` from config
        show_all: Override ``report.show_all_vulns`` from config
        stdout: Stream used for ``#stdout`` (defaults to sys.stdout)
        stderr: Stream used for ``#stderr`` (defaults to sys.stderr)
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        The completed run with diff, verdict and snapshot states

    Raises:
        VulnGateError: If an output cannot be written or is misconfigured
    """
    container = _create_container(config)
    try:
        cfg = container.config.report
        return container.report_uc().execute(
            new_path=Path(new),
            old_path=Path(old) if old is not None else None,
            outputs=list(outputs),
            gh_annotations=gh_annotations,
            fail_on_vuln=cfg.fail_on_vuln() if fail_on_vuln is None else fail_on_vuln,
            show_all=cfg.show_all_vulns() if show_all is None else show_all,
            stdout=stdout if stdout is not None else sys.stdout,
            stderr=stderr if stderr is not None else sys.stderr,
        )
    finally:
        container.shutdown_resources()


def collect_commits(root: Path | str, *, config: AppConfig | None = None) -> CommitsReport:
    """Collect commit identifiers of repositories and submodules under ``root``.

    Raises:
        ProvenanceError: If a repository found under ``root`` cannot be opened
    """
    container = _create_container(config)
    try:
        return container.commits_uc().execute(root=Path(root))
    finally:
        container.shutdown_resources()
