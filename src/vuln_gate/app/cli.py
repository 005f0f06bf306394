from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import TextIO

import click
import typer
from pydantic import ValidationError
from typer.core import TyperGroup

from .config import AppConfig
from .container import Container
from ..core.domain.exceptions import VulnGateError
from ..core.domain.outcome import RunDiagnostics, RunOutcome, exit_code_for
from ..core.services.report_fanout import DEFAULT_FORMAT


def _generic_error_code() -> int:
    diagnostics = RunDiagnostics()
    diagnostics.record_error()
    return exit_code_for(RunOutcome.FAILED, diagnostics)


class GateGroup(TyperGroup):
    """Command group that maps usage errors and aborts to the generic error exit code."""

    def main(self, *args, standalone_mode: bool = True, **kwargs):
        try:
            rv = super().main(*args, standalone_mode=False, **kwargs)
        except click.exceptions.Abort:
            typer.echo("Aborted!", err=True)
            rv = _generic_error_code()
        except click.ClickException as e:
            e.show()
            rv = _generic_error_code()

        if not standalone_mode:
            return rv
        sys.exit(rv if isinstance(rv, int) else 0)


app = typer.Typer(cls=GateGroup, add_completion=False, no_args_is_help=True)


def split_last_arg(args: list[str]) -> list[str]:
    """Split the last argument on newlines.

    CI systems such as GitHub Actions pass several arguments through a single
    multi-line input, which arrives here as one argv element.
    """
    if not args:
        return args
    pieces = [p for p in args[-1].split("\n") if p.strip()]
    return args[:-1] + pieces


def terminal_width(stream: TextIO) -> int:
    """Return the terminal width of ``stream``, or 0 when it is not a terminal."""
    try:
        if stream.isatty():
            return os.get_terminal_size(stream.fileno()).columns
    except (OSError, ValueError, AttributeError):
        return 0
    return 0


def _load_config(diagnostics: RunDiagnostics, **overrides: dict[str, object]) -> AppConfig:
    try:
        return AppConfig().with_overrides(**overrides)
    except ValidationError as e:
        typer.echo(f"Error: ignored invalid configuration: {e}", err=True)
        diagnostics.record_error(invalid_config=True)
        raise typer.Exit(code=exit_code_for(RunOutcome.FAILED, diagnostics))


def _create_container(config: AppConfig) -> Container:
    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()
    return container


@app.command()
def report(
    new: Path = typer.Option(..., "--new", help="The new osv-scanner JSON results"),
    old: Path | None = typer.Option(None, "--old", help="The old (baseline) osv-scanner JSON results"),
    output: list[str] | None = typer.Option(
        None,
        "--output",
        "-o",
        help=(
            "Save a report in a given format: --output=[format]:[path] (repeatable, or comma separated). "
            f"Without a format the default '{DEFAULT_FORMAT}' is used. "
            "Use '#stdout' or '#stderr' as the path to write to the terminal."
        ),
    ),
    gh_annotations: bool = typer.Option(
        False,
        "--gh-annotations",
        help="[Deprecated] (Use --output=gh-annotations:#stderr) print GitHub Actions annotations",
    ),
    fail_on_vuln: bool | None = typer.Option(
        None,
        "--fail-on-vuln/--no-fail-on-vuln",
        help="Return 1 when new called vulnerabilities are found [default: true]",
    ),
    all_vulns: bool | None = typer.Option(
        None,
        "--all-vulns/--no-all-vulns",
        help="Show all vulnerabilities including unimportant and uncalled ones",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level", case_sensitive=False),
):
    """Report vulnerabilities introduced between two scan results and gate on them."""
    early = RunDiagnostics()
    config = _load_config(
        early,
        report={"fail_on_vuln": fail_on_vuln, "show_all_vulns": all_vulns},
        logging={"level": log_level},
    )

    container = _create_container(config)
    diagnostics = container.diagnostics()
    logger = container.logger()

    outcome = RunOutcome.FAILED
    try:
        uc = container.report_uc()
        run = uc.execute(
            new_path=new,
            old_path=old,
            outputs=output or [],
            gh_annotations=gh_annotations,
            fail_on_vuln=config.report.fail_on_vuln,
            show_all=config.report.show_all_vulns,
            stdout=sys.stdout,
            stderr=sys.stderr,
            term_width=terminal_width(sys.stdout),
        )
        outcome = run.outcome
    except VulnGateError as e:
        logger.error(str(e))
    except Exception as e:
        logger.exception(f"unexpected error: {e}")
    finally:
        # Always shutdown resources to close file handles
        container.shutdown_resources()

    raise typer.Exit(code=exit_code_for(outcome, diagnostics))


@app.command()
def commits(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Directory to search for git repositories"),
    include_root_git: bool | None = typer.Option(
        None,
        "--include-root-git/--no-include-root-git",
        help="Also report the HEAD commit of each repository, not only its submodules",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List commit identifiers of git repositories and submodules under PATH."""
    early = RunDiagnostics()
    config = _load_config(early, provenance={"include_root_git": include_root_git})

    container = _create_container(config)
    diagnostics = container.diagnostics()
    logger = container.logger()

    outcome = RunOutcome.FAILED
    try:
        uc = container.commits_uc()
        result = uc.execute(root=path)
        outcome = result.outcome

        if outcome is RunOutcome.NO_PACKAGES_FOUND:
            logger.error("No package sources found, --help for usage information.")
        elif json_output:
            items = [{"commit": inv.commit, "location": inv.location} for inv in result.inventories]
            typer.echo(json.dumps({"count": len(items), "results": items}, ensure_ascii=False, indent=2))
        else:
            for inv in result.inventories:
                typer.echo(f"{inv.commit}  {inv.location}")
    except VulnGateError as e:
        logger.error(str(e))
    except Exception as e:
        logger.exception(f"unexpected error: {e}")
    finally:
        container.shutdown_resources()

    raise typer.Exit(code=exit_code_for(outcome, diagnostics))


def main() -> None:
    app(args=split_last_arg(sys.argv[1:]), prog_name="vuln-gate")


if __name__ == "__main__":
    main()
