import io
import json

import pytest

from builders import osv_doc, osv_package, osv_source, write_doc
from vuln_gate import collect_commits, report
from vuln_gate.app.config import AppConfig, DirectoryConfig, LoggingConfig
from vuln_gate.core.domain.exceptions import SinkOpenError
from vuln_gate.core.domain.models import SnapshotState
from vuln_gate.core.domain.outcome import RunOutcome
from vuln_gate.core.services import Verdict


@pytest.fixture
def test_config(tmp_path):
    return AppConfig(
        directories=DirectoryConfig(home=tmp_path / "home"),
        logging=LoggingConfig(console_output=False, json_log=True),
    )


def test_report_facade_returns_run(tmp_path, test_config):
    new = write_doc(tmp_path / "new.json", osv_doc(osv_source("go.mod", osv_package("x/net", "GO-1", ecosystem="Go"))))
    stdout, stderr = io.StringIO(), io.StringIO()

    run = report(new, outputs=["json:#stderr"], stdout=stdout, stderr=stderr, config=test_config)

    assert run.verdict is Verdict.FAIL
    assert run.outcome is RunOutcome.VULNERABILITIES_FOUND
    assert run.old.state is SnapshotState.ABSENT
    assert run.new.state is SnapshotState.PRESENT
    # a terminal directive replaces the implicit table
    assert stdout.getvalue() == ""
    assert json.loads(stderr.getvalue())["results"][0]["source"]["path"] == "go.mod"


def test_report_facade_writes_json_log(tmp_path, test_config):
    new = write_doc(tmp_path / "new.json", osv_doc())

    run = report(new, old=tmp_path / "missing.json", stdout=io.StringIO(), stderr=io.StringIO(), config=test_config)

    assert run.old.state is SnapshotState.LOAD_FAILED
    assert run.outcome is RunOutcome.SUCCESS
    log_file = test_config.directories.logs_dir / "vuln-gate.jsonl"
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    warning = next(r for r in records if r["level"] == "WARNING")
    assert "failed to open old results" in warning["message"]


def test_report_facade_raises_on_output_failure(tmp_path, test_config):
    new = write_doc(tmp_path / "new.json", osv_doc())

    with pytest.raises(SinkOpenError):
        report(
            new,
            outputs=[f"sarif:{tmp_path / 'nope' / 'out.sarif'}"],
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            config=test_config,
        )


def test_collect_commits_facade(tmp_path, test_config):
    (tmp_path / "empty").mkdir()

    result = collect_commits(tmp_path / "empty", config=test_config)

    assert result.outcome is RunOutcome.NO_PACKAGES_FOUND
