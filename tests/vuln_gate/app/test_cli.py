import json

import pytest
from git import Repo
from typer.testing import CliRunner

from builders import osv_doc, osv_package, osv_source, write_doc
from vuln_gate.app.cli import app, split_last_arg, terminal_width


runner = CliRunner()


@pytest.fixture
def results(tmp_path):
    """Baseline with one uncalled finding; new scan adds a called one."""
    old = write_doc(
        tmp_path / "old.json",
        osv_doc(osv_source("pkg/lock.json", osv_package("foo", "VULN-1", called=False))),
    )
    new = write_doc(
        tmp_path / "new.json",
        osv_doc(osv_source(
            "pkg/lock.json",
            osv_package("foo", "VULN-1", called=False),
            osv_package("bar", "VULN-2", version="2.0.0"),
        )),
    )
    return old, new


def test_split_last_arg():
    assert split_last_arg([]) == []
    assert split_last_arg(["report", "--new=a.json"]) == ["report", "--new=a.json"]
    assert split_last_arg(["report", "--new=a.json\n--output=json:out.json\n"]) == [
        "report",
        "--new=a.json",
        "--output=json:out.json",
    ]


def test_terminal_width_of_non_tty_is_zero(tmp_path):
    with open(tmp_path / "out.txt", "w", encoding="utf-8") as fh:
        assert terminal_width(fh) == 0


def test_report_unchanged_findings_exit_zero(results):
    old, _ = results

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(old)])

    assert result.exit_code == 0
    assert "No issues found" in result.stdout


def test_report_new_called_vulnerability_exits_one(tmp_path):
    new = write_doc(tmp_path / "new.json", osv_doc(osv_source("pkg/lock.json", osv_package("foo", "VULN-2"))))

    result = runner.invoke(app, ["report", "--new", str(new)])

    assert result.exit_code == 1
    assert "https://osv.dev/VULN-2" in result.stdout


def test_report_no_fail_on_vuln(results):
    old, new = results

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new), "--no-fail-on-vuln"])

    assert result.exit_code == 0
    assert "VULN-2" in result.stdout


def test_report_fail_on_vuln_from_env(results, monkeypatch):
    old, new = results
    monkeypatch.setenv("VULN_GATE_REPORT__FAIL_ON_VULN", "false")

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new)])

    assert result.exit_code == 0


def test_report_moved_lockfile_passes(tmp_path):
    old = write_doc(tmp_path / "old.json", osv_doc(osv_source("a/lock.json", osv_package("foo", "VULN-3"))))
    new = write_doc(tmp_path / "new.json", osv_doc(osv_source("b/lock.json", osv_package("foo", "VULN-3"))))

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new)])

    assert result.exit_code == 0
    assert "No issues found" in result.stdout


def test_report_missing_old_results_uses_new_only(tmp_path, results):
    _, new = results

    result = runner.invoke(app, ["report", "--old", str(tmp_path / "missing.json"), "--new", str(new)])

    assert result.exit_code == 1
    assert "failed to open old results" in result.output
    assert "VULN-2" in result.stdout


def test_report_missing_new_results_passes(tmp_path):
    result = runner.invoke(app, ["report", "--new", str(tmp_path / "missing.json")])

    assert result.exit_code == 0
    assert "likely because previous step failed" in result.output


def test_report_writes_requested_outputs(tmp_path, results):
    old, new = results
    sarif_out = tmp_path / "out" / "report.sarif"
    sarif_out.parent.mkdir()

    result = runner.invoke(
        app,
        [
            "report", "--old", str(old), "--new", str(new),
            "--output", f"json:{tmp_path / 'report.json'},{sarif_out}",
            "-o", f"markdown:{tmp_path / 'report.md'}",
        ],
    )

    assert result.exit_code == 1
    doc = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert doc["results"][0]["packages"][0]["package"]["name"] == "bar"
    sarif = json.loads(sarif_out.read_text(encoding="utf-8"))
    assert sarif["runs"][0]["results"][0]["ruleId"] == "VULN-2"
    assert "[VULN-2](https://osv.dev/VULN-2)" in (tmp_path / "report.md").read_text(encoding="utf-8")
    # file outputs do not suppress the terminal table
    assert "https://osv.dev/VULN-2" in result.stdout


def test_report_multiline_output_argument(tmp_path, results, monkeypatch):
    old, new = results
    monkeypatch.setattr(
        "sys.argv",
        ["vuln-gate", "report", "--old", str(old), "--new", str(new),
         f"--output=json:{tmp_path / 'a.json'}\n--output=json:{tmp_path / 'b.json'}"],
    )
    from vuln_gate.app import cli

    with pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 1
    assert (tmp_path / "a.json").read_text(encoding="utf-8") == (tmp_path / "b.json").read_text(encoding="utf-8")


def test_report_unknown_format_exits_127(results):
    old, new = results

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new), "-o", "yaml:out.yaml"])

    assert result.exit_code == 127
    assert "unknown output format" in result.output


def test_report_unwritable_output_exits_127(tmp_path, results):
    old, new = results
    target = tmp_path / "missing-dir" / "report.json"

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new), "-o", f"json:{target}"])

    assert result.exit_code == 127
    assert "failed to create output file" in result.output


def test_report_invalid_config_exits_130(results, monkeypatch):
    old, new = results
    monkeypatch.setenv("VULN_GATE_REPORT__FAIL_ON_VULN", "sometimes")

    result = runner.invoke(app, ["report", "--old", str(old), "--new", str(new)])

    assert result.exit_code == 130
    assert "invalid configuration" in result.output


def test_commits_without_repositories_exits_128(tmp_path):
    (tmp_path / "src").mkdir()

    result = runner.invoke(app, ["commits", str(tmp_path)])

    assert result.exit_code == 128
    assert "No package sources found" in result.output


def test_commits_lists_repository_head(tmp_path):
    repo_dir = tmp_path / "project"
    repo = Repo.init(repo_dir)
    (repo_dir / "a.txt").write_text("a", encoding="utf-8")
    repo.index.add(["a.txt"])
    sha = repo.index.commit("first").hexsha
    repo.close()

    result = runner.invoke(app, ["commits", str(tmp_path), "--json"])

    assert result.exit_code == 0
    start = result.stdout.index("{")
    data = json.loads(result.stdout[start:result.stdout.rindex("}") + 1])
    assert data["count"] == 1
    assert data["results"] == [{"commit": sha, "location": "project"}]


def test_commits_plain_output(tmp_path):
    repo_dir = tmp_path / "project"
    repo = Repo.init(repo_dir)
    (repo_dir / "a.txt").write_text("a", encoding="utf-8")
    repo.index.add(["a.txt"])
    sha = repo.index.commit("first").hexsha
    repo.close()

    result = runner.invoke(app, ["commits", str(tmp_path)])

    assert result.exit_code == 0
    assert f"{sha}  project" in result.stdout


@pytest.mark.parametrize("corrupt", ["old", "new"])
def test_report_non_utf8_results_degrade_to_warning(tmp_path, results, corrupt):
    old, new = results
    bad = tmp_path / "corrupt.json"
    bad.write_bytes(b"\xff\xfe garbage")
    args = {"old": old, "new": new, corrupt: bad}

    result = runner.invoke(app, ["report", "--old", str(args["old"]), "--new", str(args["new"])])

    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert f"failed to open {corrupt} results" in result.output
    # a corrupt baseline leaves the new called finding; corrupt new results pass
    assert result.exit_code == (1 if corrupt == "old" else 0)


def test_report_without_new_exits_127():
    result = runner.invoke(app, ["report"])

    assert result.exit_code == 127
    assert "--new" in result.output


def test_report_unknown_flag_exits_127(results):
    _, new = results

    result = runner.invoke(app, ["report", "--new", str(new), "--no-such-flag"])

    assert result.exit_code == 127


def test_report_unexpected_error_exits_127(results, monkeypatch):
    _, new = results

    def boom(self, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("vuln_gate.core.usecases.report.ReportUseCase.execute", boom)

    result = runner.invoke(app, ["report", "--new", str(new)])

    assert result.exit_code == 127
    assert "unexpected error: disk on fire" in result.output


def test_report_invalid_log_level_exits_130(results):
    _, new = results

    result = runner.invoke(app, ["report", "--new", str(new), "--log-level", "loud"])

    assert result.exit_code == 130
    assert "unknown log level" in result.output
