import io

import pytest

from vuln_gate.core.domain.sinks import FileSink, StderrSink, StdoutSink
from vuln_gate.infra.sinks import StreamSinkOpener


def test_stdout_and_stderr_are_not_closed():
    stdout, stderr = io.StringIO(), io.StringIO()
    opener = StreamSinkOpener()

    with opener.open(StdoutSink(), stdout=stdout, stderr=stderr) as fh:
        fh.write("out")
    with opener.open(StderrSink(), stdout=stdout, stderr=stderr) as fh:
        fh.write("err")

    assert not stdout.closed
    assert not stderr.closed
    assert stdout.getvalue() == "out"
    assert stderr.getvalue() == "err"


def test_file_sink_truncates_and_closes(tmp_path):
    target = tmp_path / "report.json"
    target.write_text("old content that is longer", encoding="utf-8")

    with StreamSinkOpener().open(FileSink(target), stdout=io.StringIO(), stderr=io.StringIO()) as fh:
        fh.write("{}")

    assert fh.closed
    assert target.read_text(encoding="utf-8") == "{}"


def test_file_sink_in_missing_directory_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        with StreamSinkOpener().open(
            FileSink(tmp_path / "missing" / "report.json"), stdout=io.StringIO(), stderr=io.StringIO()
        ):
            pass
