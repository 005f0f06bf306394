from pathlib import Path

from fakes import FakeLogger
from vuln_gate.core.domain.models import CommitInventory
from vuln_gate.core.domain.outcome import RunOutcome
from vuln_gate.core.usecases.commits import CommitsUseCase, plural


class FakeExtractor:
    def __init__(self):
        self.extracted = []

    def file_required(self, path: Path) -> bool:
        return path.name == ".git"

    def extract(self, root: Path, path: Path):
        self.extracted.append(path.as_posix())
        location = path.parent.as_posix()
        return [CommitInventory(commit=f"sha-{location}", location=location)]


def test_walk_finds_nested_git_dirs_without_descending(tmp_path):
    (tmp_path / ".git" / "objects").mkdir(parents=True)
    (tmp_path / ".git" / "modules" / ".git").mkdir(parents=True)
    (tmp_path / "vendor" / "lib" / ".git").mkdir(parents=True)
    (tmp_path / "src").mkdir()

    extractor = FakeExtractor()
    logger = FakeLogger()
    report = CommitsUseCase(extractor=extractor, logger=logger).execute(root=tmp_path)

    assert extractor.extracted == [".git", "vendor/lib/.git"]
    assert [i.location for i in report.inventories] == [".", "vendor/lib"]
    assert report.outcome is RunOutcome.SUCCESS
    assert len(logger.messages("info")) == 2
    assert "found 1 package" in logger.messages("info")[0]


def test_no_git_dirs_means_no_packages(tmp_path):
    (tmp_path / "src").mkdir()

    report = CommitsUseCase(extractor=FakeExtractor(), logger=FakeLogger()).execute(root=tmp_path)

    assert report.inventories == ()
    assert report.outcome is RunOutcome.NO_PACKAGES_FOUND


def test_plural():
    assert plural(1, "package", "packages") == "package"
    assert plural(0, "package", "packages") == "packages"
    assert plural(3, "package", "packages") == "packages"
