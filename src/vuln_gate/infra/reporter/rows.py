from __future__ import annotations

from dataclasses import dataclass

from ...core.domain.models import DiffResult, FlatFinding


@dataclass(frozen=True)
class Row:
    url: str
    cvss: str
    ecosystem: str
    package: str
    version: str
    source: str

    def cells(self) -> tuple[str, ...]:
        return (self.url, self.cvss, self.ecosystem, self.package, self.version, self.source)


HEADERS = ("OSV URL", "CVSS", "ECOSYSTEM", "PACKAGE", "VERSION", "SOURCE")


def is_visible(flat: FlatFinding, show_all: bool) -> bool:
    """Uncalled and unimportant findings are only shown on request."""
    if show_all:
        return True
    return flat.group.is_called and not flat.group.unimportant


def split_visible(diff: DiffResult, show_all: bool) -> tuple[list[FlatFinding], int]:
    """Return (visible findings, number hidden)."""
    visible: list[FlatFinding] = []
    hidden = 0
    for flat in diff.iter_flat():
        if is_visible(flat, show_all):
            visible.append(flat)
        else:
            hidden += 1
    return visible, hidden


def to_row(flat: FlatFinding) -> Row:
    severity = flat.group.max_severity
    if not severity:
        severity = next((v.severity for v in flat.vulnerabilities if v.severity), "")
    return Row(
        url=f"https://osv.dev/{flat.group.primary_id}",
        cvss=severity or "",
        ecosystem=flat.package.ecosystem,
        package=flat.package.name,
        version=flat.package.version,
        source=flat.source.source,
    )


def hidden_note(hidden: int) -> str:
    noun = "vulnerability" if hidden == 1 else "vulnerabilities"
    return f"{hidden} uncalled or unimportant {noun} hidden, use --all-vulns to show them."
