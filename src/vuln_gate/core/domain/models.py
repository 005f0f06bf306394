from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


@dataclass(frozen=True)
class Package:
    """Identity of a resolved dependency."""
    name: str
    ecosystem: str
    version: str

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.name, self.ecosystem, self.version)


@dataclass(frozen=True)
class Vulnerability:
    """Single advisory record attached to a package."""
    id: str
    summary: str | None = None
    aliases: tuple[str, ...] = ()
    severity: str | None = None  # CVSS score or vector, as reported

    @property
    def url(self) -> str:
        return f"https://osv.dev/{self.id}"


@dataclass(frozen=True)
class VulnerabilityGroup:
    """Aliased advisory identifiers that describe one underlying issue.

    ``is_called`` comes from reachability analysis performed upstream and is
    never recomputed here.
    """
    ids: tuple[str, ...]
    aliases: tuple[str, ...] = ()
    is_called: bool = True
    unimportant: bool = False
    max_severity: str | None = None

    @property
    def primary_id(self) -> str:
        return self.ids[0] if self.ids else ""

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset(self.ids) | frozenset(self.aliases)

    def overlaps(self, other: VulnerabilityGroup) -> bool:
        return not self.identifiers.isdisjoint(other.identifiers)


@dataclass(frozen=True)
class PackageFinding:
    package: Package
    vulnerabilities: tuple[Vulnerability, ...] = ()
    groups: tuple[VulnerabilityGroup, ...] = ()

    def vulnerabilities_for(self, group: VulnerabilityGroup) -> tuple[Vulnerability, ...]:
        wanted = set(group.ids)
        return tuple(v for v in self.vulnerabilities if v.id in wanted)


@dataclass(frozen=True)
class SourceResult:
    """Findings attributed to one manifest or lockfile."""
    source: str
    package_vulns: tuple[PackageFinding, ...] = ()
    source_type: str = "lockfile"


@dataclass(frozen=True)
class FlatFinding:
    source: SourceResult
    package: Package
    group: VulnerabilityGroup
    vulnerabilities: tuple[Vulnerability, ...] = ()


@dataclass(frozen=True)
class VulnerabilitySnapshot:
    """One scan's output.

    An empty snapshot means "no data available"; it is not a statement that
    the project is free of vulnerabilities.
    """
    results: tuple[SourceResult, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.results

    def vulnerability_ids(self) -> set[str]:
        return {
            vuln.id
            for result in self.results
            for finding in result.package_vulns
            for vuln in finding.vulnerabilities
        }

    def iter_flat(self) -> Iterator[FlatFinding]:
        for result in self.results:
            for finding in result.package_vulns:
                for group in finding.groups:
                    yield FlatFinding(
                        source=result,
                        package=finding.package,
                        group=group,
                        vulnerabilities=finding.vulnerabilities_for(group),
                    )

    def flatten(self) -> list[FlatFinding]:
        return list(self.iter_flat())


@dataclass(frozen=True)
class DiffResult(VulnerabilitySnapshot):
    """Subset of a snapshot judged newly introduced against a baseline."""


class SnapshotState(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class LoadedSnapshot:
    """A snapshot together with how it was obtained.

    Lets callers tell a genuinely clean result apart from one that was
    substituted because the file could not be read.
    """
    snapshot: VulnerabilitySnapshot = field(default_factory=VulnerabilitySnapshot)
    state: SnapshotState = SnapshotState.ABSENT
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.state is SnapshotState.PRESENT


@dataclass(frozen=True)
class CommitInventory:
    """Commit identifier discovered in a repository or submodule."""
    commit: str
    location: str
