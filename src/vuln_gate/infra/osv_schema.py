"""Pydantic wire models for OSV-Scanner style JSON results.

The models only describe the parts of the document the gate needs; unknown
keys are ignored so newer scanner output keeps loading.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.domain.models import (
    Package,
    PackageFinding,
    SourceResult,
    Vulnerability,
    VulnerabilityGroup,
    VulnerabilitySnapshot,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AnalysisInfo(_WireModel):
    called: bool = False
    unimportant: bool = False


class GroupInfo(_WireModel):
    ids: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    max_severity: Optional[str] = None
    experimental_analysis: dict[str, AnalysisInfo] = Field(
        default_factory=dict,
        alias="experimentalAnalysis",
    )
    is_called: Optional[bool] = None

    def called(self) -> bool:
        if self.is_called is not None:
            return self.is_called
        if not self.ids:
            return False
        # No reachability data means the call graph was not analysed; assume called
        if not self.experimental_analysis:
            return True
        return any(a.called for a in self.experimental_analysis.values())

    def unimportant(self) -> bool:
        if not self.ids or not self.experimental_analysis:
            return False
        return any(a.unimportant for a in self.experimental_analysis.values())


class VulnerabilityInfo(_WireModel):
    id: str
    summary: Optional[str] = None
    aliases: list[str] = Field(default_factory=list)
    database_specific: dict[str, Any] = Field(default_factory=dict)

    def severity(self) -> Optional[str]:
        value = self.database_specific.get("severity")
        return str(value) if value is not None else None


class PackageInfo(_WireModel):
    name: str
    version: str = ""
    ecosystem: str = ""


class PackageVulnsInfo(_WireModel):
    package: PackageInfo
    vulnerabilities: list[VulnerabilityInfo] = Field(default_factory=list)
    groups: list[GroupInfo] = Field(default_factory=list)


class SourceInfo(_WireModel):
    path: str
    type: str = "lockfile"


class PackageSourceInfo(_WireModel):
    source: SourceInfo
    packages: list[PackageVulnsInfo] = Field(default_factory=list)


class VulnerabilityResultsInfo(_WireModel):
    results: list[PackageSourceInfo] = Field(default_factory=list)


def _to_group(info: GroupInfo) -> VulnerabilityGroup:
    return VulnerabilityGroup(
        ids=tuple(info.ids),
        aliases=tuple(info.aliases),
        is_called=info.called(),
        unimportant=info.unimportant(),
        max_severity=info.max_severity,
    )


def _to_finding(info: PackageVulnsInfo) -> PackageFinding:
    vulns = tuple(
        Vulnerability(
            id=v.id,
            summary=v.summary,
            aliases=tuple(v.aliases),
            severity=v.severity(),
        )
        for v in info.vulnerabilities
    )
    if info.groups:
        groups = tuple(_to_group(g) for g in info.groups)
    else:
        # Older output has no grouping; each record stands alone
        groups = tuple(
            VulnerabilityGroup(ids=(v.id,), aliases=v.aliases, max_severity=v.severity)
            for v in vulns
        )
    return PackageFinding(
        package=Package(
            name=info.package.name,
            ecosystem=info.package.ecosystem,
            version=info.package.version,
        ),
        vulnerabilities=vulns,
        groups=groups,
    )


def to_domain(doc: VulnerabilityResultsInfo) -> VulnerabilitySnapshot:
    return VulnerabilitySnapshot(
        results=tuple(
            SourceResult(
                source=r.source.path,
                source_type=r.source.type,
                package_vulns=tuple(_to_finding(p) for p in r.packages),
            )
            for r in doc.results
        )
    )


def snapshot_to_dict(snapshot: VulnerabilitySnapshot) -> dict[str, Any]:
    """Serialize a snapshot (or diff) back into the wire shape."""
    results = []
    for result in snapshot.results:
        packages = []
        for finding in result.package_vulns:
            packages.append({
                "package": {
                    "name": finding.package.name,
                    "version": finding.package.version,
                    "ecosystem": finding.package.ecosystem,
                },
                "vulnerabilities": [
                    {
                        "id": v.id,
                        "summary": v.summary,
                        "aliases": list(v.aliases),
                        "database_specific": {"severity": v.severity} if v.severity else {},
                    }
                    for v in finding.vulnerabilities
                ],
                "groups": [
                    {
                        "ids": list(g.ids),
                        "aliases": list(g.aliases),
                        "max_severity": g.max_severity,
                        "is_called": g.is_called,
                        "experimentalAnalysis": {
                            i: {"called": g.is_called, "unimportant": g.unimportant}
                            for i in g.ids
                        },
                    }
                    for g in finding.groups
                ],
            })
        results.append({
            "source": {"path": result.source, "type": result.source_type},
            "packages": packages,
        })
    return {"results": results}
