from __future__ import annotations

from typing import Optional

from ..domain.models import (
    DiffResult,
    PackageFinding,
    SourceResult,
    VulnerabilityGroup,
    VulnerabilitySnapshot,
)
from ..ports import LoggerPort


class DiffService:
    """Domain service for finding newly introduced vulnerabilities.

    Two strategies are combined:

    - occurrence diff: compares the sets of vulnerability ids seen anywhere in
      each snapshot, ignoring source and package;
    - full diff: compares (source, package, group) tuples.

    The occurrence diff is used as a gate in front of the full diff. When every
    id in ``new`` was already seen somewhere in ``old`` the result is empty,
    so a lockfile that was only moved or renamed is not reported as new.
    """

    def __init__(self, *, logger: Optional[LoggerPort] = None) -> None:
        self._logger = logger

    def occurrences(self, old: VulnerabilitySnapshot, new: VulnerabilitySnapshot) -> set[str]:
        """Return ids present in ``new`` that never occur in ``old``."""
        return new.vulnerability_ids() - old.vulnerability_ids()

    def full_diff(self, old: VulnerabilitySnapshot, new: VulnerabilitySnapshot) -> DiffResult:
        """Return the part of ``new`` with no matching finding in ``old``.

        A group is matched when ``old`` holds a group under the same source and
        the same package identity whose ids or aliases overlap with it.
        """
        old_by_source = {result.source: result for result in old.results}

        results: list[SourceResult] = []
        for new_source in new.results:
            old_source = old_by_source.get(new_source.source)
            if old_source is None:
                results.append(new_source)
                continue

            old_by_package = {f.package.key: f for f in old_source.package_vulns}
            findings: list[PackageFinding] = []
            for new_finding in new_source.package_vulns:
                old_finding = old_by_package.get(new_finding.package.key)
                if old_finding is None:
                    findings.append(new_finding)
                    continue

                fresh = _new_groups(new_finding.groups, old_finding.groups)
                if not fresh:
                    continue
                wanted = {i for group in fresh for i in group.ids}
                findings.append(
                    PackageFinding(
                        package=new_finding.package,
                        vulnerabilities=tuple(v for v in new_finding.vulnerabilities if v.id in wanted),
                        groups=fresh,
                    )
                )

            if findings:
                results.append(
                    SourceResult(
                        source=new_source.source,
                        package_vulns=tuple(findings),
                        source_type=new_source.source_type,
                    )
                )

        return DiffResult(results=tuple(results))

    def diff(self, old: VulnerabilitySnapshot, new: VulnerabilitySnapshot) -> DiffResult:
        """Compute the new findings, skipping the full diff when the occurrence diff is empty."""
        candidates = self.occurrences(old, new)
        if self._logger is not None:
            self._logger.debug(
                f"occurrence diff found {len(candidates)} previously unseen vulnerability id(s)",
                candidates=sorted(candidates),
            )
        if not candidates:
            return DiffResult()
        return self.full_diff(old, new)


def _new_groups(
    new_groups: tuple[VulnerabilityGroup, ...],
    old_groups: tuple[VulnerabilityGroup, ...],
) -> tuple[VulnerabilityGroup, ...]:
    return tuple(
        group for group in new_groups
        if not any(group.overlaps(old) for old in old_groups)
    )
