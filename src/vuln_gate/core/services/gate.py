from __future__ import annotations

from enum import Enum

from ..domain.models import DiffResult


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"

    @property
    def failed(self) -> bool:
        return self is Verdict.FAIL


def evaluate_gate(diff: DiffResult, *, fail_on_vuln: bool = True) -> Verdict:
    """Decide whether the pipeline should fail for ``diff``.

    Only reachability-confirmed findings can fail the gate. What the reports
    display (``--all-vulns``) has no influence here.
    """
    if not diff.results or not fail_on_vuln:
        return Verdict.PASS
    if any(flat.group.is_called for flat in diff.iter_flat()):
        return Verdict.FAIL
    return Verdict.PASS
