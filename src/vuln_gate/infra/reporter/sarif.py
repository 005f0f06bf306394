"""SARIF 2.1.0 output.

One rule per vulnerability group, one result per (source, package, group)
tuple. Always complete: the visibility filter only applies to human formats.
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from ..._version import __version__
from ...core.domain.models import DiffResult, FlatFinding

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
SARIF_VERSION = "2.1.0"
TOOL_NAME = "vuln-gate"


def _rule(flat: FlatFinding) -> dict[str, Any]:
    vuln_id = flat.group.primary_id
    summary = next((v.summary for v in flat.vulnerabilities if v.summary), None)
    aliases = sorted(flat.group.identifiers - {vuln_id})
    help_text = f"See https://osv.dev/{vuln_id}"
    if aliases:
        help_text += f" (aliases: {', '.join(aliases)})"
    rule: dict[str, Any] = {
        "id": vuln_id,
        "shortDescription": {"text": f"{vuln_id}: {summary}" if summary else vuln_id},
        "helpUri": f"https://osv.dev/{vuln_id}",
        "help": {"text": help_text},
        "properties": {"aliases": aliases},
    }
    return rule


def _result(flat: FlatFinding) -> dict[str, Any]:
    pkg = flat.package
    vuln_id = flat.group.primary_id
    return {
        "ruleId": vuln_id,
        "level": "warning",
        "message": {
            "text": (
                f"Package '{pkg.name}@{pkg.version}' ({pkg.ecosystem}) "
                f"is vulnerable to '{vuln_id}'."
            )
        },
        "locations": [
            {"physicalLocation": {"artifactLocation": {"uri": flat.source.source}}}
        ],
        "properties": {
            "called": flat.group.is_called,
            "unimportant": flat.group.unimportant,
        },
    }


def build_sarif(diff: DiffResult) -> dict[str, Any]:
    rules: dict[str, dict[str, Any]] = {}
    results: list[dict[str, Any]] = []
    for flat in diff.iter_flat():
        rules.setdefault(flat.group.primary_id, _rule(flat))
        results.append(_result(flat))

    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": __version__,
                        "rules": list(rules.values()),
                    }
                },
                "results": results,
            }
        ],
    }


def render_sarif(diff: DiffResult, stream: TextIO, term_width: int, show_all: bool) -> None:
    json.dump(build_sarif(diff), stream, ensure_ascii=False, indent=2)
    stream.write("\n")
