from __future__ import annotations

from .diff_service import DiffService
from .gate import Verdict, evaluate_gate
from .report_fanout import (
    DEFAULT_FORMAT,
    OutputDirective,
    ReportFanout,
    parse_output_directive,
    plan_directives,
)

__all__ = [
    "DiffService",
    "Verdict",
    "evaluate_gate",
    "DEFAULT_FORMAT",
    "OutputDirective",
    "ReportFanout",
    "parse_output_directive",
    "plan_directives",
]
