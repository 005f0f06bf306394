from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from ..core.domain.exceptions import SnapshotLoadError
from ..core.domain.models import VulnerabilitySnapshot
from .osv_schema import VulnerabilityResultsInfo, to_domain


class JsonSnapshotLoader:
    """Loads OSV-Scanner JSON output into the result model."""

    def load(self, path: Path) -> VulnerabilitySnapshot:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise SnapshotLoadError(path, e) from e

        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotLoadError(path, f"invalid UTF-8: {e}") from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotLoadError(path, f"invalid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise SnapshotLoadError(path, "expected a JSON object at top level")

        try:
            doc = VulnerabilityResultsInfo.model_validate(raw)
        except ValidationError as e:
            raise SnapshotLoadError(path, e) from e

        return to_domain(doc)
