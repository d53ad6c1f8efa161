"""Holder for the evaluation result set currently shown on the dashboard."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from utils.data_helpers import as_float

METRIC_FRAME_COLUMNS = ["metric", "version", "value"]


def _version_rows(metric: str, versions: Any) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    if not isinstance(versions, Mapping):
        return rows
    for version, payload in versions.items():
        value = payload.get("value") if isinstance(payload, Mapping) else payload
        rows.append({"metric": metric, "version": str(version), "value": as_float(value)})
    return rows


class EvaluationDataset:
    """Latest evaluation data, replaced wholesale on every successful fetch."""

    def __init__(self, data: Any = None) -> None:
        self.data: Any = data
        self.updated_at: datetime | None = None

    def replace(self, data: Any) -> None:
        self.data = data
        self.updated_at = datetime.now(timezone.utc)

    def metrics_count(self) -> int:
        """Number of distinct metrics in the current data."""
        if self.data is None:
            return 0
        metrics = self.data.get("metrics") if isinstance(self.data, Mapping) else None
        if isinstance(metrics, (Mapping, list)):
            return len(metrics)
        return 0

    def metrics_frame(self) -> pd.DataFrame:
        """Flatten top-level metrics into ``metric, version, value`` rows.

        Accepts ``{"metrics": {name: {"versions": {v: {"value": x}}}}}`` as
        well as the simpler ``{name: {v: x}}`` and ``{name: x}`` shapes.
        """
        metrics = self.data.get("metrics") if isinstance(self.data, Mapping) else None
        if not isinstance(metrics, Mapping):
            return pd.DataFrame(columns=METRIC_FRAME_COLUMNS)

        rows: list[dict[str, Any]] = []
        for name, payload in metrics.items():
            metric = str(name)
            if isinstance(payload, Mapping) and isinstance(payload.get("versions"), Mapping):
                rows.extend(_version_rows(metric, payload["versions"]))
            elif isinstance(payload, Mapping) and "value" in payload:
                rows.append({"metric": metric, "version": None, "value": as_float(payload.get("value"))})
            elif isinstance(payload, Mapping):
                rows.extend(_version_rows(metric, payload))
            else:
                rows.append({"metric": metric, "version": None, "value": as_float(payload)})

        return pd.DataFrame(rows, columns=METRIC_FRAME_COLUMNS)
