from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any

from .cell import Grid, Scalar, grid_from_arrays, grid_to_arrays

"""Snapshot model and its JSON wire format.

Wire format (see contracts/snapshot_schema.json):

    {"values": [[...]], "formulas": [[...]], "timestamp": "...Z", "sheetName": "..."}

Dates and times are tagged objects ({"$date": ...}, {"$datetime": ...},
{"$time": ...}) so that a restored grid compares equal to the saved one.
"""

__all__ = [
    "Snapshot",
]

_TAGS = ("$datetime", "$date", "$time")


def _encode_scalar(value: Scalar) -> Any:
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return {"$datetime": value.isoformat()}
    if isinstance(value, date):
        return {"$date": value.isoformat()}
    if isinstance(value, time):
        return {"$time": value.isoformat()}
    return value


def _decode_scalar(raw: Any) -> Scalar:
    if isinstance(raw, dict):
        if "$datetime" in raw:
            return datetime.fromisoformat(raw["$datetime"])
        if "$date" in raw:
            return date.fromisoformat(raw["$date"])
        if "$time" in raw:
            return time.fromisoformat(raw["$time"])
        raise ValueError(f"unknown tagged value: {sorted(raw)}; expected one of {_TAGS}")
    return raw


@dataclass(frozen=True)
class Snapshot:
    """Pre-sort copy of the full grid (header included).

    Attributes:
        grid: Full grid as it was before the sort
        timestamp: Creation instant (UTC)
        source_label: Origin of the data, e.g. the sheet name
    """
    grid: Grid
    timestamp: datetime
    source_label: str

    @staticmethod
    def create(grid: Grid, source_label: str) -> Snapshot:
        """Create a Snapshot stamped with the current UTC time."""
        return Snapshot(
            grid=[list(row) for row in grid],
            timestamp=datetime.now(UTC),
            source_label=source_label,
        )

    def to_dict(self) -> dict[str, Any]:
        values, formulas = grid_to_arrays(self.grid)
        return {
            "values": [[_encode_scalar(v) for v in row] for row in values],
            "formulas": formulas,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "sheetName": self.source_label,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Snapshot:
        values = [[_decode_scalar(v) for v in row] for row in data["values"]]
        grid = grid_from_arrays(values, data["formulas"])
        ts = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
        return Snapshot(grid=grid, timestamp=ts, source_label=data["sheetName"])
