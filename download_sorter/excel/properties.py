from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

"""Per-workbook key-value property store.

Properties live in a JSON sidecar next to the workbook
(``apps.xlsx`` -> ``apps.xlsx.properties.json``) so a snapshot taken for one
workbook is never visible to another.
"""

__all__ = [
    "JsonFilePropertyStore",
    "sidecar_path",
]


def sidecar_path(workbook: Path, suffix: str = ".properties.json") -> Path:
    return workbook.with_name(workbook.name + suffix)


class JsonFilePropertyStore:
    """PropertyStore backed by a JSON object of string values."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise OSError(f"property file {self.path} is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise OSError(f"property file {self.path} must hold a JSON object")
        return data

    def get_property(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_property(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a temp file in the same directory, then swap it in
        fd, tmp = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
