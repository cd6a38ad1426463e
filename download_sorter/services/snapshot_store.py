from __future__ import annotations

import json
import logging
from importlib import resources
from typing import Any

import jsonschema
from jsonschema.exceptions import ValidationError

from ..models.cell import Grid
from ..models.snapshot import Snapshot
from .errors import PersistenceFailure
from .ports import PropertyStore

"""Single-slot snapshot store.

Every save overwrites the previous snapshot under one well-known key; there is
no history. Loaded payloads are validated against contracts/snapshot_schema.json.
"""

__all__ = [
    "DEFAULT_BACKUP_KEY",
    "SnapshotStore",
    "load_snapshot_schema",
]

DEFAULT_BACKUP_KEY = "ORIGINAL_DATA_BACKUP"

logger = logging.getLogger(__name__)

_schema_cache: dict[str, Any] | None = None


def load_snapshot_schema() -> dict[str, Any]:
    """Load the snapshot JSON schema shipped with the package."""
    global _schema_cache
    if _schema_cache is None:
        text = resources.files("download_sorter.contracts").joinpath("snapshot_schema.json").read_text(encoding="utf-8")
        _schema_cache = json.loads(text)
    return _schema_cache


class SnapshotStore:
    """Persist and retrieve the pre-sort grid through a PropertyStore."""

    def __init__(self, properties: PropertyStore, key: str = DEFAULT_BACKUP_KEY) -> None:
        self._properties = properties
        self.key = key

    def save(self, grid: Grid, source_label: str) -> Snapshot:
        """Serialize ``grid`` and overwrite the stored snapshot.

        Raises:
            PersistenceFailure: serialization or the property write failed
        """
        snapshot = Snapshot.create(grid, source_label)
        try:
            payload = snapshot.to_json()
            self._properties.set_property(self.key, payload)
        except (TypeError, ValueError, OSError) as e:
            raise PersistenceFailure(f"failed to save snapshot: {e}") from e
        logger.debug("snapshot saved key=%s rows=%d source=%s", self.key, len(grid), source_label)
        return snapshot

    def load(self) -> Snapshot | None:
        """Return the stored snapshot, or None if nothing was saved yet.

        Raises:
            PersistenceFailure: the property read failed or the payload is invalid
        """
        try:
            raw = self._properties.get_property(self.key)
        except OSError as e:
            raise PersistenceFailure(f"failed to read snapshot: {e}") from e
        if not raw:
            return None
        try:
            data = json.loads(raw)
            jsonschema.validate(data, load_snapshot_schema())
            return Snapshot.from_dict(data)
        except json.JSONDecodeError as e:
            raise PersistenceFailure(f"stored snapshot is not valid JSON: {e}") from e
        except ValidationError as e:
            raise PersistenceFailure(f"stored snapshot failed validation: {e.message}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"stored snapshot is malformed: {e}") from e
