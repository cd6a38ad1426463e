"""Core services: parsing, permutation, snapshot persistence and the controllers."""

from .errors import (
    ColumnNotFoundError,
    NoBackupError,
    NoDataError,
    PersistenceFailure,
    SorterError,
    WriteFailure,
)
from .permutation import build_data_rows, find_key_column, reorder
from .restore_controller import RestoreController
from .snapshot_store import SnapshotStore
from .sort_controller import SortController
from .value_parser import parse_download_value

__all__ = [
    "ColumnNotFoundError",
    "NoBackupError",
    "NoDataError",
    "PersistenceFailure",
    "SorterError",
    "WriteFailure",
    "build_data_rows",
    "find_key_column",
    "reorder",
    "RestoreController",
    "SnapshotStore",
    "SortController",
    "parse_download_value",
]
