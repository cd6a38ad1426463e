"""Host adapters for .xlsx workbooks (openpyxl) and their sidecar properties."""

from .properties import JsonFilePropertyStore, sidecar_path
from .workbook import WorkbookDataSource, WorkbookError

__all__ = [
    "JsonFilePropertyStore",
    "WorkbookDataSource",
    "WorkbookError",
    "sidecar_path",
]
