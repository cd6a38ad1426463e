# Shared pytest fixtures: fake collaborators and sample workbooks
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from download_sorter.logging.init import reset_logging
from download_sorter.models.cell import Cell, Formula, Grid, Literal


def link(url: str, label: str, display: Any = None) -> Formula:
    return Formula(text=f'=HYPERLINK("{url}","{label}")', display=display if display is not None else label)


class FakeDataSource:
    """In-memory TabularDataSource. Optionally fails after ``fail_after_cells`` writes."""

    def __init__(self, grid: Grid, label: str = "Apps", fail_after_cells: int | None = None) -> None:
        self.grid: Grid = [list(row) for row in grid]
        self.label = label
        self.fail_after_cells = fail_after_cells
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.cells_written = 0

    def read_grid(self) -> Grid:
        self.calls.append(("read_grid", ()))
        return [list(row) for row in self.grid]

    def write_region(self, top_row: int, left_col: int, rows: list[list[Cell]]) -> None:
        self.calls.append(("write_region", (top_row, left_col, len(rows))))
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if self.fail_after_cells is not None and self.cells_written >= self.fail_after_cells:
                    raise RuntimeError("host rejected write")
                while len(self.grid) <= top_row + r:
                    self.grid.append([Literal(None)] * len(row))
                self.grid[top_row + r][left_col + c] = cell
                self.cells_written += 1

    def clear_region(self, top_row: int, left_col: int, rows: int, cols: int) -> None:
        self.calls.append(("clear_region", (top_row, left_col, rows, cols)))
        for r in range(top_row, top_row + rows):
            for c in range(left_col, left_col + cols):
                self.grid[r][c] = Literal(None)

    @property
    def writes(self) -> list[tuple[str, tuple[Any, ...]]]:
        return [c for c in self.calls if c[0] in ("write_region", "clear_region")]


class InMemoryPropertyStore:
    def __init__(self, fail_on_set: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.fail_on_set = fail_on_set

    def set_property(self, key: str, value: str) -> None:
        if self.fail_on_set:
            raise OSError("quota exceeded")
        self.data[key] = value

    def get_property(self, key: str) -> str | None:
        return self.data.get(key)


class RecordingUI:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.alerts: list[tuple[str, str]] = []
        self.confirms: list[tuple[str, str]] = []
        self.panels: list[str] = []

    def alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))

    def confirm(self, title: str, message: str) -> bool:
        self.confirms.append((title, message))
        return self.answer

    def show_info_panel(self, html: str) -> None:
        self.panels.append(html)


def make_grid(downloads: list[Any], *, header: str = "Downloads Last Month") -> Grid:
    """Header + one row per downloads value: [App link, downloads, rank literal]."""
    grid: Grid = [[Literal("App"), Literal(header), Literal("Rank")]]
    for i, d in enumerate(downloads):
        grid.append([link(f"https://apps.example/{i}", f"App {i}"), Literal(d), Literal(i + 1)])
    return grid


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("DOWNLOAD_SORTER_WORKBOOK", raising=False)
    monkeypatch.delenv("DOWNLOAD_SORTER_SHEET", raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def fake_source_factory():
    return FakeDataSource


@pytest.fixture()
def properties() -> InMemoryPropertyStore:
    return InMemoryPropertyStore()


@pytest.fixture()
def failing_properties() -> InMemoryPropertyStore:
    return InMemoryPropertyStore(fail_on_set=True)


@pytest.fixture()
def ui() -> RecordingUI:
    return RecordingUI(answer=True)


@pytest.fixture()
def declining_ui() -> RecordingUI:
    return RecordingUI(answer=False)


@pytest.fixture()
def grid_factory():
    return make_grid


SAMPLE_ROWS: list[tuple[str, str, Any]] = [
    ("Pixel Garden", "20K", 4.1),
    ("Cloud Notes", "2M", 4.7),
    ("Tiny Timer", "< 5k", 3.9),
    ("Photo Booth", "900K", 4.4),
    ("Old Reader", "N/A", None),
    ("Budget Buddy", "1.5M", 4.6),
]


@pytest.fixture()
def sample_workbook(temp_workdir: Path) -> Path:
    """Workbook with a HYPERLINK formula column, a SUM formula column and literals."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Apps"
    ws.append(["App", "Downloads Last Month", "Rating", "Rating x2"])
    for i, (name, downloads, rating) in enumerate(SAMPLE_ROWS, start=2):
        ws.cell(row=i, column=1, value=f'=HYPERLINK("https://apps.example/{i}","{name}")')
        ws.cell(row=i, column=2, value=downloads)
        ws.cell(row=i, column=3, value=rating)
        ws.cell(row=i, column=4, value=f"=C{i}*2")
    other = wb.create_sheet("Notes")
    other.append(["Nothing to sort here"])
    path = temp_workdir / "data" / "apps.xlsx"
    wb.save(path)
    return path
