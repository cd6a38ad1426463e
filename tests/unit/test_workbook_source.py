from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.formula import ArrayFormula

from download_sorter.excel.workbook import WorkbookDataSource, WorkbookError
from download_sorter.models.cell import Formula, Literal, grid_shape
from download_sorter.models.outcome import SortDirection
from download_sorter.services.snapshot_store import SnapshotStore
from download_sorter.services.sort_controller import SortController


def test_opens_active_sheet_by_default(sample_workbook: Path):
    source = WorkbookDataSource(sample_workbook)
    assert source.label == "Apps"
    assert source.sheet_names == ["Apps", "Notes"]


def test_opens_named_sheet(sample_workbook: Path):
    assert WorkbookDataSource(sample_workbook, "Notes").label == "Notes"


def test_missing_sheet_is_workbook_error(sample_workbook: Path):
    with pytest.raises(WorkbookError) as e:
        WorkbookDataSource(sample_workbook, "Nope")
    assert "Nope" in str(e.value)


def test_missing_file_is_workbook_error(temp_workdir: Path):
    with pytest.raises(WorkbookError):
        WorkbookDataSource(temp_workdir / "data" / "missing.xlsx")


def test_non_workbook_file_is_workbook_error(temp_workdir: Path):
    bogus = temp_workdir / "data" / "bogus.xlsx"
    bogus.write_text("not a zip", encoding="utf-8")
    with pytest.raises(WorkbookError):
        WorkbookDataSource(bogus)


def test_read_grid_separates_formulas_and_literals(sample_workbook: Path):
    grid = WorkbookDataSource(sample_workbook).read_grid()
    assert grid_shape(grid) == (7, 4)
    assert grid[0] == [
        Literal("App"),
        Literal("Downloads Last Month"),
        Literal("Rating"),
        Literal("Rating x2"),
    ]
    first = grid[1]
    assert isinstance(first[0], Formula)
    assert first[0].text == '=HYPERLINK("https://apps.example/2","Pixel Garden")'
    # never calculated by a spreadsheet app, so no cached result
    assert first[0].display is None
    assert first[1] == Literal("20K")
    assert first[2] == Literal(4.1)
    assert first[3] == Formula("=C2*2", None)


def test_write_and_clear_touch_memory_until_save(sample_workbook: Path):
    source = WorkbookDataSource(sample_workbook)
    source.clear_region(1, 0, 1, 4)
    source.write_region(2, 1, [[Literal("9M")]])
    assert source.dirty
    grid = source.read_grid()
    assert all(c.content is None for c in grid[1])
    assert grid[2][1] == Literal("9M")

    on_disk = load_workbook(sample_workbook)["Apps"]
    assert on_disk["B3"].value == "2M"


def test_save_persists_formulas(sample_workbook: Path):
    source = WorkbookDataSource(sample_workbook)
    source.write_region(1, 0, [[Formula('=HYPERLINK("https://x","X")'), Literal("1K")]])
    source.save()
    assert not source.dirty

    ws = load_workbook(sample_workbook)["Apps"]
    assert ws["A2"].value == '=HYPERLINK("https://x","X")'
    assert ws["A2"].data_type == "f"
    assert ws["B2"].value == "1K"
    # untouched sheets survive
    assert load_workbook(sample_workbook)["Notes"]["A1"].value == "Nothing to sort here"


def test_save_to_other_path(sample_workbook: Path, temp_workdir: Path):
    target = temp_workdir / "data" / "copy.xlsx"
    assert WorkbookDataSource(sample_workbook).save(target) == target
    assert target.exists()


def test_literal_text_starting_with_equals_stays_literal(temp_workdir: Path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Apps"
    ws["A1"] = "Banner"
    ws["A2"] = "x"
    # 値バインドは "=..." を数式にするので文字列型へ戻す
    ws["A2"].value = "=== featured ==="
    ws["A2"].data_type = "s"
    path = temp_workdir / "data" / "banner.xlsx"
    wb.save(path)

    source = WorkbookDataSource(path)
    banner = source.read_grid()[1][0]
    assert banner == Literal("=== featured ===")

    source.write_region(2, 0, [[banner]])
    assert source.read_grid()[2][0] == Literal("=== featured ===")
    source.save()

    cell = load_workbook(path)["Apps"]["A3"]
    assert cell.value == "=== featured ==="
    assert cell.data_type == "s"


def test_read_after_write_uses_written_display_values(sample_workbook: Path):
    source = WorkbookDataSource(sample_workbook)
    source.write_region(1, 0, [[Formula("=X", 5), Literal("7K")]])
    grid = source.read_grid()
    assert grid[1][0] == Formula("=X", 5)
    assert grid[1][1] == Literal("7K")

    source.clear_region(1, 0, 1, 2)
    assert source.read_grid()[1][:2] == [Literal(None), Literal(None)]


def test_second_sort_on_same_source_uses_moved_formula_values(temp_workdir: Path, properties, ui):
    path = temp_workdir / "data" / "formula_keys.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.title = "Apps"
    ws.append(["App", "Downloads Last Month"])
    ws.append(["A", "=1000"])
    ws.append(["B", "=3000"])
    wb.save(path)

    source = WorkbookDataSource(path)
    # no spreadsheet app computed the cached values, so seed them in memory
    source.write_region(1, 1, [[Formula("=1000", 1000)], [Formula("=3000", 3000)]])

    snapshots = SnapshotStore(properties)
    assert SortController(source, snapshots, ui).sort(SortDirection.DESC).ok
    assert [row[0].content for row in source.read_grid()[1:]] == ["B", "A"]
    assert SortController(source, snapshots, ui).sort(SortDirection.ASC).ok
    assert [row[0].content for row in source.read_grid()[1:]] == ["A", "B"]


def test_array_formula_is_read_as_plain_formula_text(temp_workdir: Path):
    path = temp_workdir / "data" / "array.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.append(["Total", "Downloads Last Month"])
    ws["A2"] = ArrayFormula("A2:A2", "=SUM(B3:B4)")
    wb.save(path)

    cell = WorkbookDataSource(path).read_grid()[1][0]
    assert isinstance(cell, Formula)
    assert cell.text == "=SUM(B3:B4)"
