from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook, load_workbook

from download_sorter.cli import main as cli_main

"""End-to-end: sort and restore a real .xlsx through the CLI."""


def _column(path: Path, letter: str, sheet: str = "Apps") -> list[object]:
    ws = load_workbook(path)[sheet]
    return [ws[f"{letter}{r}"].value for r in range(1, ws.max_row + 1)]


def test_sort_descending_moves_whole_rows(sample_workbook: Path, capsys):
    code = cli_main(["--workbook", str(sample_workbook), "sort"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Success! Data sorted by downloads (highest to lowest)." in out
    assert "SUMMARY operation=sort status=ok rows=6 direction=desc error=-" in out

    assert _column(sample_workbook, "B") == [
        "Downloads Last Month", "2M", "1.5M", "900K", "20K", "< 5k", "N/A",
    ]
    # the hyperlink formula travels with its row
    assert _column(sample_workbook, "A")[1] == '=HYPERLINK("https://apps.example/3","Cloud Notes")'
    assert _column(sample_workbook, "C")[1:] == [4.7, 4.6, 4.4, 4.1, 3.9, None]
    # formula text is moved verbatim, references are not rewritten
    assert _column(sample_workbook, "D")[1] == "=C3*2"


def test_sort_ascending(sample_workbook: Path, capsys):
    assert cli_main(["--workbook", str(sample_workbook), "sort", "--asc"]) == 0
    assert _column(sample_workbook, "B")[1:] == ["N/A", "< 5k", "20K", "900K", "1.5M", "2M"]
    assert "direction=asc" in capsys.readouterr().out


def test_sort_then_restore_returns_original_workbook(sample_workbook: Path, capsys):
    before = {col: _column(sample_workbook, col) for col in "ABCD"}

    assert cli_main(["--workbook", str(sample_workbook), "sort"]) == 0
    assert Path(str(sample_workbook) + ".properties.json").exists()
    assert cli_main(["--workbook", str(sample_workbook), "restore", "--yes"]) == 0

    after = {col: _column(sample_workbook, col) for col in "ABCD"}
    assert after == before
    out = capsys.readouterr().out
    assert "INFO Restored! Data restored to original order successfully!" in out
    assert "SUMMARY operation=restore status=ok rows=7 direction=- error=-" in out


def test_restore_after_two_sorts_returns_to_state_before_second(sample_workbook: Path):
    assert cli_main(["--workbook", str(sample_workbook), "sort", "--asc"]) == 0
    after_first = _column(sample_workbook, "B")
    assert cli_main(["--workbook", str(sample_workbook), "sort", "--desc"]) == 0
    assert cli_main(["--workbook", str(sample_workbook), "restore", "--yes"]) == 0
    assert _column(sample_workbook, "B") == after_first


def test_other_sheets_are_untouched(sample_workbook: Path):
    assert cli_main(["--workbook", str(sample_workbook), "sort"]) == 0
    assert _column(sample_workbook, "A", sheet="Notes") == ["Nothing to sort here"]


def test_workbook_and_sheet_from_environment(sample_workbook: Path, monkeypatch, capsys):
    monkeypatch.setenv("DOWNLOAD_SORTER_WORKBOOK", str(sample_workbook))
    monkeypatch.setenv("DOWNLOAD_SORTER_SHEET", "Notes")
    # the Notes sheet has a header row only
    assert cli_main(["sort"]) == 2
    assert "error=NoData" in capsys.readouterr().out


def test_config_file_supplies_workbook_and_tokens(temp_workdir: Path, sample_workbook: Path, capsys):
    (temp_workdir / "config" / "sorter.yml").write_text(
        "workbook: data/apps.xlsx\nkey_column_tokens: [rating]\n", encoding="utf-8"
    )
    assert cli_main(["sort"]) == 0
    # "Rating" comes before "Rating x2", so column C is the key
    assert _column(sample_workbook, "C")[1:] == [4.7, 4.6, 4.4, 4.1, 3.9, None]


def test_dotenv_file_is_loaded(temp_workdir: Path, sample_workbook: Path):
    (temp_workdir / ".env").write_text("DOWNLOAD_SORTER_WORKBOOK=data/apps.xlsx\n", encoding="utf-8")
    assert cli_main(["sort"]) == 0
    assert _column(sample_workbook, "B")[1] == "2M"


def test_inspect_previews_parsed_magnitudes(sample_workbook: Path, capsys):
    code = cli_main(["--workbook", str(sample_workbook), "inspect", "--limit", "3"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SHEET: Apps rows=6 cols=4 key_column=Downloads Last Month" in out
    assert "magnitude" in out
    assert "Cloud Notes" in out
    assert "Photo Booth" not in out
    # read-only: nothing was reordered
    assert _column(sample_workbook, "B")[1] == "20K"


def test_debug_flag_shows_state_transitions(sample_workbook: Path, capsys):
    assert cli_main(["--debug", "--workbook", str(sample_workbook), "sort"]) == 0
    out = capsys.readouterr().out
    assert "DEBUG sort: idle -> validating" in out
    assert "DEBUG sort: writing -> idle" in out


def test_literal_equals_text_survives_sort_and_restore(temp_workdir: Path):
    path = temp_workdir / "data" / "banner.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.title = "Apps"
    ws.append(["App", "Downloads Last Month"])
    ws.append(["x", "20K"])
    ws.append(["Cloud Notes", "2M"])
    # 値バインドは "=..." を数式にするので文字列型へ戻す
    ws["A2"].value = "=== featured ==="
    ws["A2"].data_type = "s"
    wb.save(path)

    assert cli_main(["--workbook", str(path), "sort"]) == 0
    sorted_cell = load_workbook(path)["Apps"]["A3"]
    assert (sorted_cell.value, sorted_cell.data_type) == ("=== featured ===", "s")

    assert cli_main(["--workbook", str(path), "restore", "--yes"]) == 0
    restored = load_workbook(path)["Apps"]
    assert (restored["A2"].value, restored["A2"].data_type) == ("=== featured ===", "s")
    assert _column(path, "B") == ["Downloads Last Month", "20K", "2M"]
