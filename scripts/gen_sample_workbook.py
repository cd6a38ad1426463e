#!/usr/bin/env python3
"""Sample workbook generation script.

Generates synthetic app listings in the layout download-sorter expects:
- Row 1: Header row (App, Downloads Last Month, Rating, Store)
- Row 2+: Data rows

The App column holds HYPERLINK formulas so that formula preservation can be
checked by eye after a sort/restore cycle. Download counts use the abbreviated
forms seen in store exports: "2M", "1.5M", "900K", "< 5k", "N/A" and raw numbers.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

STORES = ["Play", "App Store", "Galaxy", "Huawei"]
WORDS = ["Pixel", "Cloud", "Tiny", "Photo", "Budget", "Sleep", "Quick", "Daily", "Focus", "Smart"]
NOUNS = ["Garden", "Notes", "Timer", "Booth", "Buddy", "Tracker", "Scanner", "Planner", "Radio", "Chef"]


def format_downloads(count: float) -> str:
    """Render a download count the way store exports abbreviate it."""
    if count < 5_000:
        return "< 5k"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}".rstrip("0").rstrip(".") + "M"
    if count >= 10_000:
        return f"{int(count // 1_000)}K"
    return f"{int(count):,}"


def generate_apps(rows: int, seed: int = 42, na_ratio: float = 0.05) -> pd.DataFrame:
    """Generate synthetic app rows.

    Download counts are log-normally distributed so that every magnitude
    (hundreds through millions) shows up in a modest sample.

    Args:
        rows: Number of data rows to generate
        seed: Random seed for reproducible data
        na_ratio: Share of rows whose download count is "N/A"

    Returns:
        DataFrame with App, Downloads Last Month, Rating and Store columns
    """
    rng = np.random.default_rng(seed)

    names = [
        f"{WORDS[a]} {NOUNS[b]} {i + 1}"
        for i, (a, b) in enumerate(zip(rng.integers(0, len(WORDS), rows), rng.integers(0, len(NOUNS), rows)))
    ]
    links = [f'=HYPERLINK("https://apps.example/{i + 1}","{name}")' for i, name in enumerate(names)]

    counts = rng.lognormal(mean=10.5, sigma=2.2, size=rows)
    downloads = [format_downloads(c) for c in counts]
    for i in np.flatnonzero(rng.random(rows) < na_ratio):
        downloads[i] = "N/A"

    return pd.DataFrame(
        {
            "App": links,
            "Downloads Last Month": downloads,
            "Rating": np.round(rng.uniform(2.5, 5.0, rows), 1),
            "Store": rng.choice(STORES, rows),
        }
    )


def create_workbook(output_path: Path, rows: int, sheet: str = "Apps", seed: int = 42) -> None:
    """Write the generated rows to ``output_path`` (openpyxl engine)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_apps(rows, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet, index=False)

    print(f"Created workbook: {output_path}")
    print(f"  Sheet: {sheet}")
    print(f"  Rows: {rows:,} (+ 1 header row)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic app-downloads workbook for download-sorter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 100 rows into data/apps.xlsx
  %(prog)s data/apps.xlsx

  # Large sheet (shows the write progress bar on a terminal)
  %(prog)s data/large.xlsx --rows 5000 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=100, help="Number of data rows (default: 100)")
    parser.add_argument("--sheet", default="Apps", help="Sheet name (default: Apps)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    try:
        create_workbook(args.output, args.rows, args.sheet, args.seed)
    except OSError as e:
        print(f"Error writing workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
