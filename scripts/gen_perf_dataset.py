#!/usr/bin/env python3
"""Paired dataset generation for comparison performance testing.

Generates two synthetic Excel workbooks, A (original) and B (updated), with a
controlled share of modified, deleted and inserted rows so that the expected
comparison counts are known in advance.

Sheet layout:
- Row 1: Title row (only with --title; the header then sits on row 2)
- Next row: Header row with column names ("id" is the key column)
- Remaining rows: Data rows
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd


def generate_synthetic_data(rows: int, cols: int, seed: int = 42) -> pd.DataFrame:
    """Generate a DataFrame with an ``id`` key column and mixed value columns.

    Roughly 30% string, 50% numeric, 10% boolean columns, the rest dates.
    """
    rng = np.random.default_rng(seed)

    data: dict[str, list[Any]] = {"id": list(range(1, rows + 1))}

    string_cols = max(1, int(cols * 0.3))
    numeric_cols = max(1, int(cols * 0.5))
    bool_cols = max(1, int(cols * 0.1))
    date_cols = max(0, cols - 1 - string_cols - numeric_cols - bool_cols)

    categories = ["Electronics", "Clothing", "Books", "Food", "Sports", "Home"]
    for i in range(string_cols):
        if i == 0:
            data["name"] = [f"Item_{rng.integers(1000, 9999)}_{chr(65 + (j % 26))}" for j in range(rows)]
        elif i == 1:
            data["category"] = rng.choice(categories, rows).tolist()
        else:
            data[f"description_{i}"] = [f"Description for item {j + 1}" for j in range(rows)]

    for i in range(numeric_cols):
        if i % 2 == 0:
            data[f"amount_{i}"] = np.round(rng.uniform(0.01, 9999.99, rows), 2).tolist()
        else:
            data[f"quantity_{i}"] = rng.integers(1, 1000, rows).tolist()

    for i in range(bool_cols):
        data["active" if i == 0 else f"flag_{i}"] = rng.choice([True, False], rows).tolist()

    date_range = pd.date_range("2023-01-01", "2024-12-31", periods=100)
    for i in range(date_cols):
        picked = pd.DatetimeIndex(rng.choice(date_range.to_numpy(), rows))
        data["created_date" if i == 0 else f"date_{i}"] = list(picked.to_pydatetime())

    return pd.DataFrame(data)


def derive_updated(
    df: pd.DataFrame,
    modify_rate: float,
    delete_rate: float,
    insert_rate: float,
    seed: int = 43,
) -> tuple[pd.DataFrame, dict[str, int]]:
    """Derive workbook B from A's frame.

    Returns the new frame and the expected counts (new / deleted / modified).
    Modified rows get one changed amount column, so each counts once.
    """
    rng = np.random.default_rng(seed)
    rows = len(df)
    order = rng.permutation(rows)
    n_delete = int(rows * delete_rate)
    n_modify = int(rows * modify_rate)
    deleted = order[:n_delete]
    modified = order[n_delete:n_delete + n_modify]

    updated = df.copy()
    value_col = next(c for c in df.columns if c.startswith("amount_"))
    updated.loc[modified, value_col] = updated.loc[modified, value_col] + 1
    updated = updated.drop(index=deleted)

    n_insert = int(rows * insert_rate)
    if n_insert:
        extra = generate_synthetic_data(n_insert, len(df.columns), seed=seed + 1)
        extra = extra.reindex(columns=df.columns)
        extra["id"] = range(rows + 1, rows + 1 + n_insert)
        updated = pd.concat([updated, extra], ignore_index=True)

    expected = {"new": n_insert, "deleted": n_delete, "modified": n_modify}
    return updated.reset_index(drop=True), expected


def _write_sheets(path: Path, frames: dict[str, pd.DataFrame], title: str | None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, df in frames.items():
            sheet_data: list[list[Any]] = []
            if title:
                sheet_data.append([title] + [""] * (len(df.columns) - 1))
            sheet_data.append(df.columns.tolist())
            sheet_data.extend(df.to_numpy(dtype=object).tolist())
            pd.DataFrame(sheet_data).to_excel(writer, sheet_name=sheet_name, header=False, index=False)


def create_workbook_pair(
    output_dir: Path,
    rows: int,
    cols: int,
    sheets: list[str] | None = None,
    title: str | None = None,
    seed: int = 42,
    modify_rate: float = 0.05,
    delete_rate: float = 0.01,
    insert_rate: float = 0.01,
) -> tuple[Path, Path, dict[str, int]]:
    """Write ``original.xlsx`` and ``updated.xlsx``; returns both paths and the expected totals."""
    if sheets is None:
        sheets = ["Sheet1"]

    frames_a: dict[str, pd.DataFrame] = {}
    frames_b: dict[str, pd.DataFrame] = {}
    expected: dict[str, int] = {"new": 0, "deleted": 0, "modified": 0}
    for offset, sheet_name in enumerate(sheets):
        df = generate_synthetic_data(rows, cols, seed + offset)
        updated, counts = derive_updated(df, modify_rate, delete_rate, insert_rate, seed + 100 + offset)
        frames_a[sheet_name] = df
        frames_b[sheet_name] = updated
        for k, v in counts.items():
            expected[k] += v

    path_a = output_dir / "original.xlsx"
    path_b = output_dir / "updated.xlsx"
    _write_sheets(path_a, frames_a, title)
    _write_sheets(path_b, frames_b, title)

    print(f"Created workbook pair in {output_dir}")
    print(f"  Sheets: {len(sheets)} ({', '.join(sheets)})")
    print(f"  Rows per sheet (A): {rows}, columns: {cols}")
    print(f"  Expected: new={expected['new']} deleted={expected['deleted']} modified={expected['modified']}")
    return path_a, path_b, expected


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a pair of synthetic Excel workbooks for comparison performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default 20k rows, 20 columns
  %(prog)s out/perf

  # Multi-sheet pair with 10%% modified rows
  %(prog)s out/perf --rows 10000 --sheets Customers Orders --modify-rate 0.1
        """,
    )
    parser.add_argument("output_dir", type=Path, help="Directory for original.xlsx / updated.xlsx")
    parser.add_argument("--rows", type=int, default=20_000, help="Data rows per sheet in A (default: 20,000)")
    parser.add_argument("--cols", type=int, default=20, help="Columns per sheet (default: 20)")
    parser.add_argument("--sheets", nargs="+", default=["Sheet1"], help="Sheet names (default: Sheet1)")
    parser.add_argument("--title", default=None, help="Optional title row above the header")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--modify-rate", type=float, default=0.05, help="Share of rows modified in B")
    parser.add_argument("--delete-rate", type=float, default=0.01, help="Share of rows removed from B")
    parser.add_argument("--insert-rate", type=float, default=0.01, help="Share of rows added to B")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.cols < 4:
        print("Error: --cols must be at least 4", file=sys.stderr)
        return 1
    for name in ("modify_rate", "delete_rate", "insert_rate"):
        if not 0 <= getattr(args, name) <= 1:
            print(f"Error: --{name.replace('_', '-')} must be between 0 and 1", file=sys.stderr)
            return 1
    if args.modify_rate + args.delete_rate > 1:
        print("Error: --modify-rate + --delete-rate must not exceed 1", file=sys.stderr)
        return 1

    try:
        create_workbook_pair(
            args.output_dir,
            args.rows,
            args.cols,
            args.sheets,
            args.title,
            args.seed,
            args.modify_rate,
            args.delete_rate,
            args.insert_rate,
        )
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
