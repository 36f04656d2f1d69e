#!/usr/bin/env python3
"""Synthetic vehicle-collections workbooks for performance runs.

Each sheet looks like a real leasing export:
- a few title / blank rows (header lands somewhere inside the scan window)
- a header row using a random alias per field, columns shuffled
- data rows with spaced plates, comma decimals and the odd empty plate
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADER_ALIASES: dict[str, list[str]] = {
    "plate": ["No Polisi", "Nopol", "License Plate", "Plate"],
    "vehicleType": ["Jenis Kendaraan", "Merk", "Unit", "Type"],
    "financier": ["Leasing", "Finance", "Lesing"],
    "daysOverdue": ["OVD", "Overdue", "Hari"],
    "balance": ["Saldo", "Balance", "Amount"],
    "branch": ["Cabang", "Branch", "Office"],
    "remarks": ["Keterangan", "Catatan", "Ket"],
    "chassisNumber": ["No Rangka", "Noka", "Chassis"],
    "engineNumber": ["No Mesin", "Nosin", "Engine"],
}

UNITS = ["Avanza", "Xenia", "Brio", "Jazz", "Ertiga", "NMAX", "Beat", "Vario"]
FINANCIERS = ["Adira", "BCA Finance", "Mandiri Tunas", "FIF", "WOM"]
BRANCHES = ["Jakarta", "Bandung", "Surabaya", "Medan", "Makassar"]
REGIONS = ["B", "D", "F", "L", "BK", "DD", "AB"]


def _plate(rng: np.random.Generator) -> str:
    suffix = "".join(rng.choice(list("ABCDEFGHJKLMNPRSTUVWXYZ"), size=rng.integers(1, 4)))
    return f"{rng.choice(REGIONS)} {rng.integers(1, 9999)} {suffix}"


def generate_sheet(rows: int, rng: np.random.Generator, empty_plate_ratio: float = 0.02) -> list[list[object]]:
    """Build one sheet (title rows + header + data) as a list of rows."""
    fields = list(HEADER_ALIASES)
    rng.shuffle(fields)
    header = [str(rng.choice(HEADER_ALIASES[f])) for f in fields]

    out: list[list[object]] = [["LAPORAN TUNGGAKAN"] + [""] * (len(fields) - 1)]
    out.extend([[""] * len(fields)] * int(rng.integers(0, 6)))
    out.append(header)

    for i in range(rows):
        values = {
            "plate": "" if rng.random() < empty_plate_ratio else _plate(rng),
            "vehicleType": str(rng.choice(UNITS)),
            "financier": str(rng.choice(FINANCIERS)),
            "daysOverdue": int(rng.integers(0, 180)),
            # alternate comma decimals (text) and native numbers
            "balance": f"{rng.uniform(1e5, 5e7):.2f}".replace(".", ",") if i % 2 else round(float(rng.uniform(1e5, 5e7)), 2),
            "branch": str(rng.choice(BRANCHES)),
            "remarks": "" if i % 7 else "janji bayar",
            "chassisNumber": f"MH{rng.integers(10**9, 10**10)}",
            "engineNumber": f"E{rng.integers(10**6, 10**7)}",
        }
        out.append([values[f] for f in fields])
    return out


def create_workbook(output_path: Path, rows: int, sheets: list[str], seed: int = 42) -> None:
    rng = np.random.default_rng(seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for sheet_name in sheets:
            pd.DataFrame(generate_sheet(rows, rng)).to_excel(
                writer, sheet_name=sheet_name, header=False, index=False,
            )
    print(f"Created workbook: {output_path}")
    print(f"  Sheets: {len(sheets)} ({', '.join(sheets)})")
    print(f"  Data rows per sheet: {rows}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic vehicle-collections workbooks")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=50000, help="Data rows per sheet (default: 50000)")
    parser.add_argument("--sheets", nargs="+", default=["Sheet1"], help="Sheet names")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() != ".xlsx":
        print("Error: output must be an .xlsx file", file=sys.stderr)
        return 1
    try:
        create_workbook(args.output, args.rows, args.sheets, args.seed)
    except Exception as e:
        print(f"Error creating workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
