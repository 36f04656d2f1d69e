from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import pandas as pd

from ..models.fields import OUTPUT_ORDER
from ..models.record import OutputRow

"""Result table writers (JSON array of arrays, or CSV with a header line)."""

__all__ = [
    "OUTPUT_FORMATS",
    "rows_to_frame",
    "write_rows",
]

OUTPUT_FORMATS = ("json", "csv")
COLUMNS = [key.value for key in OUTPUT_ORDER]


def rows_to_frame(rows: Sequence[OutputRow]) -> pd.DataFrame:
    return pd.DataFrame([list(r) for r in rows], columns=COLUMNS, dtype=str)


def write_rows(rows: Sequence[OutputRow], fmt: str, target: Path | TextIO) -> None:
    """Write ``rows`` to a path or an open text stream."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"unknown output format: {fmt}")
    if fmt == "csv":
        rows_to_frame(rows).to_csv(target, index=False)
        return
    text = json.dumps([list(r) for r in rows], ensure_ascii=False)
    if isinstance(target, Path):
        target.write_text(text + "\n", encoding="utf-8")
    else:
        target.write(text + "\n")
