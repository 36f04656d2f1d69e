from __future__ import annotations

import math
import re
from collections.abc import Sequence
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation

from ..models.fields import FieldKey
from ..models.record import OutputRow, Record
from ..models.sheet_result import ColumnMap

"""Data row normalization.

Reads mapped cells from one raw row, cleans them per field and promotes the
row to an OutputRow only when the plate survives normalization.

Field rules:
- plate: trim, comma -> dot, remove all internal whitespace
- balance: trim, comma -> dot, parse and round to an integer; unparsable text
  is kept after the substitution (the row is never rejected for it)
- everything else: trim only
"""

__all__ = [
    "ROUNDING_MODES",
    "RowNormalizer",
    "normalize_balance",
    "normalize_plate",
]

# half_up in decimal terms rounds ties away from zero (2.5 -> 3, -2.5 -> -3)
ROUNDING_MODES: dict[str, str] = {
    "half_up": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def normalize_plate(text: str) -> str:
    return "".join(text.strip().replace(",", ".").split())


def normalize_balance(text: str, rounding: str = "half_up") -> str:
    """Round a balance to a whole number, e.g. ``"1500,6"`` -> ``"1501"``.

    Text that does not parse as a finite double is returned trimmed with its
    commas already turned into dots (``"1.234,56"`` -> ``"1.234.56"``).
    """
    candidate = text.strip().replace(",", ".")
    if not _NUMBER_RE.match(candidate):
        return candidate
    try:
        value = Decimal(candidate)
        # outside double range counts as unparsable
        if math.isinf(float(value)):
            return candidate
        rounded = value.to_integral_value(rounding=ROUNDING_MODES[rounding])
    except (InvalidOperation, KeyError):
        return candidate
    return format(rounded, "f")


class RowNormalizer:
    """Turns raw rows into OutputRows for one resolved ColumnMap."""

    def __init__(self, column_map: ColumnMap, *, rounding: str = "half_up") -> None:
        if rounding not in ROUNDING_MODES:
            raise ValueError(f"unknown rounding mode: {rounding}")
        self.column_map = column_map
        self.rounding = rounding

    def build_record(self, row: Sequence[str]) -> Record:
        record = Record()
        for key, col_idx in self.column_map.items():
            # rows may be shorter than the header row
            raw = row[col_idx] if col_idx < len(row) else ""
            if not raw:
                continue
            if key is FieldKey.PLATE:
                value = normalize_plate(raw)
            elif key is FieldKey.BALANCE:
                value = normalize_balance(raw, self.rounding)
            else:
                value = raw.strip()
            record.set(key, value)
        return record

    def normalize(self, row: Sequence[str]) -> OutputRow | None:
        """Return the OutputRow, or None when the plate is absent/empty."""
        record = self.build_record(row)
        if not record.has(FieldKey.PLATE):
            return None
        return record.to_output_row()
