from __future__ import annotations

from .fields import OUTPUT_ORDER, FieldKey

"""Record / OutputRow models.

A Record holds one optional normalized value per canonical key in a fixed
slot array, so an OutputRow built from it always has the same arity.
"""

__all__ = [
    "OutputRow",
    "Record",
]

OutputRow = tuple[str, ...]

_SLOT_INDEX: dict[FieldKey, int] = {key: i for i, key in enumerate(OUTPUT_ORDER)}


class Record:
    """Transient per-row value holder (slot = None means absent)."""

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: list[str | None] = [None] * len(OUTPUT_ORDER)

    def set(self, key: FieldKey, value: str) -> None:
        self._values[_SLOT_INDEX[key]] = value

    def get(self, key: FieldKey) -> str | None:
        return self._values[_SLOT_INDEX[key]]

    def has(self, key: FieldKey) -> bool:
        value = self._values[_SLOT_INDEX[key]]
        return value is not None and value != ""

    def to_output_row(self) -> OutputRow:
        """Values in canonical output order; absent fields become ''."""
        return tuple(v if v is not None else "" for v in self._values)

    def __repr__(self) -> str:  # pragma: no cover (debug aid)
        present = {k.value: self._values[i] for k, i in _SLOT_INDEX.items() if self._values[i] is not None}
        return f"Record({present})"
