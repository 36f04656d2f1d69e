from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

"""Field dictionary for vehicle-collections extraction.

Canonical field keys, their header aliases and the canonical output order.
The dictionary is built once at import time and never mutated; every resolver
receives it by reference.
"""

__all__ = [
    "FieldKey",
    "FieldSpec",
    "FIELD_DICTIONARY",
    "OUTPUT_ORDER",
    "build_dictionary",
    "match_aliases",
    "normalize_header_cell",
    "required_field",
]


class FieldKey(Enum):
    """Canonical field keys. Values are the output column names."""
    PLATE = "plate"
    VEHICLE_TYPE = "vehicleType"
    FINANCIER = "financier"
    DAYS_OVERDUE = "daysOverdue"
    BALANCE = "balance"
    BRANCH = "branch"
    REMARKS = "remarks"
    CHASSIS_NUMBER = "chassisNumber"
    ENGINE_NUMBER = "engineNumber"


@dataclass(frozen=True)
class FieldSpec:
    """One dictionary entry: canonical key plus alias substrings."""
    key: FieldKey
    aliases: tuple[str, ...]  # lowercase, no whitespace, dictionary order
    required: bool = False

    @staticmethod
    def create(key: FieldKey, aliases: Iterable[str], required: bool = False) -> FieldSpec:
        """Build a FieldSpec, normalizing aliases and dropping repeats (order kept)."""
        cleaned: list[str] = []
        for alias in aliases:
            norm = normalize_header_cell(alias)
            if norm and norm not in cleaned:
                cleaned.append(norm)
        if not cleaned:
            raise ValueError(f"field '{key.value}' has no aliases")
        return FieldSpec(key=key, aliases=tuple(cleaned), required=required)


def normalize_header_cell(text: str) -> str:
    """Lowercase and remove all whitespace (``"No Polisi"`` -> ``"nopolisi"``)."""
    return "".join(str(text).split()).lower()


def build_dictionary(specs: Iterable[FieldSpec]) -> tuple[FieldSpec, ...]:
    """Freeze a dictionary, rejecting duplicate keys and multiple required fields."""
    entries = tuple(specs)
    seen: set[FieldKey] = set()
    for spec in entries:
        if spec.key in seen:
            raise ValueError(f"duplicate field key: {spec.key.value}")
        seen.add(spec.key)
    required = [s.key.value for s in entries if s.required]
    if len(required) > 1:
        raise ValueError(f"at most one required field allowed, got {required}")
    return entries


FIELD_DICTIONARY: tuple[FieldSpec, ...] = build_dictionary([
    FieldSpec.create(
        FieldKey.PLATE,
        ["licenseplate", "nopolisi", "nopol", "plate", "vehicleplate"],
        required=True,
    ),
    FieldSpec.create(
        FieldKey.VEHICLE_TYPE,
        ["unit", "assettype", "merk", "type", "jeniskendaraan", "mobil", "jenis", "typeunit", "vehicle"],
    ),
    FieldSpec.create(FieldKey.FINANCIER, ["lesing", "leasing", "lesng", "finance", "financing"]),
    FieldSpec.create(
        FieldKey.DAYS_OVERDUE,
        ["overdue", "ovd", "daysoverdue", "overdu", "hari", "keterlambatan", "dayslate"],
    ),
    FieldSpec.create(FieldKey.BALANCE, ["saldo", "credit", "balance", "amount", "remaining"]),
    FieldSpec.create(FieldKey.BRANCH, ["branchfullname", "cabang", "branch", "office", "location"]),
    FieldSpec.create(FieldKey.REMARKS, ["ket", "keterangan", "catatan", "cat"]),
    FieldSpec.create(
        FieldKey.CHASSIS_NUMBER,
        ["chasisno", "nomorrangka", "norangka", "no.rangka", "noka", "chassis", "frame"],
    ),
    FieldSpec.create(
        FieldKey.ENGINE_NUMBER,
        ["nomesin", "nomormesin", "no.mesin", "nosin", "engine", "engineno"],
    ),
])

# Output positions are fixed regardless of source column order
OUTPUT_ORDER: tuple[FieldKey, ...] = (
    FieldKey.PLATE,
    FieldKey.VEHICLE_TYPE,
    FieldKey.FINANCIER,
    FieldKey.DAYS_OVERDUE,
    FieldKey.BALANCE,
    FieldKey.BRANCH,
    FieldKey.REMARKS,
    FieldKey.CHASSIS_NUMBER,
    FieldKey.ENGINE_NUMBER,
)


def required_field(dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY) -> FieldSpec | None:
    for spec in dictionary:
        if spec.required:
            return spec
    return None


def match_aliases(cleaned: str, dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY) -> list[FieldKey]:
    """Return keys (dictionary order) having an alias contained in ``cleaned``.

    ``cleaned`` must already be normalized with :func:`normalize_header_cell`.
    Substring test, not equality: ``"nopolisikendaraan"`` matches ``plate``.
    """
    if not cleaned:
        return []
    return [spec.key for spec in dictionary if any(alias in cleaned for alias in spec.aliases)]
