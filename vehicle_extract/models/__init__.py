"""Domain models for the vehicle-collections extractor.

Field dictionary, per-row records and sheet/workbook/batch result types.
"""

from .config_models import AppConfig, ExtractionConfig, ServerConfig
from .fields import FIELD_DICTIONARY, OUTPUT_ORDER, FieldKey, FieldSpec
from .record import OutputRow, Record
from .sheet_result import ColumnMap, HeaderMatch, SheetResult, SheetStatus
from .workbook_result import FileStatus, WorkbookResult

__all__ = [
    # Configuration models
    "AppConfig",
    "ExtractionConfig",
    "ServerConfig",
    # Field dictionary
    "FIELD_DICTIONARY",
    "OUTPUT_ORDER",
    "FieldKey",
    "FieldSpec",
    # Extraction models
    "ColumnMap",
    "HeaderMatch",
    "OutputRow",
    "Record",
    "SheetResult",
    "SheetStatus",
    "FileStatus",
    "WorkbookResult",
]
