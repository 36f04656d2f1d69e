from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the vehicle-collections extractor.

Defaults: a 10-row header window, sheets under 5 rows skipped, rounding half
away from zero, uploads capped at 10 MiB.
"""

DEFAULT_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xlsm", ".csv")


@dataclass(frozen=True)
class ExtractionConfig:
    """Tunables of the header resolver / row normalizer / drivers."""
    header_scan_rows: int = 10  # header window
    min_sheet_rows: int = 5  # smaller sheets are skipped outright
    min_header_matches: int = 3  # distinct keys accepted without the required field
    balance_rounding: str = "half_up"  # half_up | half_even
    reader_mode: str = "streaming"  # streaming | materialized
    allowed_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


@dataclass(frozen=True)
class ServerConfig:
    """HTTP upload endpoint settings."""
    host: str = "0.0.0.0"
    port: int = 3020
    upload_directory: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logs_directory: str = "logs"
