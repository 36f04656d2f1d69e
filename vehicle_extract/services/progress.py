from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

- one tqdm bar over the input files, disabled when stdout is not a TTY so CI
  logs stay free of control sequences
- a plain per-sheet line inside each file
"""

__all__ = [
    "ProgressTracker",
    "SheetProgressIndicator",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress bar."""

    def __init__(self, total_files: int, *, description: str = "Extracting files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, success: bool = True) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class SheetProgressIndicator:
    """Per-sheet status lines within one file (no bar; sheets are fast)."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        self.current_sheet = 0
        self.enabled = is_tty_enabled()

    def start_sheet(self, sheet_name: str) -> None:
        self.current_sheet += 1
        if self.enabled:
            tqdm.write(f"  Sheet {self.current_sheet}: {sheet_name}", end="")

    def finish_sheet(self, success: bool = True, rows_processed: int = 0) -> None:
        if self.enabled:
            status = "ok" if success else "failed"
            tqdm.write(f" - {rows_processed} rows {status}")
