from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum

from ..models.config_models import ExtractionConfig
from ..models.fields import FIELD_DICTIONARY, FieldSpec
from ..models.record import OutputRow
from ..models.sheet_result import HeaderMatch, SheetResult, SheetStatus
from .header_resolver import HeaderResolver
from .row_normalizer import RowNormalizer

"""Sheet extraction driver.

One SheetExtractor per sheet, fed rows in a single forward pass:

    SCANNING_HEADER -> HEADER_RESOLVED -> DONE

The header row itself is never emitted. When the header window is exhausted
the driver goes straight to DONE and the rest of the sheet is not read. The
minimum sheet size is checked when the sheet ends, so streamed sources work the
same way as fully loaded ones.
"""

__all__ = [
    "SheetExtractor",
    "SheetState",
    "extract_sheet",
]

logger = logging.getLogger(__name__)


class SheetState(Enum):
    SCANNING_HEADER = "scanning_header"
    HEADER_RESOLVED = "header_resolved"
    DONE = "done"


class SheetExtractor:
    """Per-sheet state machine. Never shared between sheets."""

    def __init__(
        self,
        sheet_name: str,
        settings: ExtractionConfig | None = None,
        dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY,
    ) -> None:
        self.sheet_name = sheet_name
        self.settings = settings or ExtractionConfig()
        self.state = SheetState.SCANNING_HEADER
        self._resolver = HeaderResolver(
            dictionary,
            scan_rows=self.settings.header_scan_rows,
            min_matches=self.settings.min_header_matches,
        )
        self._normalizer: RowNormalizer | None = None
        self._header: HeaderMatch | None = None
        self._rows: list[OutputRow] = []
        self._rows_read = 0
        self._rejected = 0

    @property
    def done(self) -> bool:
        return self.state is SheetState.DONE

    def feed(self, row: Sequence[str]) -> None:
        if self.state is SheetState.DONE:
            return
        row_index = self._rows_read
        self._rows_read += 1

        if self.state is SheetState.SCANNING_HEADER:
            match = self._resolver.step(row_index, row)
            if match is not None:
                self._header = match
                self._normalizer = RowNormalizer(match.column_map, rounding=self.settings.balance_rounding)
                self.state = SheetState.HEADER_RESOLVED
            elif not self._resolver.within_window(self._rows_read):
                self.state = SheetState.DONE
            return

        assert self._normalizer is not None
        out = self._normalizer.normalize(row)
        if out is None:
            self._rejected += 1
        else:
            self._rows.append(out)

    def finish(self) -> SheetResult:
        """Close the sheet and report its outcome."""
        self.state = SheetState.DONE
        window_exhausted = self._header is None and not self._resolver.within_window(self._rows_read)
        if self._rows_read < self.settings.min_sheet_rows and not window_exhausted:
            logger.debug("sheet '%s' skipped: %d rows", self.sheet_name, self._rows_read)
            return SheetResult(sheet_name=self.sheet_name, status=SheetStatus.TOO_SMALL, rows_read=self._rows_read)
        if self._header is None:
            logger.debug("sheet '%s' skipped: no header in first %d rows", self.sheet_name, self._resolver.scan_rows)
            return SheetResult(sheet_name=self.sheet_name, status=SheetStatus.NO_HEADER, rows_read=self._rows_read)
        return SheetResult(
            sheet_name=self.sheet_name,
            status=SheetStatus.EXTRACTED,
            rows=list(self._rows),
            header_row_index=self._header.row_index,
            column_map=self._header.column_map,
            rows_read=self._rows_read,
            rejected_rows=self._rejected,
        )


def extract_sheet(
    sheet_name: str,
    rows: Iterable[Sequence[str]],
    settings: ExtractionConfig | None = None,
    dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY,
) -> SheetResult:
    """Run one sheet's rows through a fresh SheetExtractor.

    Stops pulling rows as soon as the extractor is DONE.
    """
    extractor = SheetExtractor(sheet_name, settings, dictionary)
    for row in rows:
        extractor.feed(row)
        if extractor.done:
            break
    return extractor.finish()
