"""FastAPI upload endpoint.

``POST /upload`` takes a multipart form with field ``excelFile`` and returns the
extracted rows as a JSON array of nine-string arrays.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from fastapi import FastAPI, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..excel.reader import WorkbookOpenError
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.workbook_result import WorkbookResult
from ..services.orchestrator import extract_file
from ..services.staging import UploadTooLargeError, staged_upload

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No valid data found in the file"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _extract_upload(
    stream: BinaryIO, filename: str, config: AppConfig, error_log: ErrorLogBuffer
) -> WorkbookResult:
    """Stage the upload and extract it (blocking; run in the thread pool)."""
    with staged_upload(
        stream,
        filename,
        config.server.upload_directory,
        max_bytes=config.server.max_upload_bytes,
    ) as staged:
        return extract_file(staged, config.extraction, error_log=error_log, file_name=filename)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create the upload application bound to ``config``."""
    config = config or AppConfig()
    app = FastAPI(title="Vehicle Collections Extractor", version="0.1.0")
    app.state.config = config

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/upload")
    async def upload(excelFile: UploadFile | None = File(default=None)):  # noqa: N803 (form field name)
        if excelFile is None or not excelFile.filename:
            return _error(400, "No file uploaded")

        ext = Path(excelFile.filename).suffix.lower()
        if ext not in config.extraction.allowed_extensions:
            return _error(400, f"Unsupported file type: {ext or '<none>'}")

        error_log = ErrorLogBuffer(config.logs_directory)
        try:
            result = await run_in_threadpool(
                _extract_upload, excelFile.file, excelFile.filename, config, error_log,
            )
        except UploadTooLargeError as e:
            return _error(413, str(e))
        except WorkbookOpenError as e:
            logger.error(f"upload {excelFile.filename}: {e}")
            return _error(500, str(e))
        finally:
            await excelFile.close()
            error_log.flush()

        rows = result.rows
        logger.info(f"upload {excelFile.filename}: sheets={len(result.sheets)} rows={len(rows)}")
        if not rows:
            return _error(400, NO_DATA_MESSAGE)
        return JSONResponse(content=[list(r) for r in rows])

    return app
