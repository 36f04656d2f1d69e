from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

"""Staged upload files.

An upload is copied to ``<upload_dir>/<request-id>-<name>`` so concurrent
requests never share a path, and the file is removed on every exit path.
"""

__all__ = [
    "UploadTooLargeError",
    "safe_filename",
    "staged_upload",
]

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


class UploadTooLargeError(Exception):
    """Raised when the uploaded stream exceeds the configured byte limit."""


def safe_filename(name: str | None) -> str:
    """Basename with unsafe characters replaced (``../a b.xlsx`` -> ``a_b.xlsx``)."""
    base = Path(name or "").name
    cleaned = _UNSAFE.sub("_", base).strip("._")
    return cleaned or "upload"


@contextmanager
def staged_upload(
    stream: BinaryIO,
    filename: str | None,
    upload_dir: Path | str,
    *,
    max_bytes: int | None = None,
) -> Iterator[Path]:
    """Copy ``stream`` to a unique staged path and yield it.

    Raises:
        UploadTooLargeError: more than ``max_bytes`` were read
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    staged = directory / f"{uuid4().hex}-{safe_filename(filename)}"
    try:
        written = 0
        with staged.open("wb") as dst:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise UploadTooLargeError(f"upload exceeds {max_bytes} bytes")
                dst.write(chunk)
        logger.debug("staged upload %s (%d bytes)", staged.name, written)
        yield staged
    finally:
        staged.unlink(missing_ok=True)
