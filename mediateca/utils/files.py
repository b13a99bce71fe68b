from __future__ import annotations

import mimetypes
import os
from typing import BinaryIO, Iterator

CHUNK_SIZE = 1024 * 1024


def iter_chunks(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        yield chunk


def guess_mime(filename: str) -> str | None:
    mime, _ = mimetypes.guess_type(filename)
    return mime


def clean_filename(filename: str | None) -> str:
    """Devuelve solo el nombre base (sin rutas) o ``"file"`` si viene vacío."""

    base = os.path.basename((filename or "").replace("\\", "/")).strip()
    return base or "file"


def extension_of(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()
