"""Almacenamiento físico de los blobs subidos.

El núcleo solo conoce el protocolo :class:`BlobStorage`; la implementación por
defecto escribe en disco bajo ``UPLOAD_DIR``.
"""

from __future__ import annotations

import hashlib
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from flask import Flask, current_app

from mediateca.exceptions import StorageError
from mediateca.utils.files import clean_filename, extension_of, guess_mime, iter_chunks

logger = logging.getLogger(__name__)

EXTENSION_KEY = "blob_storage"


@dataclass(frozen=True)
class StoredBlob:
    ref: str
    size: int
    sha256: str
    mime: str | None


class BlobStorage(Protocol):
    def store(self, blob) -> StoredBlob: ...

    def delete(self, ref: str) -> None: ...


class LocalBlobStorage:
    """Guarda cada blob como ``<uuid><ext>`` dentro de ``root``."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    def _path_for(self, ref: str) -> Path:
        if not ref or ref in {".", ".."} or os.path.basename(ref) != ref:
            raise StorageError(f"invalid storage reference: {ref!r}")
        return self.root / ref

    def store(self, blob) -> StoredBlob:
        filename = clean_filename(getattr(blob, "filename", None))
        ref = f"{uuid.uuid4().hex}{extension_of(filename)}"
        target = self.root / ref
        digest = hashlib.sha256()
        size = 0
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as handle:
                for chunk in iter_chunks(blob.stream):
                    digest.update(chunk)
                    size += len(chunk)
                    handle.write(chunk)
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise StorageError(f"could not store {filename!r}: {exc}") from exc

        mime = getattr(blob, "mimetype", None) or guess_mime(filename)
        logger.debug("Blob guardado en %s (%s bytes)", target, size)
        return StoredBlob(ref=ref, size=size, sha256=digest.hexdigest(), mime=mime)

    def delete(self, ref: str) -> None:
        try:
            self._path_for(ref).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"could not delete {ref!r}: {exc}") from exc


def ensure_dirs(app: Flask) -> None:
    for key in ("DATA_DIR", "UPLOAD_DIR"):
        Path(app.config[key]).mkdir(parents=True, exist_ok=True)


def init_storage(app: Flask, storage: BlobStorage | None = None) -> BlobStorage:
    ensure_dirs(app)
    storage = storage or LocalBlobStorage(app.config["UPLOAD_DIR"])
    app.extensions[EXTENSION_KEY] = storage
    app.logger.info("UPLOAD_DIR=%s", app.config["UPLOAD_DIR"])
    return storage


def get_storage() -> BlobStorage:
    return current_app.extensions[EXTENSION_KEY]
