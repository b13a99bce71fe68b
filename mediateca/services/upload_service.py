"""Orquestación de uploads: carpeta destino, blob y registro de metadatos."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from mediateca.exceptions import NotFoundError, StorageError, ValidationError
from mediateca.extensions import db
from mediateca.metrics import upload_duration_seconds, upload_files_total
from mediateca.models.file import FileRecord
from mediateca.models.folder import Folder
from mediateca.services import folder_service, provisioner
from mediateca.storage import get_storage
from mediateca.utils.files import clean_filename
from mediateca.utils.validators import coerce_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelatedTarget:
    """Entity field a file is attached to (``refId`` / ``ref`` / ``field``)."""

    ref_id: str
    ref_type: str
    field: str

    @classmethod
    def from_form(cls, ref_id, ref_type, field) -> "RelatedTarget | None":
        values = [str(v).strip() if v is not None else "" for v in (ref_id, ref_type, field)]
        if not any(values):
            return None
        if not all(values):
            raise ValidationError("refId, ref and field must be provided together")
        return cls(*values)


def resolve_target_folder(folder_id: int | None = None) -> Folder:
    """Carpeta explícita (debe existir) o la carpeta por defecto."""

    if folder_id is not None:
        return folder_service.get_folder_or_404(folder_id)
    return provisioner.ensure_default_folder()


def _discard_blobs(storage, refs: Iterable[str]) -> None:
    """Best-effort blob cleanup; failures are logged, metadata is the source of truth."""

    for ref in refs:
        try:
            storage.delete(ref)
        except StorageError:
            logger.warning(
                "No se pudo borrar el blob %s",
                ref,
                exc_info=True,
                extra={"event": "blob_delete_failed"},
            )


def _build_record(name: str, stored, folder: Folder, related: RelatedTarget | None) -> FileRecord:
    record = FileRecord(
        name=name,
        mime=stored.mime,
        size=stored.size,
        sha256=stored.sha256,
        storage_ref=stored.ref,
        folder=folder,
        folder_path=folder.path,
    )
    if related is not None:
        record.ref_id = related.ref_id
        record.ref_type = related.ref_type
        record.field = related.field
    return record


def handle_uploads(
    blobs: Iterable,
    folder_id: int | None = None,
    related: RelatedTarget | None = None,
) -> list[FileRecord]:
    """Sube varios blobs al mismo destino, resuelto una sola vez.

    All blobs are stored first and their metadata committed in a single
    transaction: either every file of the request is recorded or none is,
    and blobs already written are removed again. Attaching to an entity
    (``related``) never changes the folder choice.
    """

    blobs = list(blobs)
    if not blobs:
        raise ValidationError("no files were uploaded")
    folder = resolve_target_folder(folder_id)
    storage = get_storage()

    stored = []
    start = time.perf_counter()
    try:
        for blob in blobs:
            name = clean_filename(getattr(blob, "filename", None))
            try:
                stored.append((name, storage.store(blob)))
            except StorageError:
                upload_files_total.labels("storage_error").inc()
                logger.error("Fallo de storage al subir %r", name, extra={"event": "upload_storage_error"})
                raise

        records = [_build_record(name, result, folder, related) for name, result in stored]
        db.session.add_all(records)
        db.session.commit()
    except (StorageError, SQLAlchemyError):
        db.session.rollback()
        _discard_blobs(storage, [result.ref for _, result in stored])
        if stored:
            upload_files_total.labels("discarded").inc(len(stored))
        raise
    finally:
        upload_duration_seconds.observe(time.perf_counter() - start)

    upload_files_total.labels("ok").inc(len(records))
    for record in records:
        logger.info(
            "Archivo %r guardado en %s",
            record.name,
            record.folder_path,
            extra={"event": "upload_stored", "file_id": record.id, "folder_id": folder.id},
        )
    return records


def handle_upload(
    blob,
    folder_id: int | None = None,
    related: RelatedTarget | None = None,
) -> FileRecord:
    return handle_uploads([blob], folder_id=folder_id, related=related)[0]


def get_file(file_id: int) -> FileRecord:
    record = db.session.get(FileRecord, file_id)
    if record is None:
        raise NotFoundError(f"file {file_id} not found")
    return record


def list_files(folder_id: int | None = None) -> list[FileRecord]:
    query = FileRecord.query
    if folder_id is not None:
        query = query.filter(FileRecord.folder_id == folder_id)
    return query.order_by(FileRecord.id.asc()).all()


def delete_files(file_ids: Iterable[object]) -> int:
    """Borra metadatos y blobs; ids inexistentes se ignoran."""

    ids = coerce_ids(file_ids, "fileIds")
    if not ids:
        return 0
    records = FileRecord.query.filter(FileRecord.id.in_(ids)).all()
    refs = [record.storage_ref for record in records]
    for record in records:
        db.session.delete(record)
    db.session.commit()

    _discard_blobs(get_storage(), refs)
    if refs:
        logger.info("Archivos eliminados: %s", len(refs), extra={"event": "files_deleted", "count": len(refs)})
    return len(refs)
