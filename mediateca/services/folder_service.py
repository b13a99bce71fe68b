"""Repositorio de carpetas: única superficie que escribe en ``folders``."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from mediateca.exceptions import NotFoundError, UniquenessConflictError, ValidationError
from mediateca.extensions import db
from mediateca.metrics import folders_created_total, folders_registered, name_conflicts_total
from mediateca.models.file import ROOT_PATH, FileRecord
from mediateca.models.folder import ROOT_SCOPE, Folder, new_uid
from mediateca.services.paths import compute_path, rebase_path
from mediateca.utils.validators import clean_folder_name, coerce_ids

logger = logging.getLogger(__name__)

# Sentinelas: "cualquier padre" en list_folders, "sin cambio" en update_folder
ANY = object()
UNSET = object()


def _scope_of(parent_id: int | None) -> int:
    return parent_id or ROOT_SCOPE


def refresh_folder_gauge() -> None:
    folders_registered.set(db.session.query(Folder.id).count())


def record_created(folder: Folder, origin: str) -> None:
    """Metric, log and gauge for a folder whose creation is committed."""

    folders_created_total.labels(origin).inc()
    logger.info(
        "Carpeta creada %r en %s",
        folder.name,
        folder.path,
        extra={"event": "folder_created", "folder_id": folder.id, "folder_uid": folder.uid},
    )
    refresh_folder_gauge()


def _conflict(name: str, parent_id: int | None, exc: Exception | None = None):
    name_conflicts_total.inc()
    logger.info(
        "Nombre de carpeta ocupado: %r (parent=%s)",
        name,
        parent_id,
        extra={"event": "folder_name_conflict", "folder_name": name},
    )
    error = UniquenessConflictError(name, parent_id)
    if exc is not None:
        error.__cause__ = exc
    return error


def get_folder(folder_id: int) -> Folder | None:
    return db.session.get(Folder, folder_id)


def get_folder_or_404(folder_id: int) -> Folder:
    folder = get_folder(folder_id)
    if folder is None:
        raise NotFoundError(f"folder {folder_id} not found")
    return folder


def get_folder_by_uid(uid: str) -> Folder | None:
    return Folder.query.filter_by(uid=uid).first()


def find_by_name_and_parent(name: str, parent_id: int | None = None) -> Folder | None:
    return Folder.query.filter_by(parent_scope=_scope_of(parent_id), name=name).first()


def list_folders(parent=ANY):
    """Query de carpetas: todas, las raíz (``parent=None``) o los hijos de ``parent``."""

    query = Folder.query
    if parent is not ANY:
        query = query.filter(Folder.parent_scope == _scope_of(parent))
    return query.order_by(Folder.name.asc(), Folder.id.asc())


def create_folder(
    name: str,
    parent_id: int | None = None,
    *,
    origin: str = "explicit",
    commit: bool = True,
) -> Folder:
    """Create a folder under ``parent_id`` (``None`` = root group).

    Raises ``UniquenessConflictError`` if a sibling already has the name,
    whether seen by the pre-check or by the unique constraint at flush time.
    With ``commit=False`` the row is only flushed so the caller can add more
    changes to the same transaction; the caller then commits and records the
    creation with :func:`record_created`.
    """

    name = clean_folder_name(name)
    parent = get_folder_or_404(parent_id) if parent_id is not None else None

    if find_by_name_and_parent(name, parent_id) is not None:
        raise _conflict(name, parent_id)

    folder = Folder(name=name, uid=new_uid(), parent_scope=_scope_of(parent_id))
    folder.parent = parent
    folder.path = compute_path(folder)
    db.session.add(folder)
    try:
        if commit:
            db.session.commit()
        else:
            db.session.flush()
    except IntegrityError as exc:
        db.session.rollback()
        raise _conflict(name, parent_id, exc)

    if commit:
        record_created(folder, origin)
    return folder


def update_folder(folder_id: int, *, name=UNSET, parent_id=UNSET) -> Folder:
    """Renombra y/o mueve una carpeta, recalculando rutas de toda la rama."""

    folder = get_folder_or_404(folder_id)
    new_name = clean_folder_name(name) if name is not UNSET else folder.name

    if parent_id is UNSET:
        new_parent = folder.parent
    elif parent_id is None:
        new_parent = None
    else:
        new_parent = get_folder_or_404(parent_id)

    if new_parent is not None and (
        new_parent.id == folder.id or new_parent.path.startswith(folder.path + "/")
    ):
        raise ValidationError("a folder cannot be moved inside itself or its descendants")

    new_parent_id = new_parent.id if new_parent is not None else None
    moved = _scope_of(new_parent_id) != folder.parent_scope
    if moved or new_name != folder.name:
        clash = Folder.query.filter(
            Folder.parent_scope == _scope_of(new_parent_id),
            Folder.name == new_name,
            Folder.id != folder.id,
        ).first()
        if clash is not None:
            raise _conflict(new_name, new_parent_id)

    # Descendientes antes de tocar nada (evita autoflush a medio cambio)
    old_path = folder.path
    descendants = Folder.query.filter(Folder.path.startswith(old_path + "/")).all() if moved else []

    try:
        folder.name = new_name
        if moved:
            folder.parent = new_parent
            folder.parent_scope = _scope_of(new_parent_id)
            folder.path = compute_path(folder)
            for child in descendants:
                child.path = rebase_path(child.path, old_path, folder.path)
            for affected in [folder, *descendants]:
                FileRecord.query.filter(FileRecord.folder_id == affected.id).update(
                    {FileRecord.folder_path: affected.path}, synchronize_session=False
                )
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise _conflict(new_name, new_parent_id, exc)

    if moved:
        logger.info(
            "Carpeta movida %s -> %s (%s descendientes)",
            old_path,
            folder.path,
            len(descendants),
            extra={"event": "folder_moved", "folder_id": folder.id, "count": len(descendants)},
        )
    return folder


def bulk_delete(folder_ids: Iterable[object]) -> int:
    """Elimina carpetas y toda su descendencia; devuelve cuántas se borraron.

    Idempotente: ids inexistentes se ignoran. Los archivos de las carpetas
    borradas quedan sueltos en la raíz (``folder_id=NULL``, ``folder_path="/"``).
    """

    ids = coerce_ids(folder_ids, "folderIds")
    if not ids:
        return 0

    roots = Folder.query.filter(Folder.id.in_(ids)).all()
    if not roots:
        return 0

    branch = or_(*[Folder.path.startswith(f"{root.path}/") for root in roots])
    target_ids = {root.id for root in roots}
    target_ids.update(fid for (fid,) in db.session.query(Folder.id).filter(branch))

    FileRecord.query.filter(FileRecord.folder_id.in_(target_ids)).update(
        {FileRecord.folder_id: None, FileRecord.folder_path: ROOT_PATH},
        synchronize_session=False,
    )
    Folder.query.filter(Folder.id.in_(target_ids)).delete(synchronize_session=False)
    db.session.commit()

    logger.info(
        "Carpetas eliminadas: %s",
        sorted(target_ids),
        extra={"event": "folders_deleted", "count": len(target_ids)},
    )
    refresh_folder_gauge()
    return len(target_ids)
