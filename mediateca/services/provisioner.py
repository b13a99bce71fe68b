"""Carpeta por defecto ("Uploads") para archivos subidos sin destino.

The folder acting as default is tracked by a persisted pointer
(``upload_settings.default_folder``) that is re-validated against the
``folders`` table on every call. Folders are deleted out-of-band, so nothing
is cached in process memory: a dangling pointer simply means the next upload
recreates the folder, under a fresh unique name if ``"Uploads"`` is taken.
"""

from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from mediateca.exceptions import UniquenessConflictError
from mediateca.extensions import db
from mediateca.metrics import default_folder_provisioned_total
from mediateca.models.folder import Folder
from mediateca.models.setting import Setting
from mediateca.services import folder_service, naming
from mediateca.utils.lock import scope_lock

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = "Uploads"
SETTING_KEY = "default_folder"


def _pointed_folder() -> tuple[Folder | None, bool]:
    """``(folder, pointer_exists)`` según el puntero persistido."""

    pointer = Setting.get_value(SETTING_KEY)
    if not pointer or not pointer.get("uid"):
        return None, False
    return folder_service.get_folder_by_uid(pointer["uid"]), True


def _remember(folder: Folder) -> None:
    Setting.set_value(SETTING_KEY, {"id": folder.id, "uid": folder.uid})


def _adopt_existing() -> Folder | None:
    """First run only: reuse a root folder already named "Uploads"."""

    existing = folder_service.find_by_name_and_parent(DEFAULT_FOLDER_NAME, None)
    if existing is None:
        return None
    _remember(existing)
    db.session.commit()
    default_folder_provisioned_total.labels("adopted").inc()
    logger.info(
        "Carpeta por defecto adoptada: %s",
        existing.path,
        extra={"event": "default_folder_adopted", "folder_id": existing.id},
    )
    return existing


def _create_default(had_pointer: bool, attempt: int) -> Folder:
    name = naming.unique_name(DEFAULT_FOLDER_NAME, None)
    folder = folder_service.create_folder(name, None, commit=False)
    _remember(folder)
    db.session.commit()
    folder_service.record_created(folder, "default")

    reason = "recreated" if had_pointer else "initial"
    default_folder_provisioned_total.labels(reason).inc()
    logger.info(
        "Carpeta por defecto %s: %r (%s)",
        reason,
        folder.name,
        folder.path,
        extra={
            "event": "default_folder_provisioned",
            "folder_id": folder.id,
            "folder_uid": folder.uid,
            "reason": reason,
            "attempt": attempt,
        },
    )
    return folder


def ensure_default_folder() -> Folder:
    """Devuelve la carpeta por defecto, creándola si hace falta.

    Never raises ``UniquenessConflictError`` unless every one of the
    ``UPLOAD_FOLDER_CREATE_ATTEMPTS`` attempts lost a creation race.
    """

    folder, _ = _pointed_folder()
    if folder is not None:
        return folder

    attempts = int(current_app.config.get("UPLOAD_FOLDER_CREATE_ATTEMPTS", 3))
    for attempt in range(1, attempts + 1):
        with scope_lock(None, DEFAULT_FOLDER_NAME):
            # Otro request pudo haberla creado mientras esperábamos el lock
            folder, had_pointer = _pointed_folder()
            if folder is not None:
                return folder
            if not had_pointer:
                folder = _adopt_existing()
                if folder is not None:
                    return folder
            try:
                return _create_default(had_pointer, attempt)
            except (UniquenessConflictError, IntegrityError):
                db.session.rollback()
                logger.warning(
                    "Choque al crear la carpeta por defecto, reintentando (%s/%s)",
                    attempt,
                    attempts,
                    extra={"event": "default_folder_retry", "attempt": attempt},
                )

    raise UniquenessConflictError(DEFAULT_FOLDER_NAME)
