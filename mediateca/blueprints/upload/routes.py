"""Endpoints JSON del plugin de uploads (archivos y carpetas)."""

from __future__ import annotations

from flask import jsonify, request

from mediateca.exceptions import UniquenessConflictError, ValidationError
from mediateca.services import folder_service, upload_service
from mediateca.services.upload_service import RelatedTarget
from mediateca.utils.pagination import paginate
from mediateca.utils.validators import coerce_id

from . import bp


def _optional_id(raw, label: str) -> int | None:
    if raw is None or (isinstance(raw, str) and raw.strip().lower() in {"", "null"}):
        return None
    return coerce_id(raw, label)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("JSON object expected")
    return data


@bp.post("")
def upload():
    """Subir uno o más archivos (campo multipart ``files``)."""

    blobs = [blob for blob in request.files.getlist("files") if blob and blob.filename]
    folder_id = _optional_id(request.form.get("folderId"), "folderId")
    related = RelatedTarget.from_form(
        request.form.get("refId"), request.form.get("ref"), request.form.get("field")
    )
    records = upload_service.handle_uploads(blobs, folder_id=folder_id, related=related)
    return jsonify([record.to_dict() for record in records]), 200


@bp.get("/files")
def list_files():
    folder_id = _optional_id(request.args.get("folder"), "folder")
    return jsonify([record.to_dict() for record in upload_service.list_files(folder_id)])


@bp.get("/files/<int:file_id>")
def get_file(file_id: int):
    return jsonify(upload_service.get_file(file_id).to_dict())


@bp.get("/folders")
def list_folders():
    """Listar carpetas; ``?parent=null`` limita a la raíz."""

    parent = folder_service.ANY
    if "parent" in request.args:
        parent = _optional_id(request.args.get("parent"), "parent")
    items, meta = paginate(
        folder_service.list_folders(parent),
        request.args.get("page"),
        request.args.get("pageSize"),
    )
    return jsonify(results=[folder.to_dict() for folder in items], pagination=meta)


@bp.post("/folders")
def create_folder():
    data = _json_body()
    parent_id = _optional_id(data.get("parent"), "parent")
    try:
        folder = folder_service.create_folder(data.get("name"), parent_id)
    except UniquenessConflictError as exc:
        raise ValidationError(exc.message) from exc
    return jsonify(folder.to_dict()), 201


@bp.get("/folders/<int:folder_id>")
def get_folder(folder_id: int):
    return jsonify(folder_service.get_folder_or_404(folder_id).to_dict())


@bp.put("/folders/<int:folder_id>")
def update_folder(folder_id: int):
    """Renombrar y/o mover (``{"name": ..., "parent": ...}``)."""

    data = _json_body()
    changes: dict[str, object] = {}
    if "name" in data:
        changes["name"] = data.get("name")
    if "parent" in data:
        changes["parent_id"] = _optional_id(data.get("parent"), "parent")
    try:
        folder = folder_service.update_folder(folder_id, **changes)
    except UniquenessConflictError as exc:
        raise ValidationError(exc.message) from exc
    return jsonify(folder.to_dict())


@bp.post("/actions/bulk-delete")
def bulk_delete():
    data = _json_body()
    deleted_folders = folder_service.bulk_delete(data.get("folderIds") or [])
    deleted_files = upload_service.delete_files(data.get("fileIds") or [])
    return jsonify(deletedFolders=deleted_folders, deletedFiles=deleted_files), 200
