from __future__ import annotations

from mediateca.extensions import db

# folder_path de un archivo sin carpeta
ROOT_PATH = "/"


class FileRecord(db.Model):
    __tablename__ = "upload_files"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(512), nullable=False)
    mime = db.Column(db.String(128))
    size = db.Column(db.BigInteger, nullable=False, default=0)
    sha256 = db.Column(db.String(64), nullable=False, index=True)
    storage_ref = db.Column(db.String(1024), nullable=False)
    folder_id = db.Column(
        db.Integer, db.ForeignKey("folders.id", ondelete="SET NULL"), nullable=True
    )
    folder_path = db.Column(
        db.String(2048), nullable=False, default=ROOT_PATH, server_default=ROOT_PATH
    )
    # Destino opcional "adjuntar a entidad" (refId / ref / field)
    ref_id = db.Column(db.String(64))
    ref_type = db.Column(db.String(255))
    field = db.Column(db.String(255))
    created_at = db.Column(
        db.DateTime, default=db.func.now(), server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime,
        default=db.func.now(),
        onupdate=db.func.now(),
        server_default=db.func.current_timestamp(),
    )

    folder = db.relationship(
        "Folder", backref=db.backref("files", lazy=True, passive_deletes=True), lazy=True
    )

    __table_args__ = (
        db.Index("ix_upload_files_folder_id", "folder_id"),
        db.Index("ix_upload_files_ref", "ref_type", "ref_id"),
        {"sqlite_autoincrement": True},
    )

    def to_dict(self) -> dict[str, object]:
        related = None
        if self.ref_type:
            related = {"refId": self.ref_id, "ref": self.ref_type, "field": self.field}
        return {
            "id": self.id,
            "name": self.name,
            "mime": self.mime,
            "size": self.size,
            "hash": self.sha256,
            "url": self.storage_ref,
            "folder": self.folder.to_dict(summary=True) if self.folder else None,
            "folderPath": self.folder_path,
            "related": related,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
