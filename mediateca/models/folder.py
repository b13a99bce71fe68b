from __future__ import annotations

import uuid

from mediateca.extensions import db

# parent_scope del grupo raíz (los ids reales empiezan en 1)
ROOT_SCOPE = 0


def new_uid() -> str:
    return uuid.uuid4().hex


class Folder(db.Model):
    __tablename__ = "folders"

    id = db.Column(db.Integer, primary_key=True)
    uid = db.Column(db.String(32), nullable=False, unique=True, default=new_uid)
    name = db.Column(db.String(255), nullable=False)
    parent_id = db.Column(
        db.Integer, db.ForeignKey("folders.id", ondelete="CASCADE"), nullable=True
    )
    # Same value as parent_id, but 0 for root folders so the unique
    # constraint also covers the root group (NULLs never collide in SQL).
    parent_scope = db.Column(
        db.Integer, nullable=False, default=ROOT_SCOPE, server_default=db.text("0")
    )
    path = db.Column(db.String(2048), nullable=False)
    created_at = db.Column(
        db.DateTime, default=db.func.now(), server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime,
        default=db.func.now(),
        onupdate=db.func.now(),
        server_default=db.func.current_timestamp(),
    )

    parent = db.relationship(
        "Folder",
        remote_side=[id],
        backref=db.backref("children", lazy=True, passive_deletes=True),
    )

    __table_args__ = (
        db.UniqueConstraint("parent_scope", "name", name="uq_folder_scope_name"),
        db.Index("ix_folders_parent_id", "parent_id"),
        db.Index("ix_folders_path", "path"),
        # ids borrados no se reutilizan en SQLite
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Folder {self.id} {self.name!r} {self.path}>"

    def to_dict(self, *, summary: bool = False) -> dict[str, object]:
        data: dict[str, object] = {
            "id": self.id,
            "uid": self.uid,
            "name": self.name,
            "path": self.path,
        }
        if summary:
            return data
        data.update(
            {
                "parent": self.parent_id,
                "createdAt": self.created_at.isoformat() if self.created_at else None,
                "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            }
        )
        return data
