from __future__ import annotations

from mediateca.extensions import db


class Setting(db.Model):
    """Pares clave/valor persistentes del plugin de uploads."""

    __tablename__ = "upload_settings"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(120), nullable=False, unique=True)
    value = db.Column(db.JSON)
    updated_at = db.Column(
        db.DateTime,
        default=db.func.now(),
        onupdate=db.func.now(),
        server_default=db.func.current_timestamp(),
    )

    @classmethod
    def get_value(cls, key: str, default=None):
        row = cls.query.filter_by(key=key).first()
        if row is None:
            return default
        return row.value

    @classmethod
    def set_value(cls, key: str, value) -> "Setting":
        """Upsert sin commit; quien llama decide la transacción."""

        row = cls.query.filter_by(key=key).first()
        if row is None:
            row = cls(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        return row
