"""Extensiones compartidas (base de datos y migraciones)."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Base de datos
db = SQLAlchemy()

# Alembic vía Flask-Migrate; el directorio vive en la raíz del repo
migrate = Migrate()


def init_extensions(app: Flask) -> None:
    """Vincula SQLAlchemy y Flask-Migrate a la app."""

    db.init_app(app)
    migrate.init_app(app, db, directory=app.config.get("MIGRATIONS_DIR", "migrations"))
