"""Fábrica de la app Flask para mediateca."""

from __future__ import annotations

import os
from pathlib import Path

from flask import Flask

from .cli import register_cli
from .config import load_config
from .errors import register_error_handlers
from .extensions import db, init_extensions
from .metrics import cleanup_multiprocess_directory
from .registry import register_blueprints
from .storage import BlobStorage, init_storage
from .telemetry import setup_logging


def create_app(config_name: str | None = None, *, storage: BlobStorage | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(load_config(config_name))
    app.config.setdefault("LOG_LEVEL", "INFO")

    setup_logging(app)

    db_uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    app.logger.info("DB URI -> %s", db_uri)
    if db_uri.startswith("sqlite:///") and not db_uri.endswith(":memory:"):
        sqlite_path = Path(db_uri.replace("sqlite:///", "", 1)).expanduser().resolve()
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        app.logger.info("SQLite file -> %s", sqlite_path)

    if os.getenv("PROMETHEUS_MULTIPROC_CLEAN_ON_START", "0").lower() in ("1", "true", "yes"):
        cleanup_multiprocess_directory()

    # DB, migraciones y almacenamiento de blobs
    init_extensions(app)
    init_storage(app, storage)

    register_error_handlers(app)

    from . import models  # noqa: F401

    register_blueprints(app)
    register_cli(app)

    secret_key = app.config.get("SECRET_KEY", "")
    if not app.config.get("TESTING") and len(secret_key) < 32:
        app.logger.warning(
            "SECRET_KEY is shorter than 32 characters. Provide a secure 32+ byte key for production.",
        )

    return app


__all__ = ["create_app", "db"]
