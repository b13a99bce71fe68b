import io
import sys
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mediateca import create_app, db
from mediateca.storage import get_storage

# Cabecera JPEG mínima; el contenido da igual para el almacenamiento
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("UPLOAD_DIR", raising=False)

    flask_app = create_app("testing")

    with flask_app.app_context():
        db.create_all()
        try:
            yield flask_app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def storage(app):
    return get_storage()


@pytest.fixture()
def make_blob():
    def _mk(filename: str = "rec.jpg", data: bytes = JPEG_BYTES, content_type: str = "image/jpeg"):
        return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)

    return _mk
