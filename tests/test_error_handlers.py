import io

from flask import Blueprint

from mediateca.exceptions import StorageError


def _register_crash_bp(app):
    bp = Blueprint("_test_crash", __name__)

    @bp.get("/_test/crash")
    def crash():
        raise RuntimeError("boom")

    @bp.get("/_test/storage")
    def storage_down():
        raise StorageError("disk unavailable")

    app.register_blueprint(bp)


def test_404_is_json_and_has_request_id(client):
    res = client.get("/no-existe", headers={"X-Request-Id": "abc123"})
    assert res.status_code == 404
    assert res.is_json
    data = res.get_json()
    assert data["error"]["code"] == 404
    assert data["error"]["path"] == "/no-existe"
    assert data["error"]["request_id"] == "abc123"
    assert res.headers.get("X-Request-Id") == "abc123"


def test_request_id_is_generated_when_missing(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.headers.get("X-Request-Id")


def test_405_is_json(client):
    res = client.delete("/upload/folders")
    assert res.status_code == 405
    assert res.is_json


def test_500_is_json_with_request_id(client, app):
    _register_crash_bp(app)
    res = client.get("/_test/crash", headers={"X-Request-Id": "req-500"})
    assert res.status_code == 500
    assert res.is_json
    data = res.get_json()
    assert data["error"]["code"] == 500
    assert data["error"]["message"] == "Internal Server Error"
    assert data["error"]["request_id"] == "req-500"
    assert res.headers.get("X-Request-Id") == "req-500"


def test_storage_error_is_bad_gateway(client, app):
    _register_crash_bp(app)
    res = client.get("/_test/storage")
    assert res.status_code == 502
    assert res.get_json()["error"]["message"] == "disk unavailable"


def test_oversized_upload_is_rejected(client, app):
    app.config["MAX_CONTENT_LENGTH"] = 16
    res = client.post(
        "/upload",
        data={"files": (io.BytesIO(b"x" * 1024), "big.bin")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 413
    assert res.is_json
