import io

from mediateca.exceptions import StorageError
from mediateca.storage import EXTENSION_KEY

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\xff\xd9"


def _create(client, name, parent=None):
    return client.post("/upload/folders", json={"name": name, "parent": parent})


def test_create_and_get_folder(client):
    res = _create(client, "Docs")
    assert res.status_code == 201
    body = res.get_json()
    assert body["name"] == "Docs"
    assert body["parent"] is None
    assert body["path"] == f"/{body['uid']}"

    child = _create(client, "Inner", body["id"]).get_json()
    assert child["path"] == f"{body['path']}/{child['uid']}"

    detail = client.get(f"/upload/folders/{child['id']}").get_json()
    assert detail["uid"] == child["uid"]


def test_duplicate_folder_name_is_bad_request(client):
    _create(client, "Docs")
    res = _create(client, "Docs")
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == 400


def test_unknown_parent_is_not_found(client):
    res = _create(client, "Docs", 999)
    assert res.status_code == 404


def test_missing_name_is_bad_request(client):
    res = client.post("/upload/folders", json={"parent": None})
    assert res.status_code == 400


def test_list_folders_paginated_and_scoped(client):
    docs = _create(client, "Docs").get_json()
    for name in ("A", "B", "C"):
        _create(client, name)
    _create(client, "Inner", docs["id"])

    everything = client.get("/upload/folders?pageSize=100").get_json()
    assert everything["pagination"]["total"] == 5

    roots = client.get("/upload/folders?parent=null&pageSize=2&page=2").get_json()
    assert [f["name"] for f in roots["results"]] == ["C", "Docs"]
    assert roots["pagination"] == {"page": 2, "pageSize": 2, "pageCount": 2, "total": 4}

    children = client.get(f"/upload/folders?parent={docs['id']}").get_json()
    assert [f["name"] for f in children["results"]] == ["Inner"]


def test_update_folder_moves_and_renames(client):
    a = _create(client, "A").get_json()
    b = _create(client, "B").get_json()

    res = client.put(f"/upload/folders/{a['id']}", json={"parent": b["id"], "name": "A2"})
    assert res.status_code == 200
    body = res.get_json()
    assert body["name"] == "A2"
    assert body["parent"] == b["id"]
    assert body["path"] == f"{b['path']}/{a['uid']}"

    res = client.put(f"/upload/folders/{b['id']}", json={"parent": a["id"]})
    assert res.status_code == 400


def test_upload_into_explicit_folder(client):
    docs = _create(client, "Docs").get_json()
    res = client.post(
        "/upload",
        data={"files": (io.BytesIO(JPEG_BYTES), "rec.jpg"), "folderId": str(docs["id"])},
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    file = res.get_json()[0]
    assert file["folder"]["uid"] == docs["uid"]
    assert file["folderPath"] == docs["path"]


def test_upload_into_missing_folder_is_not_found(client):
    res = client.post(
        "/upload",
        data={"files": (io.BytesIO(JPEG_BYTES), "rec.jpg"), "folderId": "77"},
        content_type="multipart/form-data",
    )
    assert res.status_code == 404
    assert client.get("/upload/files").get_json() == []


def test_upload_without_files_is_bad_request(client):
    res = client.post("/upload", data={}, content_type="multipart/form-data")
    assert res.status_code == 400


def test_upload_several_files(client):
    res = client.post(
        "/upload",
        data={"files": [(io.BytesIO(JPEG_BYTES), "a.jpg"), (io.BytesIO(JPEG_BYTES), "b.jpg")]},
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    files = res.get_json()
    assert [f["name"] for f in files] == ["a.jpg", "b.jpg"]
    assert files[0]["folder"]["uid"] == files[1]["folder"]["uid"]


def test_bulk_delete_folders_and_files(client):
    docs = _create(client, "Docs").get_json()
    upload = client.post(
        "/upload",
        data={"files": (io.BytesIO(JPEG_BYTES), "rec.jpg")},
        content_type="multipart/form-data",
    ).get_json()[0]

    res = client.post(
        "/upload/actions/bulk-delete",
        json={"folderIds": [docs["id"], 4242], "fileIds": [upload["id"]]},
    )
    assert res.status_code == 200
    assert res.get_json() == {"deletedFolders": 1, "deletedFiles": 1}
    assert client.get(f"/upload/folders/{docs['id']}").status_code == 404
    assert client.get(f"/upload/files/{upload['id']}").status_code == 404


def test_get_missing_file_is_not_found(client):
    res = client.get("/upload/files/123", headers={"X-Request-Id": "rid-1"})
    assert res.status_code == 404
    assert res.get_json()["error"]["request_id"] == "rid-1"


def test_upload_is_all_or_nothing(client, app):
    real = app.extensions[EXTENSION_KEY]
    calls = []

    class _SecondFails:
        def store(self, blob):
            calls.append(blob.filename)
            if len(calls) == 2:
                raise StorageError("disk full")
            return real.store(blob)

        def delete(self, ref):
            real.delete(ref)

    app.extensions[EXTENSION_KEY] = _SecondFails()
    res = client.post(
        "/upload",
        data={"files": [(io.BytesIO(JPEG_BYTES), "a.jpg"), (io.BytesIO(JPEG_BYTES), "b.jpg")]},
        content_type="multipart/form-data",
    )

    assert res.status_code == 502
    assert client.get("/upload/files").get_json() == []
