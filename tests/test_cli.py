from mediateca.models import Folder
from mediateca.services import folder_service


def test_ensure_upload_folder_creates_once(runner, app):
    res = runner.invoke(args=["ensure-upload-folder"])
    assert res.exit_code == 0, res.output
    name, uid, path = res.output.strip().split("\t")
    assert name == "Uploads"
    assert path == f"/{uid}"

    again = runner.invoke(args=["ensure-upload-folder"])
    assert again.output == res.output
    with app.app_context():
        assert Folder.query.count() == 1


def test_list_folders_prints_tree(runner, app):
    assert runner.invoke(args=["list-folders"]).output.strip() == "(sin carpetas)"

    with app.app_context():
        docs = folder_service.create_folder("Docs")
        folder_service.create_folder("Inner", docs.id)

    lines = runner.invoke(args=["list-folders"]).output.splitlines()
    assert lines[0].startswith("Docs [")
    assert lines[1].startswith("  Inner [")
