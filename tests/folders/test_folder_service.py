import pytest
from sqlalchemy.exc import IntegrityError

from mediateca.exceptions import NotFoundError, UniquenessConflictError, ValidationError
from mediateca.extensions import db
from mediateca.models import FileRecord, Folder
from mediateca.services import folder_service, upload_service


def test_create_root_folder_assigns_uid_and_path(app):
    folder = folder_service.create_folder("  Fotos  ")

    assert folder.id is not None
    assert folder.name == "Fotos"
    assert len(folder.uid) == 32
    assert folder.parent_id is None
    assert folder.path == f"/{folder.uid}"


def test_create_child_folder_path_follows_parent(app):
    parent = folder_service.create_folder("Proyectos")
    child = folder_service.create_folder("2026", parent.id)
    grandchild = folder_service.create_folder("Enero", child.id)

    assert child.path == f"{parent.path}/{child.uid}"
    assert grandchild.path == f"/{parent.uid}/{child.uid}/{grandchild.uid}"


def test_sibling_names_must_be_unique(app):
    folder_service.create_folder("Uploads")

    with pytest.raises(UniquenessConflictError):
        folder_service.create_folder("Uploads")


def test_same_name_allowed_under_different_parents(app):
    a = folder_service.create_folder("A")
    b = folder_service.create_folder("B")

    first = folder_service.create_folder("Uploads", a.id)
    second = folder_service.create_folder("Uploads", b.id)
    root = folder_service.create_folder("Uploads")

    assert len({first.id, second.id, root.id}) == 3


def test_unique_constraint_covers_root_scope(app):
    folder_service.create_folder("Uploads")

    # Saltándose el repositorio, la base de datos también lo impide
    db.session.add(Folder(name="Uploads", uid="f" * 32, path="/" + "f" * 32))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


def test_create_folder_validates_name_and_parent(app):
    with pytest.raises(ValidationError):
        folder_service.create_folder("   ")
    with pytest.raises(ValidationError):
        folder_service.create_folder("x" * 256)
    with pytest.raises(NotFoundError):
        folder_service.create_folder("Huérfana", 999)


def test_find_by_name_and_parent(app):
    parent = folder_service.create_folder("Docs")
    child = folder_service.create_folder("Uploads", parent.id)

    assert folder_service.find_by_name_and_parent("Uploads", parent.id).id == child.id
    assert folder_service.find_by_name_and_parent("Uploads") is None


def test_list_folders_by_scope(app):
    docs = folder_service.create_folder("Docs")
    folder_service.create_folder("Assets")
    folder_service.create_folder("Inner", docs.id)

    assert [f.name for f in folder_service.list_folders(None)] == ["Assets", "Docs"]
    assert [f.name for f in folder_service.list_folders(docs.id)] == ["Inner"]
    assert folder_service.list_folders().count() == 3


def test_bulk_delete_removes_branch_and_is_idempotent(app):
    docs = folder_service.create_folder("Docs")
    inner = folder_service.create_folder("Inner", docs.id)
    folder_service.create_folder("Deep", inner.id)
    keep_id = folder_service.create_folder("Keep").id
    docs_id = docs.id

    assert folder_service.bulk_delete([docs_id]) == 3
    assert [f.id for f in Folder.query.all()] == [keep_id]

    assert folder_service.bulk_delete([docs_id, 12345]) == 0
    assert folder_service.bulk_delete([]) == 0


def test_bulk_delete_detaches_files(app, make_blob):
    docs = folder_service.create_folder("Docs")
    record = upload_service.handle_upload(make_blob(), folder_id=docs.id)
    record_id = record.id

    folder_service.bulk_delete([docs.id])

    record = db.session.get(FileRecord, record_id)
    assert record is not None
    assert record.folder_id is None
    assert record.folder_path == "/"


def test_bulk_delete_rejects_garbage_ids(app):
    with pytest.raises(ValidationError):
        folder_service.bulk_delete(["abc"])
    with pytest.raises(ValidationError):
        folder_service.bulk_delete("1,2")


def test_move_folder_recomputes_branch_paths(app, make_blob):
    a = folder_service.create_folder("A")
    b = folder_service.create_folder("B")
    child = folder_service.create_folder("Child", a.id)
    leaf = folder_service.create_folder("Leaf", child.id)
    record = upload_service.handle_upload(make_blob(), folder_id=leaf.id)

    moved = folder_service.update_folder(child.id, parent_id=b.id)

    assert moved.parent_id == b.id
    assert moved.path == f"{b.path}/{child.uid}"
    leaf = db.session.get(Folder, leaf.id)
    assert leaf.path == f"{b.path}/{child.uid}/{leaf.uid}"
    assert db.session.get(FileRecord, record.id).folder_path == leaf.path


def test_move_to_root_and_rename(app):
    a = folder_service.create_folder("A")
    child = folder_service.create_folder("Child", a.id)

    moved = folder_service.update_folder(child.id, name="Top", parent_id=None)

    assert moved.name == "Top"
    assert moved.parent_id is None
    assert moved.path == f"/{child.uid}"


def test_move_into_descendant_is_rejected(app):
    a = folder_service.create_folder("A")
    child = folder_service.create_folder("Child", a.id)

    with pytest.raises(ValidationError):
        folder_service.update_folder(a.id, parent_id=child.id)
    with pytest.raises(ValidationError):
        folder_service.update_folder(a.id, parent_id=a.id)


def test_rename_or_move_into_taken_name_conflicts(app):
    a = folder_service.create_folder("A")
    folder_service.create_folder("Uploads")
    other = folder_service.create_folder("Uploads", a.id)

    with pytest.raises(UniquenessConflictError):
        folder_service.update_folder(other.id, parent_id=None)

    b = folder_service.create_folder("B")
    with pytest.raises(UniquenessConflictError):
        folder_service.update_folder(b.id, name="A")
