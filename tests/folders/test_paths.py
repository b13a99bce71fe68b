import pytest

from mediateca.models.folder import Folder
from mediateca.services.paths import compute_path, rebase_path


def test_root_folder_path_is_its_uid():
    folder = Folder(name="Uploads", uid="abc")
    assert compute_path(folder) == "/abc"


def test_child_path_extends_parent_path():
    parent = Folder(name="A", uid="p1", path="/root/p1")
    child = Folder(name="B", uid="c1")
    child.parent = parent
    assert compute_path(child) == "/root/p1/c1"


def test_rebase_path_rewrites_prefix():
    assert rebase_path("/a/b/c", "/a/b", "/x/b") == "/x/b/c"
    assert rebase_path("/a/b", "/a/b", "/x/b") == "/x/b"


def test_rebase_path_rejects_unrelated_prefix():
    # "/a/bc" comparte texto con "/a/b" pero no es descendiente
    with pytest.raises(ValueError):
        rebase_path("/a/bc", "/a/b", "/x")
