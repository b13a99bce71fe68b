"""Materialized folder paths (``/uid1/uid2/...``)."""

from __future__ import annotations

from mediateca.models.folder import Folder


def compute_path(folder: Folder) -> str:
    """Return the path of ``folder`` from its parent's stored path.

    ``folder.parent`` must be assigned (not only ``parent_id``) and its path
    already persisted; callers store the result.
    """

    parent = folder.parent
    if parent is None:
        return f"/{folder.uid}"
    return f"{parent.path}/{folder.uid}"


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """Rewrite a descendant path after its ancestor moved."""

    if path == old_prefix:
        return new_prefix
    if not path.startswith(old_prefix + "/"):
        raise ValueError(f"{path!r} is not under {old_prefix!r}")
    return new_prefix + path[len(old_prefix):]
