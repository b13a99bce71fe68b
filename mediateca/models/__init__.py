from __future__ import annotations

from mediateca.models.file import FileRecord
from mediateca.models.folder import Folder
from mediateca.models.setting import Setting

__all__ = ["Folder", "FileRecord", "Setting"]
