"""Errores de dominio del servicio de uploads."""

from __future__ import annotations


class MediatecaError(Exception):
    """Base de todos los errores que el API traduce a JSON."""

    status_code = 500

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFoundError(MediatecaError):
    """A folder or file referenced by id does not exist."""

    status_code = 404


class ValidationError(MediatecaError):
    status_code = 400


class UniquenessConflictError(MediatecaError):
    """Sibling name clash detected when persisting a folder.

    Transitorio: el provisionador lo absorbe y reintenta con otro nombre.
    """

    status_code = 409

    def __init__(self, name: str, parent_id: int | None = None) -> None:
        super().__init__(f"folder name {name!r} already used in this location")
        self.name = name
        self.parent_id = parent_id


class StorageError(MediatecaError):
    """The blob store failed; no metadata is written."""

    status_code = 502
