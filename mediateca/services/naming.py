"""Desambiguación de nombres de carpeta con sufijos ``"(n)"``."""

from __future__ import annotations

import itertools
from typing import Iterator

from sqlalchemy import or_

from mediateca.extensions import db
from mediateca.models.folder import ROOT_SCOPE, Folder


def candidate_names(desired: str) -> Iterator[str]:
    """``desired``, ``desired (1)``, ``desired (2)``, ... sin límite."""

    yield desired
    for n in itertools.count(1):
        yield f"{desired} ({n})"


def taken_names(desired: str, parent_id: int | None = None) -> set[str]:
    """Nombres del ámbito que podrían chocar con algún candidato."""

    scope = parent_id or ROOT_SCOPE
    rows = (
        db.session.query(Folder.name)
        .filter(
            Folder.parent_scope == scope,
            or_(
                Folder.name == desired,
                Folder.name.startswith(f"{desired} (", autoescape=True),
            ),
        )
        .all()
    )
    return {name for (name,) in rows}


def unique_name(desired: str, parent_id: int | None = None) -> str:
    """Primer candidato que ningún hermano usa todavía.

    Sin lock, el resultado solo es una sugerencia: otro proceso puede
    tomar el nombre antes del commit (la restricción única lo detecta).
    """

    taken = taken_names(desired, parent_id)
    return next(name for name in candidate_names(desired) if name not in taken)
