"""Locks por ámbito de carpetas (``parent`` + prefijo de nombre)."""

from __future__ import annotations

import threading
import zlib
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.engine import Engine

from mediateca.extensions import db

_registry_guard = threading.Lock()
_local_locks: dict[int, threading.Lock] = {}


def scope_key(parent_id: int | None, name_prefix: str) -> int:
    """Clave estable (entero de 32 bits) para ``(parent, name_prefix)``."""

    raw = f"{parent_id or 0}:{name_prefix}".encode("utf-8")
    return zlib.crc32(raw)


def _is_postgres(engine: Engine) -> bool:
    return (engine.dialect.name or "").startswith("postgres")


def _local_lock(key: int) -> threading.Lock:
    with _registry_guard:
        lock = _local_locks.get(key)
        if lock is None:
            lock = _local_locks[key] = threading.Lock()
        return lock


@contextmanager
def scope_lock(parent_id: int | None, name_prefix: str):
    """Serializa la creación de carpetas en un mismo ámbito.

    In-process a ``threading.Lock`` per key is taken. On PostgreSQL a
    transaction-level advisory lock is added so other workers wait as well;
    it is released by the commit/rollback that ends the creation.
    """

    key = scope_key(parent_id, name_prefix)
    with _local_lock(key):
        if _is_postgres(db.engine):
            db.session.execute(text("SELECT pg_advisory_xact_lock(:k)"), {"k": key})
        yield
