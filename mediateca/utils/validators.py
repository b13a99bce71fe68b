"""Validadores reutilizables para la aplicación."""

from __future__ import annotations

from typing import Iterable

from mediateca.exceptions import ValidationError

MAX_FOLDER_NAME = 255


def clean_folder_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("folder name is required")
    cleaned = name.strip()
    if len(cleaned) > MAX_FOLDER_NAME:
        raise ValidationError(f"folder name longer than {MAX_FOLDER_NAME} characters")
    return cleaned


def coerce_id(value: object, label: str = "id") -> int:
    """Acepta enteros o strings numéricos (formularios multipart)."""

    if isinstance(value, bool):
        raise ValidationError(f"invalid {label}: {value!r}")
    try:
        result = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"invalid {label}: {value!r}") from None
    if result <= 0:
        raise ValidationError(f"invalid {label}: {value!r}")
    return result


def coerce_ids(values: Iterable[object] | None, label: str = "ids") -> set[int]:
    if values is None:
        return set()
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValidationError(f"{label} must be a list")
    return {coerce_id(value, label) for value in values}
