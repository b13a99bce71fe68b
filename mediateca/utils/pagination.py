"""Utility helpers for paginating SQLAlchemy queries in Flask views."""

from __future__ import annotations

MAX_PAGE_SIZE = 100


def _positive_int(raw: str | None, default: int, *, upper: int | None = None) -> int:
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        return default
    if value <= 0:
        value = default
    if upper is not None and value > upper:
        value = upper
    return value


def paginate(query, page: str | int | None, page_size: str | int | None, *, default_size: int = 10):
    """Return ``(items, meta)`` for ``query``.

    ``meta`` follows the ``{page, pageSize, pageCount, total}`` shape the
    upload API exposes. Pages past the end clamp to the last page.
    """

    page = _positive_int(None if page is None else str(page), 1)
    per_page = _positive_int(
        None if page_size is None else str(page_size), default_size, upper=MAX_PAGE_SIZE
    )

    total = query.order_by(None).count()
    pages = max((total + per_page - 1) // per_page, 1)
    if page > pages:
        page = pages
    offset = (page - 1) * per_page
    items = list(query.offset(offset).limit(per_page).all())
    meta = {"page": page, "pageSize": per_page, "pageCount": pages, "total": total}
    return items, meta
