from __future__ import annotations

import math

from ..errors import ValidationError


def resolve_page(page) -> int:
    try:
        p = int(page)
    except (TypeError, ValueError):
        raise ValidationError("page must be an integer") from None
    if p < 1:
        raise ValidationError("page must be >= 1")
    return p


def resolve_page_size(size, default: int, maximum: int) -> int:
    """Fall back to `default` when size is None; sizes above `maximum` are capped."""
    if size is None:
        size = default
    try:
        s = int(size)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer") from None
    if s < 1:
        raise ValidationError("limit must be >= 1")
    return min(s, maximum)


# largest value SQLite binds as INTEGER
SQLITE_INT_MAX = 2**63 - 1


def offset_for(page: int, size: int) -> int:
    offset = (page - 1) * size
    if offset > SQLITE_INT_MAX:
        raise ValidationError("page out of range")
    return offset


def pagination_meta(total: int, page: int, size: int) -> dict:
    return {
        "current_page": page,
        "total_pages": math.ceil(total / size),
        "total_records": total,
        "per_page": size,
    }
