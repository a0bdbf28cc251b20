from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from app.schemas.onu import Page

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def paginate(
    items: Sequence[T],
    page: int,
    page_size: int,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Page[T]:
    """Slice ``items`` into one page.

    Out-of-range pages return empty data with the real totals.
    """
    if page < 1:
        page = 1
    if page_size <= 0:
        page_size = default_page_size
    if page_size > max_page_size:
        page_size = max_page_size

    total = len(items)
    start = (page - 1) * page_size
    data = list(items[start:min(start + page_size, total)]) if start < total else []
    return Page(
        page=page,
        limit=page_size,
        page_count=math.ceil(total / page_size),
        total_rows=total,
        data=data,
    )
