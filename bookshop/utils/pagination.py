# bookshop/utils/pagination.py
import math
from typing import Tuple

from bookshop.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def page_window(page: int | None, limit: int | None) -> Tuple[int, int, int]:
    """Zwraca (page, limit, offset); page >= 1, 1 <= limit <= MAX_PAGE_SIZE."""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else DEFAULT_PAGE_SIZE
    limit = min(limit, MAX_PAGE_SIZE)
    return page, limit, (page - 1) * limit


def pagination_meta(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
