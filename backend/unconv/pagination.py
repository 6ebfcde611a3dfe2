"""Page/sort request parsing and page metadata.

`page_request` is the FastAPI dependency behind every list endpoint; it
turns `page`, `size`, `sortBy` and `sortDir` query parameters into a
`PageRequest`. `build_page` wraps a window of rows into a `PagedResult`.

Conventions:
- pages are 1-based;
- `sortDir` other than `desc` (case-insensitive) silently means ascending;
- an empty collection has `totalPages == 0` and is both first and last.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Query
from pydantic.alias_generators import to_snake

from .config import settings
from .database import MAX_SQL_INTEGER
from .problems import ValidationFailed
from .schemas import PagedResult, Violation

ASC = "asc"
DESC = "desc"


def normalize_sort_dir(value: Optional[str]) -> str:
    if value and value.strip().lower() == DESC:
        return DESC
    return ASC


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    size: int = settings.DEFAULT_PAGE_SIZE
    sort_by: str = "id"
    sort_dir: str = ASC

    @property
    def descending(self) -> bool:
        return self.sort_dir == DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def page_request(
    page: int = Query(1, ge=1, le=MAX_SQL_INTEGER),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: Optional[str] = Query(ASC, alias="sortDir"),
) -> PageRequest:
    """FastAPI dependency collecting pagination query parameters."""
    return PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=normalize_sort_dir(sort_dir))


def resolve_sort_column(model, sort_by: str):
    """Return the column of `model` named by `sort_by`.

    Both the wire name (`costPrice`) and the attribute name (`cost_price`)
    are accepted. Unknown names raise `ValidationFailed` on `sortBy`.
    """
    name = to_snake(sort_by.strip()) if sort_by else ""
    if name not in model.model_fields:
        raise ValidationFailed([Violation(field="sortBy", message=f"Unknown sort property: {sort_by}")])
    return getattr(model, name)


def total_pages(total_elements: int, size: int) -> int:
    if total_elements <= 0:
        return 0
    return math.ceil(total_elements / size)


def build_page(rows: List, total_elements: int, request: PageRequest) -> PagedResult:
    pages = total_pages(total_elements, request.size)
    return PagedResult(
        data=rows,
        total_elements=total_elements,
        page_number=request.page,
        total_pages=pages,
        is_first=request.page == 1,
        is_last=request.page >= pages,
        has_next=request.page < pages,
        has_previous=request.page > 1,
    )
