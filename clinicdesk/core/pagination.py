"""
Paging for the dispense logs.
"""
from typing import TypeVar, Generic, List, Optional, Type
from pydantic import BaseModel
from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery
import math

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


class PageParams:
    """Query parameters ``page`` (from 1) and ``size`` shared by the log listings."""
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number, starting at 1"),
        size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Records per page")
    ):
        self.page = page
        self.size = size


class PageResponse(BaseModel, Generic[T]):
    """
    One page of records.

    Fields:
    - items: Records on this page
    - total: Records across all pages
    - page / size: The page that was asked for
    - pages: Number of pages, 0 when there are no records
    - has_next / has_prev: Whether neighbouring pages exist
    """
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def of(cls, items: list, total: int, page: int, size: int) -> "PageResponse":
        pages = math.ceil(total / size) if total else 0
        return cls(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1
        )


def paginate(query: SQLAlchemyQuery, page: int, size: int, schema: Optional[Type[BaseModel]] = None) -> PageResponse:
    """
    Run an ordered query for a single page.

    Args:
        query: Query with its ordering already applied
        page: Page number, starting at 1
        size: Records per page
        schema: Response model each row is validated into

    Returns:
        PageResponse holding the rows of the page
    """
    page = max(page, 1)
    size = max(1, min(size, MAX_PAGE_SIZE))
    rows = query.offset((page - 1) * size).limit(size).all()
    if schema is not None:
        rows = [schema.model_validate(row) for row in rows]
    return PageResponse.of(rows, query.order_by(None).count(), page, size)
