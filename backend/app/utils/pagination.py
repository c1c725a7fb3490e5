"""
Pagination Utility Module

Query-string pagination is parsed once, at the API boundary, into a
PaginationParams object; services only ever see validated values.
"""
from typing import Any, Dict, List, Optional

from fastapi import Query
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.core.config import settings


class PaginationParams(BaseModel):
    """Recognised listing options: page, limit and free-text search"""
    page: int = Field(1, ge=1)
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    search: Optional[str] = Field(None, max_length=200)

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"
    ),
    search: Optional[str] = Query(None, max_length=200, description="Case-insensitive text search"),
) -> PaginationParams:
    """FastAPI dependency building PaginationParams from the query string"""
    return PaginationParams(page=page, limit=limit, search=search)


LIKE_ESCAPE = "\\"


def like_pattern(search: str) -> str:
    """Case-folded `%term%` pattern with LIKE wildcards in the term escaped"""
    term = search.lower()
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return f"%{term}%"


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if total > 0 else 0


def pagination_meta(params: PaginationParams, total: int) -> Dict[str, int]:
    return {
        "page": params.page,
        "limit": params.limit,
        "total": total,
        "total_pages": total_pages(total, params.limit),
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    count_query: Optional[Select] = None
) -> Dict[str, Any]:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query (already filtered and ordered)
        params: Validated pagination parameters
        count_query: Optional custom count query

    Returns:
        Dictionary with items and pagination metadata
    """
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())

    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    items: List[Any] = list(result.scalars().all())

    return {
        "items": items,
        "pagination": pagination_meta(params, total),
    }
