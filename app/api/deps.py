"""
FastAPI Dependencies

Provides dependency injection for database sessions and pagination.
"""

from typing import Annotated
from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.schemas.pagination import PageParams


def get_page_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Rows per page"
    ),
) -> PageParams:
    return PageParams(page=page, limit=limit)


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
Pagination = Annotated[PageParams, Depends(get_page_params)]
