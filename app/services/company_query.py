"""
Company Query Engine

Builds the filter predicate for company listings and runs it as one page
plus a total counted over the same predicate.

Filters combine with AND:
    search            name OR description contains the text (case-insensitive)
    category_id       company lists this category
    membership_type_id, estado, user_id   equality

``scope="public"`` narrows an unfiltered status to ``activo``; the admin
scope (default) lists every status.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company, CompanyCategory, CompanyStatus
from app.schemas.company import CompanyListResponse
from app.schemas.pagination import PageParams, total_pages
from app.services.company_store import CompanyStore
from app.services.relation_resolver import RelationResolver


class QueryScope(str, Enum):
    admin = "admin"
    public = "public"


@dataclass
class CompanyFilters:
    search: Optional[str] = None
    category_id: Optional[int] = None
    membership_type_id: Optional[int] = None
    estado: Optional[CompanyStatus] = None
    user_id: Optional[int] = None
    scope: QueryScope = QueryScope.admin

    @property
    def effective_estado(self) -> Optional[CompanyStatus]:
        if self.estado is None and self.scope == QueryScope.public:
            return CompanyStatus.activo
        return self.estado


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_company_conditions(filters: CompanyFilters) -> List[Any]:
    """SQL predicates for ``filters``. An empty list matches every company."""
    conditions = []

    search = (filters.search or "").strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        conditions.append(
            or_(
                Company.nombre_empresa.ilike(pattern, escape="\\"),
                Company.descripcion_empresa.ilike(pattern, escape="\\"),
            )
        )

    if filters.category_id is not None:
        conditions.append(
            Company.id.in_(
                select(CompanyCategory.company_id).where(CompanyCategory.category_id == filters.category_id)
            )
        )

    if filters.membership_type_id is not None:
        conditions.append(Company.membership_type_id == filters.membership_type_id)

    estado = filters.effective_estado
    if estado is not None:
        conditions.append(Company.estado == estado)

    if filters.user_id is not None:
        conditions.append(Company.user_id == filters.user_id)

    return conditions


class CompanyQueryService:
    """Filtered, paginated and hydrated company listings."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = CompanyStore(db)
        self.resolver = RelationResolver(db)

    async def list_companies(self, filters: CompanyFilters, params: PageParams) -> CompanyListResponse:
        companies, total = await self.store.page(*build_company_conditions(filters), params=params)
        return CompanyListResponse(
            companies=await self.resolver.resolve_many(companies),
            total=total,
            page=params.page,
            total_pages=total_pages(total, params.limit),
        )
