from fastapi import APIRouter, Query, status
from typing import List, Optional

from app.api.deps import DbSession, Pagination
from app.exceptions import NotFoundError
from app.models.company import CompanyStatus
from app.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyWithDetails,
    CompanyListResponse,
)
from app.services.company_query import CompanyFilters, CompanyQueryService, QueryScope
from app.services.company_store import CompanyStore
from app.services.relation_resolver import RelationResolver

router = APIRouter()


@router.get("", response_model=CompanyListResponse)
async def list_companies(
    db: DbSession,
    pagination: Pagination,
    search: Optional[str] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    membership_type_id: Optional[int] = Query(None, alias="membershipTypeId"),
    estado: Optional[CompanyStatus] = None,
    scope: QueryScope = QueryScope.admin,
):
    """List companies with filtering, pagination and hydrated relations.

    ``scope=public`` hides non-active companies unless ``estado`` asks for
    them explicitly.
    """
    filters = CompanyFilters(
        search=search,
        category_id=category_id,
        membership_type_id=membership_type_id,
        estado=estado,
        scope=scope,
    )
    return await CompanyQueryService(db).list_companies(filters, pagination)


@router.get("/user/{user_id}", response_model=List[CompanyWithDetails])
async def list_user_companies(user_id: int, db: DbSession):
    """All companies owned by a user, newest first."""
    companies = await CompanyStore(db).list_for_user(user_id)
    return await RelationResolver(db).resolve_many(companies)


@router.get("/{company_id}", response_model=CompanyWithDetails)
async def get_company(company_id: int, db: DbSession):
    """Get a single company by ID."""
    company = await CompanyStore(db).get_or_404(company_id)
    return await RelationResolver(db).resolve_one(company)


@router.post("", response_model=CompanyWithDetails, status_code=status.HTTP_201_CREATED)
async def create_company(company_data: CompanyCreate, db: DbSession):
    """Create a new company."""
    company = await CompanyStore(db).create(company_data.model_dump())
    return await RelationResolver(db).resolve_one(company)


@router.put("/{company_id}", response_model=CompanyWithDetails)
async def update_company(company_id: int, company_data: CompanyUpdate, db: DbSession):
    """Update a company. Only the fields sent are changed."""
    company = await CompanyStore(db).update(company_id, company_data.model_dump(exclude_unset=True))
    if company is None:
        raise NotFoundError("Company", company_id)
    return await RelationResolver(db).resolve_one(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(company_id: int, db: DbSession):
    """Delete a company with its opinions."""
    if not await CompanyStore(db).delete(company_id):
        raise NotFoundError("Company", company_id)
