from fastapi import APIRouter, Query, status
from typing import Optional

from app.api.deps import DbSession, Pagination
from app.exceptions import NotFoundError
from app.models.opinion import OpinionStatus
from app.schemas.opinion import (
    OpinionCreate,
    OpinionUpdate,
    OpinionModerationRequest,
    OpinionResponse,
    OpinionListResponse,
    OpinionStatusInput,
)
from app.services.opinion_service import OpinionService

router = APIRouter()


@router.get("", response_model=OpinionListResponse)
async def list_opinions(
    db: DbSession,
    pagination: Pagination,
    estado: Optional[OpinionStatusInput] = None,
    company_id: Optional[int] = Query(None, alias="companyId"),
):
    """List opinions, newest first, optionally by status or company."""
    return await OpinionService(db).list_opinions(pagination, estado=estado, company_id=company_id)


@router.get("/{opinion_id}", response_model=OpinionResponse)
async def get_opinion(opinion_id: int, db: DbSession):
    """Get a single opinion by ID."""
    return await OpinionService(db).store.get_or_404(opinion_id)


@router.post("", response_model=OpinionResponse, status_code=status.HTTP_201_CREATED)
async def create_opinion(opinion_data: OpinionCreate, db: DbSession):
    """Submit an opinion about a company."""
    return await OpinionService(db).create(opinion_data.model_dump())


@router.put("/{opinion_id}", response_model=OpinionResponse)
async def update_opinion(opinion_id: int, opinion_data: OpinionUpdate, db: DbSession):
    """Update an opinion."""
    return await OpinionService(db).update(opinion_id, opinion_data.model_dump(exclude_unset=True))


@router.post("/{opinion_id}/approve", response_model=OpinionResponse)
async def approve_opinion(opinion_id: int, db: DbSession, moderation: Optional[OpinionModerationRequest] = None):
    """Publish an opinion."""
    approved_by = moderation.approved_by if moderation else None
    return await OpinionService(db).moderate(opinion_id, OpinionStatus.aprobada, approved_by)


@router.post("/{opinion_id}/reject", response_model=OpinionResponse)
async def reject_opinion(opinion_id: int, db: DbSession, moderation: Optional[OpinionModerationRequest] = None):
    """Reject an opinion."""
    approved_by = moderation.approved_by if moderation else None
    return await OpinionService(db).moderate(opinion_id, OpinionStatus.rechazada, approved_by)


@router.delete("/{opinion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_opinion(opinion_id: int, db: DbSession):
    """Delete an opinion."""
    if not await OpinionService(db).store.delete(opinion_id):
        raise NotFoundError("Opinion", opinion_id)
