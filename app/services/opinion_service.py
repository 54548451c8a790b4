"""
Opinion moderation.

Opinions arrive ``pendiente`` and become visible once approved. Approving
or rejecting stamps the moderator and the moment of the decision.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.company import Company
from app.models.opinion import Opinion, OpinionStatus
from app.models.user import User
from app.schemas.opinion import OpinionListResponse, OpinionResponse
from app.schemas.pagination import PageParams, total_pages
from app.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class OpinionService:
    """CRUD and moderation for opinions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = EntityStore(db, Opinion, "Opinion")

    async def _require_company(self, company_id: int) -> None:
        if not await EntityStore(self.db, Company).existing_ids([company_id]):
            raise ValidationError.for_field("companyId", f"Unknown company id: {company_id}", "missing_reference")

    async def list_opinions(
        self,
        params: PageParams,
        estado: Optional[OpinionStatus] = None,
        company_id: Optional[int] = None,
    ) -> OpinionListResponse:
        conditions: List[Any] = []
        if estado is not None:
            conditions.append(Opinion.estado == estado)
        if company_id is not None:
            conditions.append(Opinion.company_id == company_id)

        opinions, total = await self.store.page(
            *conditions,
            params=params,
            order_by=(Opinion.created_at.desc(), Opinion.id.desc()),
        )
        return OpinionListResponse(
            opinions=[OpinionResponse.model_validate(o) for o in opinions],
            total=total,
            page=params.page,
            total_pages=total_pages(total, params.limit),
        )

    async def create(self, data: dict) -> Opinion:
        await self._require_company(data["company_id"])
        return await self.store.create(data)

    async def update(self, opinion_id: int, data: dict) -> Opinion:
        await self.store.get_or_404(opinion_id)
        return await self.store.update(opinion_id, data)

    async def moderate(self, opinion_id: int, estado: OpinionStatus, approved_by: Optional[int] = None) -> Opinion:
        """Approve or reject an opinion, recording who did it and when."""
        opinion = await self.store.get_or_404(opinion_id)
        if approved_by is not None and not await EntityStore(self.db, User).existing_ids([approved_by]):
            raise ValidationError.for_field("approvedBy", f"Unknown user id: {approved_by}", "missing_reference")

        opinion.estado = estado
        opinion.aprobado_por = approved_by
        opinion.fecha_aprobacion = datetime.now(timezone.utc)
        await self.store.commit()
        await self.db.refresh(opinion)

        logger.info(f"Opinion {opinion_id} marked {estado.value} by user {approved_by}")
        return opinion
