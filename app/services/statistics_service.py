"""
Statistics Aggregator

Counters for the admin dashboard cards. Each counter is one aggregate
query; nothing is cached.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.company import Company
from app.models.membership_type import MembershipType
from app.models.user import User
from app.schemas.statistics import StatisticsResponse
from app.services.membership_pricing import find_price, first_price

logger = logging.getLogger(__name__)


class StatisticsService:
    """Dashboard counters."""

    def __init__(self, db: AsyncSession, window_days: int | None = None):
        self.db = db
        self.window_days = window_days if window_days is not None else settings.NEW_REGISTRATION_WINDOW_DAYS

    async def _count(self, model, *conditions) -> int:
        result = await self.db.execute(select(func.count()).select_from(model).where(*conditions))
        return result.scalar() or 0

    async def new_registrations(self) -> int:
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.window_days)
        return await self._count(Company, Company.created_at >= cutoff)

    async def projected_revenue(self) -> Decimal:
        """Sum of each subscribed company's plan price for its cadence.

        Companies without a cadence are billed at the plan's first option;
        plans without prices contribute nothing.
        """
        result = await self.db.execute(
            select(Company.membership_periodicidad, MembershipType.opciones_precios)
            .join(MembershipType, MembershipType.id == Company.membership_type_id)
        )
        total = Decimal("0")
        for periodicidad, opciones in result.all():
            price = find_price(opciones, periodicidad) if periodicidad else None
            if price is None:
                price = first_price(opciones)
            if price is not None:
                total += price
        return total

    async def get_statistics(self) -> StatisticsResponse:
        stats = StatisticsResponse(
            total_companies=await self._count(Company),
            # Every user row counts; there is no last-seen tracking
            active_users=await self._count(User),
            new_registrations=await self.new_registrations(),
            total_revenue=float(await self.projected_revenue()),
        )
        logger.debug(f"Statistics computed: {stats.model_dump()}")
        return stats
