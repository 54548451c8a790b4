from fastapi import APIRouter

from app.api.deps import DbSession
from app.schemas.statistics import StatisticsResponse
from app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("", response_model=StatisticsResponse)
async def get_statistics(db: DbSession):
    """Counters for the dashboard cards."""
    return await StatisticsService(db).get_statistics()
