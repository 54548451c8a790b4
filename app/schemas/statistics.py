from app.schemas.types import ApiModel


class StatisticsResponse(ApiModel):
    """Dashboard counters.

    ``activeUsers`` counts every user row; there is no activity tracking.
    ``totalRevenue`` is projected from each company's plan price, not read
    from a payments ledger.
    """
    total_companies: int
    active_users: int
    new_registrations: int
    total_revenue: float
