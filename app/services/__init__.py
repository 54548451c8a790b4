# Services module
from app.services.entity_store import EntityStore
from app.services.company_store import (
    CompanyStore,
    CategoryStore,
    CertificateStore,
    MembershipTypeStore,
    UserStore,
)
from app.services.relation_resolver import RelationResolver
from app.services.company_query import CompanyFilters, CompanyQueryService, QueryScope
from app.services.statistics_service import StatisticsService
from app.services.opinion_service import OpinionService
