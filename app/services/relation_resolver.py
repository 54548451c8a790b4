"""
Relation Resolver

Turns stored Company rows into ``CompanyWithDetails`` views. For a whole
page it issues at most one query per relation type, however many companies
the page holds:

    1. junction rows joined with their categories
    2. junction rows joined with their certificates
    3. membership plans by id
    4. owning users by id

References to rows that are gone are skipped (lists) or left ``None``
(plan, user); resolution never fails because of them.
"""

from collections import defaultdict
from typing import Dict, List, Sequence
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category import Category
from app.models.certificate import Certificate
from app.models.company import Company, CompanyCategory, CompanyCertificate
from app.models.membership_type import MembershipType
from app.models.user import User
from app.schemas.category import CategoryResponse
from app.schemas.certificate import CertificateResponse
from app.schemas.company import CompanyWithDetails
from app.schemas.membership_type import MembershipTypeResponse
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)

_LIST_COLUMNS = (
    "galeria_productos_urls",
    "redes_sociales",
    "representantes_ventas",
    "paises_presencia",
    "estados_presencia",
    "ciudades_presencia",
)


def company_columns(company: Company) -> dict:
    """Column values of a company row as a plain dict."""
    data = {column.key: getattr(company, column.key) for column in Company.__table__.columns}
    for key in _LIST_COLUMNS:
        if data.get(key) is None:
            data[key] = []
    return data


class RelationResolver:
    """Batch hydration of company relations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _categories_by_company(self, company_ids: Sequence[int]) -> Dict[int, List[Category]]:
        result = await self.db.execute(
            select(CompanyCategory.company_id, Category)
            .join(Category, Category.id == CompanyCategory.category_id)
            .where(CompanyCategory.company_id.in_(company_ids))
            .order_by(CompanyCategory.company_id, CompanyCategory.position)
        )
        grouped: Dict[int, List[Category]] = defaultdict(list)
        for company_id, category in result.all():
            grouped[company_id].append(category)
        return grouped

    async def _certificates_by_company(self, company_ids: Sequence[int]) -> Dict[int, List[Certificate]]:
        result = await self.db.execute(
            select(CompanyCertificate.company_id, Certificate)
            .join(Certificate, Certificate.id == CompanyCertificate.certificate_id)
            .where(CompanyCertificate.company_id.in_(company_ids))
            .order_by(CompanyCertificate.company_id, CompanyCertificate.position)
        )
        grouped: Dict[int, List[Certificate]] = defaultdict(list)
        for company_id, certificate in result.all():
            grouped[company_id].append(certificate)
        return grouped

    async def _by_id(self, model, ids: set) -> dict:
        if not ids:
            return {}
        result = await self.db.execute(select(model).where(model.id.in_(ids)))
        return {row.id: row for row in result.scalars().all()}

    async def resolve_many(self, companies: Sequence[Company]) -> List[CompanyWithDetails]:
        """Hydrate a page of companies, keeping the page order."""
        if not companies:
            return []

        company_ids = [c.id for c in companies]
        categories = await self._categories_by_company(company_ids)
        certificates = await self._certificates_by_company(company_ids)
        plans = await self._by_id(
            MembershipType, {c.membership_type_id for c in companies if c.membership_type_id is not None}
        )
        users = await self._by_id(User, {c.user_id for c in companies if c.user_id is not None})

        details = []
        for company in companies:
            company_categories = categories.get(company.id, [])
            company_certificates = certificates.get(company.id, [])
            data = company_columns(company)
            data.update(
                categories_ids=[c.id for c in company_categories],
                certificate_ids=[c.id for c in company_certificates],
                categories=[CategoryResponse.model_validate(c) for c in company_categories],
                certificates=[CertificateResponse.model_validate(c) for c in company_certificates],
                membership_type=(
                    MembershipTypeResponse.model_validate(plans[company.membership_type_id])
                    if company.membership_type_id in plans
                    else None
                ),
                user=UserResponse.model_validate(users[company.user_id]) if company.user_id in users else None,
            )
            details.append(CompanyWithDetails.model_validate(data))

        logger.debug(f"Resolved relations for {len(details)} companies")
        return details

    async def resolve_one(self, company: Company) -> CompanyWithDetails:
        return (await self.resolve_many([company]))[0]
