"""
Company Store

Company CRUD plus the bookkeeping the plain EntityStore does not do:

- ``categoriesIds`` / ``certificateIds`` are kept in the junction tables,
  rewritten wholesale whenever a write carries the list;
- referenced categories, certificates, plan and owner must exist on write;
- the membership end date is derived from start date and cadence;
- deleting a company removes its junction rows and opinions.

The stores for the referenced entities clean up after themselves on delete
so companies never keep ids of rows that are gone.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, ValidationError
from app.models.category import Category
from app.models.certificate import Certificate
from app.models.company import Company, CompanyCategory, CompanyCertificate
from app.models.membership_type import MembershipType
from app.models.opinion import Opinion
from app.models.user import User
from app.services.entity_store import EntityStore
from app.services.membership_pricing import END_FIELD, PERIOD_FIELD, START_FIELD, apply_membership_dates

logger = logging.getLogger(__name__)

CATEGORY_IDS = "categories_ids"
CERTIFICATE_IDS = "certificate_ids"


class CompanyStore(EntityStore[Company]):
    """Company persistence with junction-table relation ids."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Company, "Company")

    def _default_order(self) -> tuple:
        return (Company.created_at.desc(), Company.id.desc())

    async def _check_ids(self, model, ids: Sequence[int], field: str, label: str) -> None:
        found = await EntityStore(self.db, model).existing_ids(ids)
        missing = [i for i in ids if i not in found]
        if missing:
            raise ValidationError.for_field(
                field,
                f"Unknown {label} ids: {', '.join(str(i) for i in missing)}",
                "missing_reference",
            )

    async def validate_references(self, data: Dict[str, Any]) -> None:
        """Reject writes that point at rows which do not exist (400)."""
        if data.get(CATEGORY_IDS):
            await self._check_ids(Category, data[CATEGORY_IDS], "categoriesIds", "category")
        if data.get(CERTIFICATE_IDS):
            await self._check_ids(Certificate, data[CERTIFICATE_IDS], "certificateIds", "certificate")
        if data.get("membership_type_id") is not None:
            await self._check_ids(MembershipType, [data["membership_type_id"]], "membershipTypeId", "membership type")
        if data.get("user_id") is not None:
            await self._check_ids(User, [data["user_id"]], "userId", "user")

    async def _write_relations(
        self,
        company_id: int,
        category_ids: Optional[List[int]],
        certificate_ids: Optional[List[int]],
    ) -> None:
        if category_ids is not None:
            await self.db.execute(delete(CompanyCategory).where(CompanyCategory.company_id == company_id))
            if category_ids:
                await self.db.execute(
                    insert(CompanyCategory),
                    [
                        {"company_id": company_id, "category_id": cid, "position": pos}
                        for pos, cid in enumerate(category_ids)
                    ],
                )
        if certificate_ids is not None:
            await self.db.execute(delete(CompanyCertificate).where(CompanyCertificate.company_id == company_id))
            if certificate_ids:
                await self.db.execute(
                    insert(CompanyCertificate),
                    [
                        {"company_id": company_id, "certificate_id": cid, "position": pos}
                        for pos, cid in enumerate(certificate_ids)
                    ],
                )

    async def insert(self, data: dict) -> Company:
        """Validate and stage a new company with its relations. Does not commit."""
        data = dict(data)
        category_ids = data.pop(CATEGORY_IDS, None)
        certificate_ids = data.pop(CERTIFICATE_IDS, None)
        if not category_ids:
            raise ValidationError.for_field("categoriesIds", "At least one category is required", "too_short")

        await self.validate_references({CATEGORY_IDS: category_ids, CERTIFICATE_IDS: certificate_ids, **data})
        # A blank end date on create is not an override
        if data.get(END_FIELD) is None:
            data.pop(END_FIELD, None)
        apply_membership_dates({}, data)

        company = Company(**data)
        self.db.add(company)
        await self.db.flush()
        await self._write_relations(company.id, category_ids, certificate_ids or [])
        return company

    async def create(self, data: dict) -> Company:
        company = await self.insert(data)
        await self.commit()
        await self.db.refresh(company)

        logger.info(f"Company {company.id} created")
        return company

    async def update(self, entity_id: int, data: dict) -> Optional[Company]:
        company = await self.get(entity_id)
        if company is None:
            return None

        data = dict(data)
        if CATEGORY_IDS in data and not data[CATEGORY_IDS]:
            raise ValidationError.for_field("categoriesIds", "At least one category is required", "too_short")
        await self.validate_references(data)

        current = {
            START_FIELD: company.fecha_inicio_membresia,
            PERIOD_FIELD: company.membership_periodicidad,
            END_FIELD: company.fecha_fin_membresia,
        }
        apply_membership_dates(current, data)

        category_ids = data.pop(CATEGORY_IDS, None)
        certificate_ids = data.pop(CERTIFICATE_IDS, None)
        for field, value in data.items():
            setattr(company, field, value)
        # Relation-only edits still count as an update
        company.updated_at = func.now()

        await self._write_relations(company.id, category_ids, certificate_ids)
        await self.commit()
        await self.db.refresh(company)
        return company

    async def _delete_dependents(self, entity_id: int) -> None:
        await self.db.execute(delete(CompanyCategory).where(CompanyCategory.company_id == entity_id))
        await self.db.execute(delete(CompanyCertificate).where(CompanyCertificate.company_id == entity_id))
        await self.db.execute(delete(Opinion).where(Opinion.company_id == entity_id))

    async def list_for_user(self, user_id: int) -> List[Company]:
        return await self.list(Company.user_id == user_id)


class CategoryStore(EntityStore[Category]):
    """Deleting a category drops it from every company's ``categoriesIds``.

    A category that is the last one of some company cannot be deleted (409).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category, "Category")

    def _default_order(self) -> tuple:
        return (Category.nombre_categoria,)

    async def _only_category_of(self, entity_id: int) -> List[int]:
        """Ids of companies for which ``entity_id`` is the last category."""
        linked = select(CompanyCategory.company_id).where(CompanyCategory.category_id == entity_id)
        result = await self.db.execute(
            select(CompanyCategory.company_id)
            .where(CompanyCategory.company_id.in_(linked))
            .group_by(CompanyCategory.company_id)
            .having(func.count() == 1)
            .order_by(CompanyCategory.company_id)
        )
        return list(result.scalars().all())

    async def _delete_dependents(self, entity_id: int) -> None:
        orphaned = await self._only_category_of(entity_id)
        if orphaned:
            raise ConflictError(
                f"Category {entity_id} is the only category of companies "
                f"{', '.join(str(i) for i in orphaned)}; reassign them first"
            )
        result = await self.db.execute(
            delete(CompanyCategory).where(CompanyCategory.category_id == entity_id)
        )
        if result.rowcount:
            logger.info(f"Category {entity_id} removed from {result.rowcount} companies")


class CertificateStore(EntityStore[Certificate]):
    """Deleting a certificate drops it from every company's ``certificateIds``."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Certificate, "Certificate")

    async def _delete_dependents(self, entity_id: int) -> None:
        await self.db.execute(
            delete(CompanyCertificate).where(CompanyCertificate.certificate_id == entity_id)
        )


class MembershipTypeStore(EntityStore[MembershipType]):
    """Companies on a deleted plan keep their dates but lose the plan."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MembershipType, "MembershipType")

    async def _delete_dependents(self, entity_id: int) -> None:
        await self.db.execute(
            update(Company)
            .where(Company.membership_type_id == entity_id)
            .values(membership_type_id=None)
        )


class UserStore(EntityStore[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, User, "User")

    async def get_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.firebase_uid == firebase_uid))
        return result.scalar_one_or_none()

    async def _delete_dependents(self, entity_id: int) -> None:
        await self.db.execute(update(Company).where(Company.user_id == entity_id).values(user_id=None))
        await self.db.execute(
            update(Opinion).where(Opinion.aprobado_por == entity_id).values(aprobado_por=None)
        )
