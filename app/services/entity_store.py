"""
Entity Store

Typed async CRUD over one SQLAlchemy model. The store only touches its own
table; relation handling lives in CompanyStore and RelationResolver.

Services own the transaction: every write commits before returning.
"""

from typing import Any, Generic, Iterable, List, Optional, Tuple, Type, TypeVar
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import ConflictError, NotFoundError
from app.schemas.pagination import PageParams

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore(Generic[ModelT]):
    """CRUD for a single model.

    Usage:
        store = EntityStore(db, Category, "Category")
        category = await store.create({"nombre_categoria": "Parques"})
    """

    def __init__(self, db: AsyncSession, model: Type[ModelT], resource_name: Optional[str] = None):
        self.db = db
        self.model = model
        self.resource_name = resource_name or model.__name__

    def _default_order(self) -> tuple:
        return (self.model.id,)

    async def get(self, entity_id: int) -> Optional[ModelT]:
        result = await self.db.execute(select(self.model).where(self.model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, entity_id: int) -> ModelT:
        entity = await self.get(entity_id)
        if entity is None:
            raise NotFoundError(self.resource_name, entity_id)
        return entity

    async def get_many(self, ids: Iterable[int]) -> List[ModelT]:
        """Rows whose id is in ``ids``, in one query. Missing ids are skipped."""
        ids = set(ids)
        if not ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

    async def existing_ids(self, ids: Iterable[int]) -> set:
        ids = set(ids)
        if not ids:
            return set()
        result = await self.db.execute(select(self.model.id).where(self.model.id.in_(ids)))
        return set(result.scalars().all())

    async def list(self, *conditions: Any, order_by: Optional[tuple] = None) -> List[ModelT]:
        query = select(self.model).where(*conditions).order_by(*(order_by or self._default_order()))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def page(
        self,
        *conditions: Any,
        params: PageParams,
        order_by: Optional[tuple] = None,
    ) -> Tuple[List[ModelT], int]:
        """One page of rows plus the total matching the same conditions."""
        query = select(self.model).where(*conditions)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            query.order_by(*(order_by or self._default_order()))
            .offset(params.offset)
            .limit(params.limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def count(self, *conditions: Any) -> int:
        query = select(func.count()).select_from(self.model).where(*conditions)
        return (await self.db.execute(query)).scalar() or 0

    async def commit(self) -> None:
        """Commit, turning unique-constraint violations into 409s."""
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning(f"{self.resource_name} write rejected: {exc.orig}")
            raise ConflictError(f"{self.resource_name} conflicts with an existing record")

    async def create(self, data: dict) -> ModelT:
        entity = self.model(**data)
        self.db.add(entity)
        await self.commit()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity_id: int, data: dict) -> Optional[ModelT]:
        entity = await self.get(entity_id)
        if entity is None:
            return None
        for field, value in data.items():
            setattr(entity, field, value)
        await self.commit()
        await self.db.refresh(entity)
        return entity

    async def _delete_dependents(self, entity_id: int) -> None:
        """Remove rows in other tables that point at ``entity_id``."""

    async def delete(self, entity_id: int) -> bool:
        """Hard delete. True iff a row was removed."""
        entity = await self.get(entity_id)
        if entity is None:
            return False
        await self._delete_dependents(entity_id)
        await self.db.delete(entity)
        await self.commit()
        return True
