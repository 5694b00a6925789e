"""SQLAlchemy Repository — per-entity persistence bound to one call's session.

Invariants:
    - Soft-deleted rows are hidden unless is_deleted/include_deleted asks for them
    - add()/update() stamp audit columns from the caller identity when the entity has them
    - Nothing is committed until commit() is called
    - A failed statement rolls the session back and surfaces as DatabaseError;
      driver text (SQL, bound parameters) never leaves this module

Design Decisions:
    - One generic class over per-entity repositories: handlers get one through
      the execution scope (scope.repository(Contract))
    - paged() returns (rows, total) so handlers build PagedResponseModel themselves
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.identity import AccessIdentity
from app.infrastructure.database import translate_error

EntityT = TypeVar("EntityT")


class SqlAlchemyRepository(Generic[EntityT]):

    def __init__(
        self,
        db: AsyncSession,
        entity_type: type[EntityT],
        identity: AccessIdentity | None = None,
    ):
        self.db = db
        self.entity_type = entity_type
        self.identity = identity

    @asynccontextmanager
    async def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise translate_error(e, operation) from e

    def _select(self, is_deleted: bool | None):
        stmt = select(self.entity_type)
        if is_deleted is not None and hasattr(self.entity_type, "is_deleted"):
            stmt = stmt.where(self.entity_type.is_deleted == is_deleted)
        return stmt

    async def get(self, entity_id: str, include_deleted: bool = False) -> EntityT | None:
        async with self._guard("query"):
            entity = await self.db.get(self.entity_type, entity_id)
        if entity is None:
            return None
        if not include_deleted and getattr(entity, "is_deleted", False):
            return None
        return entity

    async def get_all(self, is_deleted: bool = False) -> Sequence[EntityT]:
        async with self._guard("query"):
            result = await self.db.execute(self._select(is_deleted))
        return result.scalars().all()

    async def find_by(self, is_deleted: bool | None = False, **criteria: Any) -> Sequence[EntityT]:
        stmt = self._select(is_deleted).filter_by(**criteria)
        async with self._guard("query"):
            result = await self.db.execute(stmt)
        return result.scalars().all()

    async def first_by(self, is_deleted: bool | None = False, **criteria: Any) -> EntityT | None:
        rows = await self.find_by(is_deleted=is_deleted, **criteria)
        return rows[0] if rows else None

    async def add(self, entity: EntityT) -> EntityT:
        if self.identity is not None and hasattr(entity, "created_by"):
            entity.created_by = self.identity.user_id
        self.db.add(entity)
        async with self._guard("insert"):
            await self.db.flush()
        return entity

    async def update(self, entity: EntityT) -> EntityT:
        if hasattr(entity, "last_modified_time"):
            entity.last_modified_time = datetime.now(timezone.utc)
        if self.identity is not None and hasattr(entity, "last_modified_by"):
            entity.last_modified_by = self.identity.user_id
        self.db.add(entity)
        async with self._guard("update"):
            await self.db.flush()
        return entity

    async def delete(self, entity: EntityT, soft: bool = True) -> None:
        if soft and hasattr(entity, "is_deleted"):
            entity.is_deleted = True
            await self.update(entity)
            return
        async with self._guard("delete"):
            await self.db.delete(entity)
            await self.db.flush()

    async def commit(self) -> None:
        async with self._guard("commit"):
            await self.db.commit()

    async def paged(
        self, page_number: int, page_size: int, is_deleted: bool = False,
    ) -> tuple[Sequence[EntityT], int]:
        count_stmt = select(func.count()).select_from(self._select(is_deleted).subquery())
        stmt = self._select(is_deleted)
        if hasattr(self.entity_type, "create_time"):
            stmt = stmt.order_by(self.entity_type.create_time, self.entity_type.id)
        stmt = stmt.offset(max(page_number - 1, 0) * page_size).limit(page_size)
        async with self._guard("query"):
            total = (await self.db.execute(count_stmt)).scalar_one()
            rows = (await self.db.execute(stmt)).scalars().all()
        return rows, total
