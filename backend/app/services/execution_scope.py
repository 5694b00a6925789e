"""Execution Scope — per-call container for the DB session, identity and repositories.

Invariants:
    - Created fresh for every dispatched call, closed when the call ends
    - Uncommitted work is rolled back when the scope closes
    - Repositories are cached per entity type inside one scope only
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import ModuleName
from app.core.identity import AccessIdentity
from app.infrastructure import database
from app.infrastructure.repository import SqlAlchemyRepository

EntityT = TypeVar("EntityT")


class ExecutionScope:
    def __init__(
        self, db: AsyncSession, identity: AccessIdentity | None, module: ModuleName,
    ):
        self.db = db
        self.identity = identity
        self.module = module
        self._repositories: dict[type, SqlAlchemyRepository] = {}

    def repository(self, entity_type: type[EntityT]) -> SqlAlchemyRepository[EntityT]:
        repo = self._repositories.get(entity_type)
        if repo is None:
            repo = SqlAlchemyRepository(self.db, entity_type, self.identity)
            self._repositories[entity_type] = repo
        return repo


@asynccontextmanager
async def open_execution_scope(
    identity: AccessIdentity | None, module: ModuleName,
) -> AsyncIterator[ExecutionScope]:
    """Scope backed by a new session from the process-wide db_manager."""
    async with database.get_db_manager().session() as db:
        yield ExecutionScope(db, identity, module)
