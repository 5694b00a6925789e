"""Database Access — async engine, per-call sessions and SQLAlchemy error translation.

Invariants:
    - One engine per process; each execution scope opens its own session from it
    - A session left uncommitted is rolled back when its scope closes
    - SQLAlchemy errors never reach a caller as raw text (SQL and bound
      parameters stay in the logs); translate_error() turns them into DatabaseError
    - SQLite URLs skip pool sizing

Design Decisions:
    - translate_error() shared by the session manager and the repository: the
      repository runs inside handle(), which would otherwise report the raw
      driver message in the failure envelope
    - expire_on_commit=False: handlers map rows to response models after commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import DatabaseError
from app.db.base import Base

logger = logging.getLogger(__name__)


def translate_error(error: SQLAlchemyError, operation: str) -> DatabaseError:
    """Log the full driver error and return a DatabaseError safe to show callers."""
    if isinstance(error, IntegrityError):
        reason = "Integrity constraint violated"
    elif isinstance(error, OperationalError):
        reason = "Connection or operational error"
    elif isinstance(error, DBAPIError):
        reason = "Database driver error"
    else:
        reason = "Database operation failed"
    logger.error(f"{reason} during {operation}: {error}")
    return DatabaseError(reason, operation)


class DatabaseSessionManager:
    """Owns the engine and hands out sessions to execution scopes."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            raise translate_error(e, "session") from e
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create the admin tables from ORM metadata."""
        import app.models  # noqa: F401
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Set by the lifespan (or patched by tests)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
