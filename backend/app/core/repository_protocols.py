"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Handlers reach persistence only through Repository and ExecutionScopeLike
    - Implementations provided by shell via the execution scope

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Soft delete and paging are parameters on the query surface, not separate
      repository types
"""

from typing import Any, Protocol, Sequence, TypeVar

from app.core.domain_types import ModuleName
from app.core.identity import AccessIdentity

EntityT = TypeVar("EntityT")


class Repository(Protocol[EntityT]):
    """Contract for per-entity persistence — implemented by shell."""
    async def get(self, entity_id: str, include_deleted: bool = False) -> EntityT | None: ...
    async def get_all(self, is_deleted: bool = False) -> Sequence[EntityT]: ...
    async def find_by(self, is_deleted: bool | None = False, **criteria: Any) -> Sequence[EntityT]: ...
    async def first_by(self, is_deleted: bool | None = False, **criteria: Any) -> EntityT | None: ...
    async def add(self, entity: EntityT) -> EntityT: ...
    async def update(self, entity: EntityT) -> EntityT: ...
    async def delete(self, entity: EntityT, soft: bool = True) -> None: ...
    async def commit(self) -> None: ...
    async def paged(
        self, page_number: int, page_size: int, is_deleted: bool = False,
    ) -> tuple[Sequence[EntityT], int]: ...


class ExecutionScopeLike(Protocol):
    """Per-call scope handed to a handler instance.

    Holds the caller identity and the repositories bound to the call's own
    database session. Never shared between calls.
    """
    module: ModuleName
    identity: AccessIdentity | None

    def repository(self, entity_type: type[EntityT]) -> Repository[EntityT]: ...
