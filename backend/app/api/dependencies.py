"""API Dependencies — registry, dispatcher, caller identity and disconnect watching.

Invariants:
    - The registry comes from app.state (built and frozen at import)
    - A missing, malformed or "Bearer null" Authorization header is an anonymous caller
    - The disconnect watcher never outlives its request

Design Decisions:
    - Depends() for registry/dispatcher/identity: tests override them via
      app.dependency_overrides like any other dependency
    - Disconnect polling over server hooks: works the same under uvicorn and ASGI test transports
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, Header, Request

from app.config import get_settings
from app.core.cancellation import CancellationToken
from app.core.identity import AccessIdentity
from app.core.module_registry import ModuleRegistry
from app.infrastructure.security import get_token_service
from app.services.request_dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def get_registry(request: Request) -> ModuleRegistry:
    return request.app.state.registry


def get_dispatcher(registry: ModuleRegistry = Depends(get_registry)) -> Dispatcher:
    return Dispatcher(registry)


def get_identity(
    authorization: str | None = Header(default=None),
) -> AccessIdentity | None:
    return get_token_service().decode_header(authorization)


async def _watch(request: Request, token: CancellationToken, interval: float) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            logger.info("Client disconnected", extra={"path": request.url.path})
            token.cancel()
            return
        await asyncio.sleep(interval)


@asynccontextmanager
async def watch_disconnect(request: Request) -> AsyncIterator[CancellationToken]:
    """Cancellation token that fires when the client goes away."""
    token = CancellationToken()
    watcher = asyncio.create_task(
        _watch(request, token, get_settings().disconnect_poll_seconds),
    )
    try:
        yield token
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)
