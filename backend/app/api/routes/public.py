"""Public Routes — unauthenticated surface restricted to anonymous-allowed handlers.

Invariants:
    - Every call is dispatched with PUBLIC visibility; the gate forbids the rest
    - Both kinds resolve here (route_kind=None)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from app.api.dependencies import get_dispatcher, get_identity, watch_disconnect
from app.api.routes.dispatch_helpers import envelope_response, file_envelope
from app.core.domain_types import RouteVisibility
from app.core.identity import AccessIdentity
from app.services.request_dispatcher import Dispatcher

router = APIRouter(prefix="/api/public", tags=["public"])


async def _dispatch_public(
    module: str, payload: Any, request: Request,
    dispatcher: Dispatcher, identity: AccessIdentity | None,
):
    async with watch_disconnect(request) as cancellation:
        result = await dispatcher.dispatch(
            module, payload, RouteVisibility.PUBLIC,
            route_kind=None, identity=identity, cancellation=cancellation,
        )
    return envelope_response(result)


@router.post("/execute/{module}")
async def execute_public(
    module: str,
    request: Request,
    payload: Any = Body(...),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    return await _dispatch_public(module, payload, request, dispatcher, identity)


@router.get("/{module}/{request_name}/file/{entity_id}")
async def public_file(
    module: str,
    request_name: str,
    entity_id: str,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    return await _dispatch_public(
        module, file_envelope(request_name, entity_id), request, dispatcher, identity,
    )
