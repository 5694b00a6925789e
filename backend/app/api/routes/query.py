"""Query Routes — execute, discover and download for read-only handlers.

Invariants:
    - Only QUERY handlers resolve here
    - File results are streamed by envelope_response, JSON results wrapped in the envelope
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from app.api.dependencies import get_dispatcher, get_identity, get_registry, watch_disconnect
from app.api.routes.dispatch_helpers import envelope_response, file_envelope
from app.core.domain_types import HandlerKind, RouteVisibility
from app.core.identity import AccessIdentity
from app.core.module_registry import ModuleRegistry
from app.services.request_dispatcher import Dispatcher

router = APIRouter(prefix="/api/Query", tags=["query"])


async def _dispatch_query(
    module: str, payload: Any, request: Request,
    dispatcher: Dispatcher, identity: AccessIdentity | None,
):
    async with watch_disconnect(request) as cancellation:
        result = await dispatcher.dispatch(
            module, payload, RouteVisibility.PRIVATE,
            route_kind=HandlerKind.QUERY, identity=identity, cancellation=cancellation,
        )
    return envelope_response(result)


@router.post("/Execute/{module}")
async def execute_query(
    module: str,
    request: Request,
    payload: Any = Body(...),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    return await _dispatch_query(module, payload, request, dispatcher, identity)


@router.get("/ListAll/{module}")
async def list_queries(module: str, registry: ModuleRegistry = Depends(get_registry)):
    return registry.list_handlers(module, HandlerKind.QUERY)


@router.get("/Detail/{module}/{name}")
async def query_detail(
    module: str, name: str, registry: ModuleRegistry = Depends(get_registry),
):
    return registry.describe(module, name, HandlerKind.QUERY)


@router.post("/download/{module}")
async def download(
    module: str,
    request: Request,
    payload: Any = Body(...),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    return await _dispatch_query(module, payload, request, dispatcher, identity)


@router.get("/{module}/{request_name}/file/{entity_id}")
async def query_file(
    module: str,
    request_name: str,
    entity_id: str,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    return await _dispatch_query(
        module, file_envelope(request_name, entity_id), request, dispatcher, identity,
    )
