"""Command Routes — execute, discover and upload for mutating handlers.

Invariants:
    - Only COMMAND handlers resolve here
    - Routes hold no business logic; everything goes through the Dispatcher
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile

from app.api.dependencies import get_dispatcher, get_identity, get_registry, watch_disconnect
from app.api.routes.dispatch_helpers import (
    envelope_response, file_envelope, parse_form_envelope, read_uploads,
)
from app.core.domain_types import HandlerKind, RouteVisibility
from app.core.identity import AccessIdentity
from app.core.module_registry import ModuleRegistry
from app.services.request_dispatcher import Dispatcher

router = APIRouter(prefix="/api/Command", tags=["command"])


@router.post("/Execute/{module}")
async def execute_command(
    module: str,
    request: Request,
    payload: Any = Body(...),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    async with watch_disconnect(request) as cancellation:
        result = await dispatcher.dispatch(
            module, payload, RouteVisibility.PRIVATE,
            route_kind=HandlerKind.COMMAND, identity=identity, cancellation=cancellation,
        )
    return envelope_response(result)


@router.get("/ListAll/{module}")
async def list_commands(module: str, registry: ModuleRegistry = Depends(get_registry)):
    return registry.list_handlers(module, HandlerKind.COMMAND)


@router.get("/Detail/{module}/{name}")
async def command_detail(
    module: str, name: str, registry: ModuleRegistry = Depends(get_registry),
):
    return registry.describe(module, name, HandlerKind.COMMAND)


@router.post("/Upload/{module}")
async def upload(
    module: str,
    request: Request,
    data: str = Form(...),
    files: list[UploadFile] = File(default=[]),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    """Multipart: "data" holds the JSON envelope, "files" the attachments."""
    payload = parse_form_envelope(data)
    uploads = await read_uploads(files)
    async with watch_disconnect(request) as cancellation:
        result = await dispatcher.dispatch(
            module, payload, RouteVisibility.PRIVATE,
            route_kind=HandlerKind.COMMAND, identity=identity,
            files=uploads, cancellation=cancellation,
        )
    return envelope_response(result)


@router.get("/{module}/{request_name}/file/{entity_id}")
async def command_file(
    module: str,
    request_name: str,
    entity_id: str,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    identity: AccessIdentity | None = Depends(get_identity),
):
    async with watch_disconnect(request) as cancellation:
        result = await dispatcher.dispatch(
            module, file_envelope(request_name, entity_id), RouteVisibility.PRIVATE,
            route_kind=HandlerKind.COMMAND, identity=identity, cancellation=cancellation,
        )
    return envelope_response(result)
