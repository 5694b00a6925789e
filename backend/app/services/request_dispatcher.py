"""Request Dispatcher — the single entry point from transport to handlers.

Invariants:
    - Received -> Resolved -> Authorized -> Bound -> Validated -> Executing -> {Succeeded | Failed}
    - Malformed envelope / unknown module / denied authorization raise (transport rejection)
    - Unknown request name, binding and validation failures return failure envelopes
    - No handler code runs before authorization and validation pass
    - Handler exceptions never propagate past dispatch()
    - Each call gets a fresh execution scope and handler instance; nothing is retried

Design Decisions:
    - Authorization denial raised, not enveloped: it is a security boundary,
      the transport maps it to 401/403 (ADR: rejection vs business failure)
    - ErrorKind on every failure envelope: callers branch on a code, never on text
    - scope_factory injected: tests swap the session source without patching
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable

from pydantic import ValidationError

from app.core import parameter_binder
from app.core.authorization_gate import authorize
from app.core.cancellation import CancellationToken
from app.core.domain_types import ErrorKind, HandlerKind, ModuleName, RouteVisibility
from app.core.envelopes import RequestEnvelope, ResultEnvelope, utc_now
from app.core.errors import (
    BindingError, ErrorContext, ForbiddenError, HandlerNotFoundError,
    InvalidModuleError, InvalidRequestError, UnauthorizedError, ValidationFailedError,
)
from app.core.identity import AccessIdentity
from app.core.module_registry import ModuleRegistry
from app.core.wire_models import UploadedFile
from app.services.execution_scope import ExecutionScope, open_execution_scope

logger = logging.getLogger(__name__)

ScopeFactory = Callable[
    [AccessIdentity | None, ModuleName], AbstractAsyncContextManager[ExecutionScope],
]


def parse_envelope(payload: Any) -> RequestEnvelope:
    """Validate the raw body; keys are matched case-insensitively."""
    if isinstance(payload, RequestEnvelope):
        return payload
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object.")
    data = parameter_binder.normalize_keys(RequestEnvelope, payload)
    try:
        return RequestEnvelope.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidRequestError(f"Invalid request envelope: {fields or 'malformed'}.") from e


class Dispatcher:
    """Resolves, authorizes, binds, validates and executes one call."""

    def __init__(
        self, registry: ModuleRegistry, scope_factory: ScopeFactory = open_execution_scope,
    ):
        self.registry = registry
        self.scope_factory = scope_factory

    async def dispatch(
        self,
        module: ModuleName | str,
        payload: Any,
        visibility: RouteVisibility,
        *,
        route_kind: HandlerKind | None,
        identity: AccessIdentity | None = None,
        files: list[UploadedFile] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ResultEnvelope:
        cancellation = cancellation or CancellationToken()
        parsed_module = ModuleName.parse(module)
        request = parse_envelope(payload)
        request.received_time = utc_now()

        context = ErrorContext(
            module=str(getattr(module, "value", module)),
            request_name=request.request_name,
            request_id=request.request_id,
        )
        if parsed_module is None:
            raise InvalidModuleError(context.module, context)
        log_extra = {
            "request_id": request.request_id,
            "request_name": request.request_name,
            "module_name": parsed_module.value,
        }

        # Resolved
        try:
            descriptor = self.registry.resolve(parsed_module, request.request_name, route_kind)
        except InvalidModuleError as e:
            e.context = context
            raise
        except HandlerNotFoundError as e:
            logger.warning("Handler not found", extra={**log_extra, "error_kind": ErrorKind.HANDLER_NOT_FOUND.value})
            return ResultEnvelope.failed(request, e.message, ErrorKind.HANDLER_NOT_FOUND)

        # Authorized
        decision = authorize(descriptor, identity, visibility)
        if not decision.allowed:
            logger.warning(
                "Request rejected by authorization gate",
                extra={**log_extra, "handler": descriptor.name, "error_kind": decision.reason.value},
            )
            if decision.reason == ErrorKind.FORBIDDEN:
                raise ForbiddenError(context=context)
            raise UnauthorizedError(context=context)

        # Bound + Validated
        try:
            parameter = parameter_binder.bind(descriptor, request.parameter, files)
            parameter_binder.validate(parameter)
        except BindingError as e:
            return self._invalid(request, e, ErrorKind.BINDING_ERROR, log_extra)
        except ValidationFailedError as e:
            return self._invalid(request, e, ErrorKind.VALIDATION_FAILED, log_extra)

        # Executing
        try:
            async with self.scope_factory(identity, parsed_module) as scope:
                handler = descriptor.handler_type(scope)
                return await handler.handle(request, parameter, cancellation)
        except Exception as e:
            logger.exception(
                "Execution scope failed",
                extra={**log_extra, "handler": descriptor.name,
                       "error_kind": ErrorKind.EXECUTION_FAILURE.value},
            )
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            return ResultEnvelope.failed(request, message, ErrorKind.EXECUTION_FAILURE)

    def _invalid(
        self, request: RequestEnvelope, error: BindingError | ValidationFailedError,
        kind: ErrorKind, log_extra: dict,
    ) -> ResultEnvelope:
        logger.info(
            "Parameter rejected",
            extra={**log_extra, "error_kind": kind.value, "error_code": error.code},
        )
        return ResultEnvelope.failed(request, error.message, kind, error.violations)
