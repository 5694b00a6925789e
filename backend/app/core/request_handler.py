"""Request Handler - closed two-variant capability (Command / Query) over one wrapper.

Invariants:
    - A concrete handler extends exactly one of CommandHandler / QueryHandler
    - parameter_model / response_model come from the generic arguments
    - handle() never lets a handler exception escape; it returns a failure envelope
    - A handler instance serves exactly one call (fresh per execution scope)

Design Decisions:
    - Generic arguments read in __init_subclass__: the typed signature is the
      single declaration of a handler's input/output shapes
    - Auth markers as class decorators: declared next to the class name,
      readable in the registration table without instantiation
    - Single polymorphic call site (handle): timing, logging and error capture
      are shared, execute() holds only business logic
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar, get_args, get_origin

from app.core.cancellation import CancellationToken
from app.core.domain_types import ErrorKind
from app.core.envelopes import RequestEnvelope, ResultEnvelope
from app.core.errors import LegalError, RequestCancelledError
from app.core.repository_protocols import ExecutionScopeLike
from app.core.wire_models import ParameterModel

P = TypeVar("P", bound=ParameterModel)
R = TypeVar("R")


class RequestHandler(ABC, Generic[P, R]):
    """Shared base. Subclass CommandHandler or QueryHandler, never this."""

    parameter_model: ClassVar[type[ParameterModel] | None] = None
    response_model: ClassVar[Any] = None
    requires_auth: ClassVar[bool] = False
    allows_anonymous: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", ()):
            origin = get_origin(base)
            if not (isinstance(origin, type) and issubclass(origin, RequestHandler)):
                continue
            args = get_args(base)
            if len(args) == 2 and not any(isinstance(a, TypeVar) for a in args):
                cls.parameter_model, cls.response_model = args

    def __init__(self, scope: ExecutionScopeLike) -> None:
        self.scope = scope
        self.logger = logging.getLogger(f"{type(self).__module__}.{type(self).__name__}")

    @property
    def identity(self):
        return self.scope.identity

    @abstractmethod
    async def execute(self, parameter: P, cancellation: CancellationToken) -> R:
        """Business logic. Raise to fail; the message reaches the caller."""

    async def handle(
        self,
        request: RequestEnvelope,
        parameter: P,
        cancellation: CancellationToken,
    ) -> ResultEnvelope:
        """Run execute() under the shared timing/logging/error-capture wrapper."""
        started = time.perf_counter()
        log_extra = {
            "request_id": request.request_id,
            "request_name": request.request_name,
            "module_name": self.scope.module.value,
            "handler": type(self).__name__,
        }
        try:
            result = await cancellation.run(self.execute(parameter, cancellation))
        except RequestCancelledError as e:
            self.logger.warning(
                "Request cancelled",
                extra={**log_extra, "error_kind": ErrorKind.CANCELLED.value},
            )
            return ResultEnvelope.failed(request, e.message, ErrorKind.CANCELLED)
        except Exception as e:
            message = e.message if isinstance(e, LegalError) else str(e)
            self.logger.exception(
                "Handler execution failed",
                extra={
                    **log_extra,
                    "error_code": getattr(e, "code", type(e).__name__),
                    "error_kind": ErrorKind.EXECUTION_FAILURE.value,
                },
            )
            return ResultEnvelope.failed(
                request, message or type(e).__name__, ErrorKind.EXECUTION_FAILURE,
            )

        self.logger.info(
            "Handler executed",
            extra={**log_extra, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
        return ResultEnvelope.succeeded(request, result)


class CommandHandler(RequestHandler[P, R]):
    """Mutating handler."""


class QueryHandler(RequestHandler[P, R]):
    """Read-only handler."""


HandlerT = TypeVar("HandlerT", bound=type[RequestHandler])


def token_authorize(cls: HandlerT) -> HandlerT:
    """Mark a handler as requiring a caller identity."""
    cls.requires_auth = True
    return cls


def allow_anonymous(cls: HandlerT) -> HandlerT:
    """Mark a handler as reachable through the public surface."""
    cls.allows_anonymous = True
    return cls
