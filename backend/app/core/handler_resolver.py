"""Handler Descriptor Resolver - immutable metadata per handler and name lookup.

Invariants:
    - Kind comes only from the capability base (CommandHandler / QueryHandler)
    - name = class name without "Handler", then without the kind suffix
    - resolve() returns exactly one descriptor or raises HandlerNotFoundError
    - Legacy suffixed names ("GetContractQuery") resolve to the same descriptor

Design Decisions:
    - Frozen dataclass: descriptors are built once at registration and shared
      read-only by every call
    - Class-name substrings are never used for classification; a renamed
      handler keeps its kind
"""

from dataclasses import dataclass
from types import UnionType
from typing import Any, Iterable, Union, get_args, get_origin

from pydantic import BaseModel

from app.core.domain_types import HandlerKind, ModuleName
from app.core.errors import HandlerNotFoundError
from app.core.request_handler import CommandHandler, QueryHandler, RequestHandler

HANDLER_SUFFIX = "Handler"


def derive_name(handler_type: type, kind: HandlerKind) -> str:
    name = handler_type.__name__
    if name.endswith(HANDLER_SUFFIX) and len(name) > len(HANDLER_SUFFIX):
        name = name[: -len(HANDLER_SUFFIX)]
    if name.endswith(kind.value) and len(name) > len(kind.value):
        name = name[: -len(kind.value)]
    return name


def classify(handler_type: type) -> HandlerKind:
    """Kind of handler_type from the capability it extends."""
    if not isinstance(handler_type, type) or not issubclass(handler_type, RequestHandler):
        raise TypeError(f"{handler_type!r} is not a request handler")
    is_command = issubclass(handler_type, CommandHandler)
    is_query = issubclass(handler_type, QueryHandler)
    if is_command == is_query:
        raise TypeError(
            f"{handler_type.__name__} must extend exactly one of CommandHandler, QueryHandler"
        )
    return HandlerKind.COMMAND if is_command else HandlerKind.QUERY


@dataclass(frozen=True)
class HandlerDescriptor:
    name: str
    kind: HandlerKind
    handler_type: type[RequestHandler]
    parameter_type: type[BaseModel]
    response_type: Any
    requires_auth: bool
    allows_anonymous: bool

    @property
    def aliases(self) -> frozenset[str]:
        """Names this descriptor answers to, lower-cased."""
        return frozenset({
            self.name.lower(),
            f"{self.name}{self.kind.value}".lower(),
        })

    def matches(self, request_name: str) -> bool:
        return request_name.strip().lower() in self.aliases

    @classmethod
    def from_handler_type(cls, handler_type: type[RequestHandler]) -> "HandlerDescriptor":
        kind = classify(handler_type)
        if handler_type.parameter_model is None:
            raise TypeError(
                f"{handler_type.__name__} does not declare its parameter/response types"
            )
        return cls(
            name=derive_name(handler_type, kind),
            kind=kind,
            handler_type=handler_type,
            parameter_type=handler_type.parameter_model,
            response_type=handler_type.response_model,
            requires_auth=bool(handler_type.requires_auth),
            allows_anonymous=bool(handler_type.allows_anonymous),
        )


def resolve_descriptor(
    module: ModuleName,
    descriptors: Iterable[HandlerDescriptor],
    request_name: str,
    kind: HandlerKind | None,
) -> HandlerDescriptor:
    """Find the single descriptor for request_name; kind None matches both kinds."""
    candidates = [d for d in descriptors if kind is None or d.kind == kind]
    exact = [d for d in candidates if d.name.lower() == request_name.strip().lower()]
    if len(exact) == 1:
        return exact[0]
    matched = [d for d in candidates if d.matches(request_name)]
    if len(matched) == 1:
        return matched[0]
    raise HandlerNotFoundError(module.value, request_name)


# ─── Shape Introspection (Detail endpoint) ──────────────────────

def type_name(annotation: Any) -> str:
    """Readable name for a field annotation: str, int, list[ContractResponseModel]."""
    if annotation is None or annotation is type(None):
        return "None"
    origin = get_origin(annotation)
    if origin is None:
        return getattr(annotation, "__name__", str(annotation))
    args = [type_name(a) for a in get_args(annotation)]
    if origin is Union or origin is UnionType:
        return " | ".join(args)
    origin_name = getattr(origin, "__name__", str(origin))
    return f"{origin_name}[{', '.join(args)}]"


def shape_of(model: Any) -> dict[str, str]:
    """Map wire field name -> type name for a pydantic model; {} otherwise."""
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        return {}
    shape = {}
    for name, info in model.model_fields.items():
        shape[info.alias or name] = type_name(info.annotation)
    return shape
