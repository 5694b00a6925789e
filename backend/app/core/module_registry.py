"""Module Registry - process-wide map of module -> handler descriptors.

Invariants:
    - Mutable only until freeze(); register() afterwards raises RegistryFrozenError
    - Registering the same handler type twice is a no-op
    - Handler names are unique per module across both kinds
    - A module with no handlers is treated as unknown (InvalidModuleError)

Design Decisions:
    - Explicit registration table per module instead of runtime scanning: the
      name -> handler mapping is visible in one call site per module
    - Single object with freeze(): built at import, shared read-only by every
      request afterwards, no locks in the hot path
"""

import logging
from typing import Iterable

from app.core.domain_types import HandlerKind, ModuleName
from app.core.errors import DuplicateHandlerError, InvalidModuleError, RegistryFrozenError
from app.core.handler_resolver import HandlerDescriptor, resolve_descriptor, shape_of
from app.core.request_handler import RequestHandler

logger = logging.getLogger(__name__)


class ModuleRegistry:
    def __init__(self) -> None:
        self._modules: dict[ModuleName, dict[type, HandlerDescriptor]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self, module: ModuleName, handler_types: Iterable[type[RequestHandler]],
    ) -> None:
        if self._frozen:
            raise RegistryFrozenError()
        entries = self._modules.setdefault(module, {})
        for handler_type in handler_types:
            if handler_type in entries:
                continue
            descriptor = HandlerDescriptor.from_handler_type(handler_type)
            if any(d.name.lower() == descriptor.name.lower() for d in entries.values()):
                raise DuplicateHandlerError(module.value, descriptor.name)
            entries[handler_type] = descriptor
            logger.debug(
                "Handler registered",
                extra={"module_name": module.value, "handler": descriptor.name},
            )

    def freeze(self) -> None:
        self._frozen = True
        logger.info(
            "Module registry frozen",
            extra={"modules": {m.value: len(e) for m, e in self._modules.items()}},
        )

    def modules(self) -> list[ModuleName]:
        return [m for m, entries in self._modules.items() if entries]

    def descriptors(self, module: ModuleName | str) -> list[HandlerDescriptor]:
        parsed = ModuleName.parse(module)
        entries = self._modules.get(parsed) if parsed is not None else None
        if not entries:
            raise InvalidModuleError(str(getattr(module, "value", module)))
        return list(entries.values())

    def list_handlers(self, module: ModuleName | str, kind: HandlerKind) -> list[str]:
        return sorted(d.name for d in self.descriptors(module) if d.kind == kind)

    def resolve(
        self, module: ModuleName | str, request_name: str, kind: HandlerKind | None,
    ) -> HandlerDescriptor:
        descriptors = self.descriptors(module)
        return resolve_descriptor(ModuleName.parse(module), descriptors, request_name, kind)

    def describe(
        self, module: ModuleName | str, request_name: str, kind: HandlerKind,
    ) -> dict:
        descriptor = self.resolve(module, request_name, kind)
        return {
            "CommandName": descriptor.name,
            "ParameterModel": shape_of(descriptor.parameter_type),
            "ResponseModel": shape_of(descriptor.response_type),
        }
