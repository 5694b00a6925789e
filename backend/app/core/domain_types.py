"""Domain Types - enums shared by the registry, gate, dispatcher and transport.

Invariants:
    - ModuleName is a closed set fixed at deployment; parsing is case-insensitive
    - HandlerKind has exactly two variants (COMMAND, QUERY)
    - ErrorKind values are stable wire codes, never renamed

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


class ModuleName(str, Enum):
    """Logical partitions of the handler space."""
    ADMIN = "ADMIN"
    SHOP = "SHOP"
    CHAT = "CHAT"

    @classmethod
    def parse(cls, value: "str | ModuleName") -> "ModuleName | None":
        """Return the module for value (any casing), or None if unknown."""
        if isinstance(value, ModuleName):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class HandlerKind(str, Enum):
    """Command handlers mutate state, query handlers do not."""
    COMMAND = "Command"
    QUERY = "Query"


class RouteVisibility(str, Enum):
    """Which transport surface a call arrived on."""
    PUBLIC = "public"
    PRIVATE = "private"


class ErrorKind(str, Enum):
    """Machine-readable failure codes carried on failure envelopes."""
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_MODULE = "INVALID_MODULE"
    HANDLER_NOT_FOUND = "HANDLER_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    BINDING_ERROR = "BINDING_ERROR"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    EXECUTION_FAILURE = "EXECUTION_FAILURE"
    CANCELLED = "CANCELLED"
