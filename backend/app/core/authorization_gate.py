"""Authorization Gate - allow/deny a resolved handler for one call.

Invariants:
    - Public surface admits only anonymous-allowed handlers (checked first)
    - Auth-required handlers need an identity; its claims are not inspected
    - Pure: no IO, no logging, no exceptions
"""

from dataclasses import dataclass

from app.core.domain_types import ErrorKind, RouteVisibility
from app.core.handler_resolver import HandlerDescriptor
from app.core.identity import AccessIdentity


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    reason: ErrorKind | None = None


ALLOW = AuthorizationDecision(allowed=True)


def authorize(
    descriptor: HandlerDescriptor,
    identity: AccessIdentity | None,
    visibility: RouteVisibility,
) -> AuthorizationDecision:
    if visibility == RouteVisibility.PUBLIC and not descriptor.allows_anonymous:
        return AuthorizationDecision(allowed=False, reason=ErrorKind.FORBIDDEN)
    if descriptor.requires_auth and identity is None:
        return AuthorizationDecision(allowed=False, reason=ErrorKind.UNAUTHORIZED)
    return ALLOW
