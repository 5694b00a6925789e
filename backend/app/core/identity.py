"""Caller identity decoded from a bearer token, valid for one call."""

from app.core.wire_models import PascalModel


class AccessIdentity(PascalModel):
    user_id: str
    user_name: str
    email: str | None = None
    name: str | None = None
    is_admin: bool = False
