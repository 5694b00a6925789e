"""Registration Service — creates user accounts.

Invariants:
    - The new user's id is its username
    - An existing id (deleted or not) is a conflict; accounts are never overwritten
"""

from app.core.errors import ConflictError
from app.core.repository_protocols import ExecutionScopeLike
from app.infrastructure.security import hash_password
from app.models.user import User
from app.schemas.parameters import RegistrationParameterModel


class RegistrationService:

    def __init__(self, scope: ExecutionScopeLike):
        self.repository = scope.repository(User)

    async def register(self, parameter: RegistrationParameterModel) -> User:
        username = parameter.user_name.strip()
        existing = await self.repository.get(username, include_deleted=True)
        if existing is None:
            existing = await self.repository.first_by(is_deleted=None, username=username)
        if existing is not None:
            raise ConflictError(f"User {username} already exists")

        user = User(
            id=username,
            username=username,
            name=parameter.name or username,
            password=hash_password(parameter.password),
        )
        await self.repository.add(user)
        await self.repository.commit()
        return user
