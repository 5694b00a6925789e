"""Account Handlers — log in, register, change password, edit and delete users.

Invariants:
    - LogIn and Registration are anonymous-allowed (reachable on the public surface)
    - Every other account handler requires a caller identity
    - Bad username and bad password produce the same message (no user enumeration)
    - Password hashes never appear in responses
"""

from app.core.cancellation import CancellationToken
from app.core.errors import BusinessRuleError, InvalidCredentialsError, ResourceNotFoundError
from app.core.mapping import map_model
from app.core.request_handler import CommandHandler, allow_anonymous, token_authorize
from app.core.wire_models import EmptyResponseModel
from app.infrastructure.security import get_token_service, hash_password, verify_password
from app.models.user import User
from app.modules.admin.registration_service import RegistrationService
from app.schemas.parameters import (
    EditUserParameterModel, GetParameterModel, LogInParameterModel,
    RegistrationParameterModel, ResetPasswordParameterModel,
)
from app.schemas.responses import UserResponseModel


@allow_anonymous
class LogInCommandHandler(CommandHandler[LogInParameterModel, UserResponseModel]):
    """Verify credentials and issue an access token."""

    async def execute(
        self, parameter: LogInParameterModel, cancellation: CancellationToken,
    ) -> UserResponseModel:
        users = self.scope.repository(User)
        user = await users.first_by(username=parameter.user_name)
        if user is None or not verify_password(parameter.password, user.password):
            raise InvalidCredentialsError()

        token = get_token_service().issue(user.username, user.is_system_admin, user.name)
        self.logger.info("User logged in", extra={"handler": type(self).__name__})
        return map_model(UserResponseModel, user, token=token)


@allow_anonymous
class RegistrationCommandHandler(CommandHandler[RegistrationParameterModel, UserResponseModel]):
    """Create an account and log it in."""

    async def execute(
        self, parameter: RegistrationParameterModel, cancellation: CancellationToken,
    ) -> UserResponseModel:
        user = await RegistrationService(self.scope).register(parameter)
        token = get_token_service().issue(user.username, user.is_system_admin, user.name)
        return map_model(UserResponseModel, user, token=token)


@token_authorize
class ChangePasswordCommandHandler(CommandHandler[ResetPasswordParameterModel, EmptyResponseModel]):

    async def execute(
        self, parameter: ResetPasswordParameterModel, cancellation: CancellationToken,
    ) -> EmptyResponseModel:
        identity = self.identity
        if not identity.is_admin and identity.user_name != parameter.user_name:
            raise BusinessRuleError("Cannot change the password of another user.")

        users = self.scope.repository(User)
        user = await users.get(parameter.user_name)
        if user is None:
            raise ResourceNotFoundError("User", parameter.user_name)
        if not verify_password(parameter.current_password, user.password):
            raise BusinessRuleError("Incorrect current password.")

        user.password = hash_password(parameter.new_password)
        await users.update(user)
        await users.commit()
        return EmptyResponseModel()


@token_authorize
class EditUserCommandHandler(CommandHandler[EditUserParameterModel, UserResponseModel]):

    async def execute(
        self, parameter: EditUserParameterModel, cancellation: CancellationToken,
    ) -> UserResponseModel:
        users = self.scope.repository(User)
        user = await users.get(parameter.id)
        if user is None:
            raise ResourceNotFoundError("User", parameter.id)

        user.name = parameter.name
        await users.update(user)
        await users.commit()
        return map_model(UserResponseModel, user)


@token_authorize
class DeleteUserCommandHandler(CommandHandler[GetParameterModel, UserResponseModel]):

    async def execute(
        self, parameter: GetParameterModel, cancellation: CancellationToken,
    ) -> UserResponseModel:
        users = self.scope.repository(User)
        user = await users.get(parameter.id)
        if user is None:
            raise ResourceNotFoundError("User", parameter.id)

        await users.delete(user, soft=True)
        await users.commit()
        return map_model(UserResponseModel, user)
