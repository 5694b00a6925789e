"""ADMIN module registration table."""

from app.core.domain_types import ModuleName
from app.core.module_registry import ModuleRegistry
from app.modules.admin.handle_account import (
    ChangePasswordCommandHandler, DeleteUserCommandHandler, EditUserCommandHandler,
    LogInCommandHandler, RegistrationCommandHandler,
)
from app.modules.admin.handle_contract import (
    DeleteContractCommandHandler, GetByPagedContractQueryHandler,
    GetContractAttachmentQueryHandler, GetContractQueryHandler,
    SaveContractCommandHandler, UploadContractAttachmentCommandHandler,
)

ADMIN_HANDLERS = (
    # Account
    LogInCommandHandler,
    RegistrationCommandHandler,
    ChangePasswordCommandHandler,
    EditUserCommandHandler,
    DeleteUserCommandHandler,
    # Contract
    SaveContractCommandHandler,
    DeleteContractCommandHandler,
    UploadContractAttachmentCommandHandler,
    GetContractQueryHandler,
    GetByPagedContractQueryHandler,
    GetContractAttachmentQueryHandler,
)


def register_admin_module(registry: ModuleRegistry) -> None:
    registry.register(ModuleName.ADMIN, ADMIN_HANDLERS)
