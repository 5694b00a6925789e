"""Parameter models accepted by the admin handlers."""

from datetime import datetime

from app.core.validation import at_least, max_length, min_length, not_empty
from app.core.wire_models import ParameterModel, UploadFileParameterModel


class IdParameterModel(ParameterModel):
    id: str = ""

    validation_rules = (not_empty("id"),)


class GetParameterModel(ParameterModel):
    id: str = ""

    validation_rules = (not_empty("id"),)


class GetItemsParameterModel(ParameterModel):
    page_number: int = 0
    page_size: int = 0

    validation_rules = (
        at_least("page_number", 1),
        at_least("page_size", 1),
    )


class LogInParameterModel(ParameterModel):
    user_name: str = ""
    password: str = ""

    validation_rules = (
        not_empty("user_name"),
        not_empty("password"),
    )


class RegistrationParameterModel(ParameterModel):
    name: str = ""
    user_name: str = ""
    password: str = ""

    validation_rules = (
        not_empty("user_name"),
        max_length("user_name", 128),
        not_empty("password"),
        min_length("password", 6),
    )


class ResetPasswordParameterModel(ParameterModel):
    user_name: str = ""
    current_password: str = ""
    new_password: str = ""

    validation_rules = (
        not_empty("user_name"),
        not_empty("current_password"),
        not_empty("new_password"),
        min_length("new_password", 6),
    )


class EditUserParameterModel(ParameterModel):
    id: str = ""
    name: str = ""

    validation_rules = (not_empty("id"),)


class ContractParameterModel(ParameterModel):
    id: str | None = None
    author: str = ""
    name: str = ""
    description: str = ""
    created: datetime | None = None
    updated: datetime | None = None

    validation_rules = (
        not_empty("name"),
        max_length("name", 256),
        max_length("author", 256),
    )


class UploadContractAttachmentParameterModel(UploadFileParameterModel):
    contract_id: str = ""

    validation_rules = (
        not_empty("contract_id"),
        not_empty("files", "At least one file must be attached."),
    )
