"""Response models returned by the admin handlers."""

from datetime import datetime

from app.core.wire_models import ResponseModel


class UserResponseModel(ResponseModel):
    id: str
    username: str
    name: str | None = None
    as_owner: bool = False
    token: str | None = None


class ContractResponseModel(ResponseModel):
    id: str
    author: str = ""
    name: str
    description: str = ""
    created: datetime | None = None
    updated: datetime | None = None


class AttachmentResponseModel(ResponseModel):
    id: str
    file_name: str
    content_type: str
    file_size: int


class AttachmentsResponseModel(ResponseModel):
    contract_id: str
    attachments: list[AttachmentResponseModel] = []
