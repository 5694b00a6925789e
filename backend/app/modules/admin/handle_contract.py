"""Contract Handlers — save, delete, page through contracts and their attachments.

Invariants:
    - Mutations and listings require a caller identity
    - GetContractAttachment is anonymous-allowed and returns a file, not JSON
    - Attachment upload stores every file of the call or none
"""

from app.core.cancellation import CancellationToken
from app.core.errors import ResourceNotFoundError
from app.core.mapping import map_model
from app.core.request_handler import (
    CommandHandler, QueryHandler, allow_anonymous, token_authorize,
)
from app.core.wire_models import EmptyResponseModel, FileResponseModel, PagedResponseModel
from app.models.contract_attachment import ContractAttachment
from app.modules.admin.contract_service import ContractService
from app.schemas.parameters import (
    ContractParameterModel, GetItemsParameterModel, IdParameterModel,
    UploadContractAttachmentParameterModel,
)
from app.schemas.responses import (
    AttachmentResponseModel, AttachmentsResponseModel, ContractResponseModel,
)


@token_authorize
class SaveContractCommandHandler(CommandHandler[ContractParameterModel, ContractResponseModel]):
    """Insert a new contract or update the one with the given id."""

    async def execute(
        self, parameter: ContractParameterModel, cancellation: CancellationToken,
    ) -> ContractResponseModel:
        contract = await ContractService(self.scope).save(parameter)
        return map_model(ContractResponseModel, contract)


@token_authorize
class DeleteContractCommandHandler(CommandHandler[IdParameterModel, EmptyResponseModel]):

    async def execute(
        self, parameter: IdParameterModel, cancellation: CancellationToken,
    ) -> EmptyResponseModel:
        await ContractService(self.scope).delete(parameter.id)
        return EmptyResponseModel()


@token_authorize
class UploadContractAttachmentCommandHandler(
    CommandHandler[UploadContractAttachmentParameterModel, AttachmentsResponseModel],
):
    """Attach the uploaded files of the call to an existing contract."""

    async def execute(
        self, parameter: UploadContractAttachmentParameterModel,
        cancellation: CancellationToken,
    ) -> AttachmentsResponseModel:
        contract = await ContractService(self.scope).get(parameter.contract_id)
        attachments = self.scope.repository(ContractAttachment)

        stored = []
        for upload in parameter.files:
            cancellation.raise_if_cancelled()
            attachment = ContractAttachment(
                contract_id=contract.id,
                file_name=upload.file_name,
                content_type=upload.content_type or "application/octet-stream",
                file_size=upload.size,
                content=upload.content,
            )
            stored.append(await attachments.add(attachment))
        await attachments.commit()

        return AttachmentsResponseModel(
            contract_id=contract.id,
            attachments=[map_model(AttachmentResponseModel, a) for a in stored],
        )


class GetContractQueryHandler(QueryHandler[IdParameterModel, ContractResponseModel]):

    async def execute(
        self, parameter: IdParameterModel, cancellation: CancellationToken,
    ) -> ContractResponseModel:
        contract = await ContractService(self.scope).get(parameter.id)
        return map_model(ContractResponseModel, contract)


@token_authorize
class GetByPagedContractQueryHandler(
    QueryHandler[GetItemsParameterModel, PagedResponseModel[ContractResponseModel]],
):
    """One page of live contracts, oldest first."""

    async def execute(
        self, parameter: GetItemsParameterModel, cancellation: CancellationToken,
    ) -> PagedResponseModel[ContractResponseModel]:
        rows, total = await ContractService(self.scope).paged(
            parameter.page_number, parameter.page_size,
        )
        return PagedResponseModel[ContractResponseModel].build(
            [map_model(ContractResponseModel, row) for row in rows],
            total, parameter.page_number, parameter.page_size,
        )


@allow_anonymous
class GetContractAttachmentQueryHandler(QueryHandler[IdParameterModel, FileResponseModel]):
    """Stream one attachment by id."""

    async def execute(
        self, parameter: IdParameterModel, cancellation: CancellationToken,
    ) -> FileResponseModel:
        attachment = await self.scope.repository(ContractAttachment).get(parameter.id)
        if attachment is None:
            raise ResourceNotFoundError("Attachment", parameter.id)
        return FileResponseModel(
            file_name=attachment.file_name,
            content_type=attachment.content_type,
            content=attachment.content,
        )
