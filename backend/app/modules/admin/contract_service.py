"""Contract Service — persistence rules for contracts shared by the contract handlers.

Invariants:
    - save() updates when a live contract with the id exists, inserts otherwise
    - delete() is soft and fails with ResourceNotFoundError for unknown ids
    - paged() never returns soft-deleted contracts
"""

from typing import Sequence

from app.core.errors import ResourceNotFoundError
from app.core.mapping import copy_onto
from app.core.repository_protocols import ExecutionScopeLike
from app.db.base import utc_now
from app.models.contract import Contract
from app.schemas.parameters import ContractParameterModel


class ContractService:

    def __init__(self, scope: ExecutionScopeLike):
        self.repository = scope.repository(Contract)

    async def get(self, contract_id: str) -> Contract:
        contract = await self.repository.get(contract_id)
        if contract is None:
            raise ResourceNotFoundError("Contract", contract_id)
        return contract

    async def get_all(self) -> Sequence[Contract]:
        return await self.repository.get_all()

    async def paged(self, page_number: int, page_size: int) -> tuple[Sequence[Contract], int]:
        return await self.repository.paged(page_number, page_size, is_deleted=False)

    async def save(self, parameter: ContractParameterModel) -> Contract:
        existing = None
        if parameter.id:
            existing = await self.repository.get(parameter.id, include_deleted=True)
            if existing is not None and existing.is_deleted:
                raise ResourceNotFoundError("Contract", parameter.id)
        if existing is not None:
            copy_onto(existing, parameter, exclude={"id", "created"})
            existing.updated = parameter.updated or utc_now()
            contract = await self.repository.update(existing)
        else:
            contract = Contract(
                author=parameter.author,
                name=parameter.name,
                description=parameter.description,
                created=parameter.created or utc_now(),
                updated=parameter.updated,
            )
            if parameter.id:
                contract.id = parameter.id
            contract = await self.repository.add(contract)
        await self.repository.commit()
        return contract

    async def delete(self, contract_id: str) -> bool:
        existing = await self.repository.get(contract_id)
        if existing is None:
            raise ResourceNotFoundError("Contract", contract_id)
        await self.repository.delete(existing, soft=True)
        await self.repository.commit()
        return True
