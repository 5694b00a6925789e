"""Wire Models - base shapes for parameters, responses and file payloads.

Invariants:
    - Every wire model serializes with PascalCase aliases and accepts field names too
    - ParameterModel subclasses declare their own ordered rule set (validation_rules)
    - UploadFileParameterModel.files is never read from JSON (side input only)
    - FileResponseModel.content is excluded from JSON; the transport streams it

Design Decisions:
    - Pydantic over hand-rolled DTOs: structural binding, aliasing and schema
      introspection (used by Detail) come for free
    - from_attributes=True: response models are built straight from ORM rows
"""

from dataclasses import dataclass
from math import ceil
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

if TYPE_CHECKING:
    from app.core.validation import Rule, ValidationResult


class PascalModel(BaseModel):
    """Base for all wire shapes: PascalCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        from_attributes=True,
    )


class ParameterModel(PascalModel):
    """Handler input. Subclasses list their rules in validation_rules."""
    validation_rules: ClassVar[tuple["Rule", ...]] = ()

    def validate_rules(self) -> "ValidationResult":
        from app.core.validation import run_rules
        return run_rules(self, self.validation_rules)


class ResponseModel(PascalModel):
    """Handler output."""


class EmptyResponseModel(ResponseModel):
    """Response for handlers with nothing to return."""


@dataclass(frozen=True)
class UploadedFile:
    """One multipart attachment, already read into memory."""
    file_name: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class UploadFileParameterModel(ParameterModel):
    """Parameter that additionally receives the multipart files of the call."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    files: list[UploadedFile] = Field(default_factory=list, exclude=True)


class FileResponseModel(ResponseModel):
    """File-producing result; streamed by the transport, not serialized."""
    file_name: str
    content_type: str = "application/octet-stream"
    content: bytes = Field(default=b"", exclude=True)


T = TypeVar("T")


class PagedResponseModel(ResponseModel, Generic[T]):
    """One page of items plus totals."""
    data: list[T] = Field(default_factory=list)
    count: int = 0
    page_number: int = 1
    page_size: int = 0
    total_page: int = 0

    @classmethod
    def build(
        cls, items: list[T], count: int, page_number: int, page_size: int,
    ) -> "PagedResponseModel[T]":
        """Count never drops below the number of items actually returned."""
        count = max(count, len(items))
        total_page = ceil(count / page_size) if page_size > 0 else 0
        return cls(
            data=list(items), count=count, page_number=page_number,
            page_size=page_size, total_page=total_page,
        )
