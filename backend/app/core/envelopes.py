"""Request/Result Envelopes - the uniform wrapper around every call.

Invariants:
    - RequestId is always set (generated when the caller omits it or sends null/blank)
    - ResultEnvelope carries Result iff Success, Error iff not Success
    - ResultEnvelope is frozen once built
    - ResponseDuration = ResponseTime - ReceivedTime

Design Decisions:
    - Constructors (succeeded/failed) instead of direct instantiation: the
      success/error exclusivity lives in one place
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import ConfigDict, Field, field_serializer, field_validator

from app.core.domain_types import ErrorKind
from app.core.validation import FieldViolation
from app.core.wire_models import PascalModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_request_id() -> str:
    return str(uuid.uuid4())


class RequestEnvelope(PascalModel):
    request_id: str = Field(default_factory=new_request_id)
    request_name: str = Field(min_length=1)
    sent_time: datetime | None = None
    received_time: datetime | None = None
    parameter: Any = None

    @field_validator("request_id", mode="before")
    @classmethod
    def _fill_request_id(cls, value: Any) -> Any:
        """Null or blank ids count as absent."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return new_request_id()
        return value


class ResultEnvelope(PascalModel):
    model_config = ConfigDict(frozen=True)

    request_id: str
    request_name: str
    received_time: datetime
    response_time: datetime
    response_duration: timedelta
    success: bool
    result: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    violations: list[FieldViolation] = Field(default_factory=list)

    @field_serializer("result")
    def _serialize_result(self, value: Any) -> Any:
        if isinstance(value, PascalModel):
            return value.model_dump(mode="json", by_alias=True)
        if isinstance(value, (list, tuple)):
            return [self._serialize_result(item) for item in value]
        return value

    @classmethod
    def succeeded(cls, request: RequestEnvelope, result: Any) -> "ResultEnvelope":
        received = request.received_time or utc_now()
        now = utc_now()
        return cls(
            request_id=request.request_id,
            request_name=request.request_name,
            received_time=received,
            response_time=now,
            response_duration=now - received,
            success=True,
            result=result,
        )

    @classmethod
    def failed(
        cls,
        request: RequestEnvelope,
        error: str,
        error_kind: ErrorKind,
        violations: list[FieldViolation] | None = None,
    ) -> "ResultEnvelope":
        received = request.received_time or utc_now()
        now = utc_now()
        return cls(
            request_id=request.request_id,
            request_name=request.request_name,
            received_time=received,
            response_time=now,
            response_duration=now - received,
            success=False,
            error=error,
            error_kind=error_kind,
            violations=violations or [],
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
