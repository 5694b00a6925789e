"""Dispatch Helpers — envelope/file responses and multipart parsing shared by the routes.

Invariants:
    - Success envelope -> 200, failure envelope -> 400
    - A successful FileResponseModel result is streamed raw, never embedded in JSON
    - The multipart "data" field must hold a JSON object envelope
"""

import json
from urllib.parse import quote

from fastapi import UploadFile, status
from fastapi.responses import JSONResponse, Response, StreamingResponse

from app.core.envelopes import ResultEnvelope
from app.core.errors import InvalidRequestError
from app.core.wire_models import FileResponseModel, UploadedFile

CHUNK_SIZE = 64 * 1024


def envelope_response(result: ResultEnvelope) -> Response:
    if result.success and isinstance(result.result, FileResponseModel):
        return file_stream(result.result)
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST,
        content=result.to_wire(),
    )


def file_stream(file: FileResponseModel) -> StreamingResponse:
    content = file.content

    def chunks():
        for start in range(0, len(content), CHUNK_SIZE):
            yield content[start:start + CHUNK_SIZE]

    return StreamingResponse(
        chunks(),
        media_type=file.content_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(file.file_name)}",
            "Content-Length": str(len(content)),
        },
    )


def file_envelope(request_name: str, entity_id: str) -> dict:
    """Envelope synthesized by the GET .../{requestName}/file/{id} shorthand."""
    return {"RequestName": request_name, "Parameter": {"Id": entity_id}}


def parse_form_envelope(data: str) -> dict:
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Field 'data' is not valid JSON: {e.msg}.") from e
    if not isinstance(payload, dict):
        raise InvalidRequestError("Field 'data' must be a JSON object.")
    return payload


async def read_uploads(files: list[UploadFile]) -> list[UploadedFile]:
    uploads = []
    for upload in files:
        uploads.append(UploadedFile(
            file_name=upload.filename or "file",
            content_type=upload.content_type or "application/octet-stream",
            content=await upload.read(),
        ))
    return uploads
