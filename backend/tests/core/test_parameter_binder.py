"""Parameter Binder — payload to typed parameter, then validation.

Tests:
    - None binds as an empty object; non-objects are binding errors
    - Keys match case-insensitively (PascalCase, camelCase, snake_case)
    - Files come only from the side input, never from JSON
    - Every structural error is reported with its wire field name
"""

import pytest

from app.core import parameter_binder
from app.core.errors import BindingError, ValidationFailedError
from app.core.handler_resolver import HandlerDescriptor
from app.core.wire_models import UploadedFile
from tests.core.fake_handlers import (
    AttachCommandHandler, AttachParameterModel, EchoCommandHandler, EchoParameterModel,
)

ECHO = HandlerDescriptor.from_handler_type(EchoCommandHandler)
ATTACH = HandlerDescriptor.from_handler_type(AttachCommandHandler)


def test_none_binds_to_defaults():
    parameter = parameter_binder.bind(ECHO, None)
    assert isinstance(parameter, EchoParameterModel)
    assert parameter.text == "" and parameter.count == 1


@pytest.mark.parametrize("raw", [
    {"Text": "hi", "Count": 3},
    {"text": "hi", "count": 3},
    {"TEXT": "hi", "cOuNt": 3},
])
def test_keys_match_case_insensitively(raw):
    parameter = parameter_binder.bind(ECHO, raw)
    assert (parameter.text, parameter.count) == ("hi", 3)


def test_snake_and_camel_case_keys_bind():
    class Model(EchoParameterModel):
        page_number: int = 1

    descriptor = HandlerDescriptor(
        name="Paged", kind=ECHO.kind, handler_type=EchoCommandHandler,
        parameter_type=Model, response_type=None,
        requires_auth=False, allows_anonymous=False,
    )
    assert parameter_binder.bind(descriptor, {"pageNumber": 4}).page_number == 4
    assert parameter_binder.bind(descriptor, {"page_number": 5}).page_number == 5


def test_non_object_payload_is_binding_error():
    with pytest.raises(BindingError) as exc_info:
        parameter_binder.bind(ECHO, ["Text", "hi"])
    assert exc_info.value.violations[0].message == "Parameter must be a JSON object."


def test_type_mismatch_reports_every_field():
    with pytest.raises(BindingError) as exc_info:
        parameter_binder.bind(ECHO, {"Text": {"nested": True}, "Count": "many"})
    fields = [v.field for v in exc_info.value.violations]
    assert fields == ["Text", "Count"]
    assert "Count" in exc_info.value.message


def test_files_come_from_side_input_only():
    upload = UploadedFile(file_name="a.pdf", content_type="application/pdf", content=b"%PDF")
    parameter = parameter_binder.bind(
        ATTACH, {"Label": "scan", "Files": ["ignored"]}, [upload],
    )
    assert isinstance(parameter, AttachParameterModel)
    assert parameter.label == "scan"
    assert parameter.files == [upload]
    assert parameter.files[0].size == 4


def test_upload_parameter_without_files_binds_empty_list():
    assert parameter_binder.bind(ATTACH, {"Label": "x"}).files == []


def test_validate_passes_valid_parameter():
    parameter = EchoParameterModel(text="ok")
    assert parameter_binder.validate(parameter) is parameter


def test_validate_raises_with_all_violations():
    with pytest.raises(ValidationFailedError) as exc_info:
        parameter_binder.validate(EchoParameterModel(text="", count=0))
    assert len(exc_info.value.violations) == 2
    assert exc_info.value.message == (
        "Text must not be empty.; Count must be greater than or equal to '1'."
    )
