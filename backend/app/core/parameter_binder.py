"""Parameter Binder - untyped payload -> typed, validated parameter instance.

Invariants:
    - None binds as an empty object
    - Keys match field names/aliases case-insensitively
    - Files never come from the JSON payload; they are merged as a side input
    - Every structural error is reported, not just the first

Design Decisions:
    - Pure functions raising BindingError / ValidationFailedError: the
      dispatcher converts both into failure envelopes
"""

from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.errors import BindingError, ValidationFailedError
from app.core.handler_resolver import HandlerDescriptor
from app.core.validation import FieldViolation
from app.core.wire_models import ParameterModel, UploadedFile, UploadFileParameterModel


def _field_lookup(model: type[BaseModel]) -> dict[str, str]:
    """lower-cased name/alias -> field name."""
    lookup = {}
    for name, info in model.model_fields.items():
        lookup[name.lower()] = name
        lookup[name.replace("_", "").lower()] = name
        if info.alias:
            lookup[info.alias.lower()] = name
    return lookup


def normalize_keys(model: type[BaseModel], raw: dict[str, Any]) -> dict[str, Any]:
    """Rename keys onto field names; unknown keys pass through unchanged."""
    lookup = _field_lookup(model)
    return {lookup.get(str(key).lower(), key): value for key, value in raw.items()}


def _violations_from(error: ValidationError, model: type[BaseModel]) -> list[FieldViolation]:
    violations = []
    fields = model.model_fields
    for item in error.errors():
        loc = item.get("loc") or ()
        head = str(loc[0]) if loc else ""
        info = fields.get(head)
        field = (info.alias if info and info.alias else head) or "Parameter"
        if len(loc) > 1:
            field = ".".join([field, *(str(part) for part in loc[1:])])
        violations.append(FieldViolation(field=field, message=f"{field}: {item['msg']}"))
    return violations


def bind(
    descriptor: HandlerDescriptor,
    raw: Any,
    files: list[UploadedFile] | None = None,
) -> ParameterModel:
    model = descriptor.parameter_type
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise BindingError([
            FieldViolation(field="Parameter", message="Parameter must be a JSON object."),
        ])

    data = normalize_keys(model, raw)
    data.pop("files", None)
    try:
        parameter = model.model_validate(data)
    except ValidationError as e:
        raise BindingError(_violations_from(e, model)) from e

    if isinstance(parameter, UploadFileParameterModel):
        parameter = parameter.model_copy(update={"files": list(files or [])})
    return parameter


def validate(parameter: ParameterModel) -> ParameterModel:
    """Run the parameter's own rules; raise with every violation if any fail."""
    result = parameter.validate_rules()
    if not result.is_valid:
        raise ValidationFailedError(result.violations)
    return parameter
