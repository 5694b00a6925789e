"""Object mapping between ORM rows and wire models. Pure, synchronous."""

from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def map_model(target: type[ModelT], source: Any, **overrides: Any) -> ModelT:
    """Build target from source's attributes; overrides win over source values."""
    if not overrides:
        return target.model_validate(source, from_attributes=True)
    data = {
        name: getattr(source, name)
        for name in target.model_fields
        if hasattr(source, name)
    }
    data.update(overrides)
    return target.model_validate(data)


def copy_onto(entity: Any, source: BaseModel, *, exclude: set[str] | None = None) -> Any:
    """Copy the fields of source onto entity attributes that exist."""
    for name, value in source.model_dump(exclude=exclude or set()).items():
        if hasattr(entity, name):
            setattr(entity, name, value)
    return entity
