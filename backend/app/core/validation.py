"""Parameter Validation - ordered, declarative rule sets per parameter type.

Invariants:
    - Rules run in declaration order; every failing rule yields one violation
    - A rule never raises for a bad value; it reports
    - Violation field names use the wire (PascalCase) alias

Design Decisions:
    - Rules as data (frozen dataclass + predicate): a parameter type lists its
      rules next to its fields, no separate validator class hierarchy
    - Pure functions: no IO, no logging
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from pydantic.alias_generators import to_pascal

from app.core.wire_models import PascalModel

if TYPE_CHECKING:
    from pydantic import BaseModel


class FieldViolation(PascalModel):
    field: str
    message: str


class ValidationResult(PascalModel):
    violations: list[FieldViolation] = []

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


@dataclass(frozen=True)
class Rule:
    """One check on one field of a parameter."""
    field: str
    message: str
    check: Callable[[Any], bool]

    def apply(self, parameter: "BaseModel") -> FieldViolation | None:
        value = getattr(parameter, self.field, None)
        if self.check(value):
            return None
        return FieldViolation(field=_alias_of(parameter, self.field), message=self.message)


def _alias_of(parameter: "BaseModel", name: str) -> str:
    info = type(parameter).model_fields.get(name)
    if info is not None and info.alias:
        return info.alias
    return to_pascal(name)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, bytes)):
        return len(value) == 0
    return False


# ─── Rule Factories ─────────────────────────────────────────────

def not_empty(field: str, message: str | None = None) -> Rule:
    return Rule(field, message or f"{to_pascal(field)} must not be empty.",
                lambda v: not _is_blank(v))


def at_least(field: str, minimum: int | float, message: str | None = None) -> Rule:
    def check(value: Any) -> bool:
        return value is not None and value >= minimum
    return Rule(
        field,
        message or f"{to_pascal(field)} must be greater than or equal to '{minimum}'.",
        check,
    )


def min_length(field: str, length: int, message: str | None = None) -> Rule:
    def check(value: Any) -> bool:
        return value is not None and len(value) >= length
    return Rule(
        field,
        message or f"{to_pascal(field)} must be at least {length} characters.",
        check,
    )


def max_length(field: str, length: int, message: str | None = None) -> Rule:
    def check(value: Any) -> bool:
        return value is None or len(value) <= length
    return Rule(
        field,
        message or f"{to_pascal(field)} must be {length} characters or fewer.",
        check,
    )


def must(field: str, predicate: Callable[[Any], bool], message: str) -> Rule:
    """Free-form rule; predicate returns True when the value is acceptable."""
    return Rule(field, message, predicate)


def run_rules(parameter: "BaseModel", rules: Iterable[Rule]) -> ValidationResult:
    """Apply rules in order, collecting every violation."""
    violations = []
    for rule in rules:
        violation = rule.apply(parameter)
        if violation is not None:
            violations.append(violation)
    return ValidationResult(violations=violations)
