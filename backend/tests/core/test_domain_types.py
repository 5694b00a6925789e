"""Domain Types — enum members and module name parsing.

Tests:
    - ModuleName.parse is case-insensitive and returns None when unknown
    - HandlerKind has exactly two variants
    - ErrorKind values are stable wire codes
"""

import json

from app.core.domain_types import ErrorKind, HandlerKind, ModuleName, RouteVisibility


def test_module_parse_any_casing():
    assert ModuleName.parse("admin") is ModuleName.ADMIN
    assert ModuleName.parse(" Shop ") is ModuleName.SHOP
    assert ModuleName.parse(ModuleName.CHAT) is ModuleName.CHAT


def test_module_parse_unknown_is_none():
    assert ModuleName.parse("billing") is None
    assert ModuleName.parse("") is None


def test_handler_kind_is_closed():
    assert [k.value for k in HandlerKind] == ["Command", "Query"]


def test_route_visibility_members():
    assert {v.value for v in RouteVisibility} == {"public", "private"}


def test_error_kind_serializes_as_string():
    assert json.dumps({"k": ErrorKind.VALIDATION_FAILED}) == '{"k": "VALIDATION_FAILED"}'
    assert ErrorKind("HANDLER_NOT_FOUND") is ErrorKind.HANDLER_NOT_FOUND
