"""Request Handler — generic declaration, markers and the shared handle() wrapper.

Tests:
    - Parameter/response types come from the generic arguments
    - Markers set requires_auth / allows_anonymous
    - handle() returns envelopes for success, handler errors and cancellation
"""

import asyncio

import pytest

from app.core.cancellation import CancellationToken
from app.core.domain_types import ErrorKind, ModuleName
from app.core.envelopes import RequestEnvelope
from app.core.errors import BusinessRuleError
from app.core.request_handler import CommandHandler
from tests.core.fake_handlers import (
    ALICE, EchoCommandHandler, EchoParameterModel, EchoResponseModel, FailingCommandHandler,
    FakeScope, NoParameterModel, PingQueryHandler, SecretQueryHandler, SlowQueryHandler,
    reset_calls,
)


@pytest.fixture(autouse=True)
def _reset():
    reset_calls()
    yield
    reset_calls()


def _scope(identity=None):
    return FakeScope(identity, ModuleName.ADMIN)


def test_generic_arguments_become_declared_types():
    assert EchoCommandHandler.parameter_model is EchoParameterModel
    assert EchoCommandHandler.response_model is EchoResponseModel
    assert PingQueryHandler.parameter_model is NoParameterModel


def test_markers():
    assert SecretQueryHandler.requires_auth and not SecretQueryHandler.allows_anonymous
    assert PingQueryHandler.allows_anonymous and not PingQueryHandler.requires_auth
    assert not EchoCommandHandler.requires_auth and not EchoCommandHandler.allows_anonymous


def test_identity_comes_from_scope():
    assert SecretQueryHandler(_scope(ALICE)).identity is ALICE


async def test_handle_wraps_result():
    request = RequestEnvelope(request_id="r-1", request_name="Echo")
    envelope = await EchoCommandHandler(_scope()).handle(
        request, EchoParameterModel(text="hi", count=2), CancellationToken(),
    )
    assert envelope.success
    assert envelope.request_id == "r-1"
    assert envelope.result == EchoResponseModel(text="hi", count=2)


async def test_handle_turns_exception_into_failure():
    envelope = await FailingCommandHandler(_scope()).handle(
        RequestEnvelope(request_name="Failing"), NoParameterModel(), CancellationToken(),
    )
    assert not envelope.success
    assert envelope.error == "storage exploded"
    assert envelope.error_kind == ErrorKind.EXECUTION_FAILURE
    assert len(FailingCommandHandler.calls) == 1


async def test_handle_uses_domain_error_message():
    class RefusingCommandHandler(CommandHandler[NoParameterModel, EchoResponseModel]):
        async def execute(self, parameter, cancellation):
            raise BusinessRuleError("Contract is locked.")

    envelope = await RefusingCommandHandler(_scope()).handle(
        RequestEnvelope(request_name="Refusing"), NoParameterModel(), CancellationToken(),
    )
    assert envelope.error == "Contract is locked."


async def test_handle_reports_cancellation():
    SlowQueryHandler.started = asyncio.Event()
    token = CancellationToken()

    async def cancel_when_started():
        await SlowQueryHandler.started.wait()
        token.cancel()

    canceller = asyncio.create_task(cancel_when_started())
    envelope = await SlowQueryHandler(_scope()).handle(
        RequestEnvelope(request_name="Slow"), NoParameterModel(), token,
    )
    await canceller
    assert not envelope.success
    assert envelope.error_kind == ErrorKind.CANCELLED
    assert SlowQueryHandler.finished is False
