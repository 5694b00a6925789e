"""Command/Query/Public Routes — HTTP surface over the dispatcher.

Tests:
    - ListAll/Detail expose registered names and shapes per kind
    - Success -> 200, failure envelope -> 400, auth rejections -> 401/403
    - Malformed envelopes and unknown modules are rejected with 400
    - Upload binds multipart files; file results stream as raw bytes
    - Readiness needs both the DB and a frozen, non-empty registry
"""

import json

import pytest

from app.api.dependencies import get_registry
from app.core.domain_types import ModuleName
from app.core.module_registry import ModuleRegistry
from app.main import app
from app.models.contract import Contract
from tests.core.fake_handlers import GetContractQueryHandler, LogInCommandHandler
from tests.services.accounts import ADMIN_PASSWORD


@pytest.fixture
async def seed_contract(test_db):
    test_db.add(Contract(id="c-1", author="Ann", name="Lease", description="Flat 4"))
    await test_db.commit()


def _envelope(name, parameter=None):
    return {"RequestName": name, "Parameter": parameter}


# ─── Discovery ──────────────────────────────────────────────────

async def test_list_queries(client):
    response = await client.get("/api/Query/ListAll/ADMIN")
    assert response.status_code == 200
    assert response.json() == ["GetByPagedContract", "GetContract", "GetContractAttachment"]


async def test_list_commands(client):
    response = await client.get("/api/Command/ListAll/admin")
    assert response.status_code == 200
    assert response.json() == [
        "ChangePassword", "DeleteContract", "DeleteUser", "EditUser",
        "LogIn", "Registration", "SaveContract", "UploadContractAttachment",
    ]


async def test_list_queries_excludes_commands(client):
    registry = ModuleRegistry()
    registry.register(ModuleName.ADMIN, [LogInCommandHandler, GetContractQueryHandler])
    registry.freeze()
    app.dependency_overrides[get_registry] = lambda: registry

    response = await client.get("/api/Query/ListAll/ADMIN")
    assert response.json() == ["GetContract"]


async def test_list_unknown_module(client):
    response = await client.get("/api/Query/ListAll/BILLING")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_MODULE"


async def test_detail(client):
    response = await client.get("/api/Command/Detail/ADMIN/LogIn")
    assert response.status_code == 200
    assert response.json() == {
        "CommandName": "LogIn",
        "ParameterModel": {"UserName": "str", "Password": "str"},
        "ResponseModel": {
            "Id": "str", "Username": "str", "Name": "str | None",
            "AsOwner": "bool", "Token": "str | None",
        },
    }


async def test_detail_of_query_on_command_route(client):
    response = await client.get("/api/Command/Detail/ADMIN/GetContract")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "HANDLER_NOT_FOUND"


# ─── Execute ────────────────────────────────────────────────────

async def test_login_wrong_password_is_400(client, seed_users):
    response = await client.post(
        "/api/Command/Execute/ADMIN",
        json=_envelope("LogIn", {"UserName": "admin", "Password": "wrong"}),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["Success"] is False
    assert body["ErrorKind"] == "EXECUTION_FAILURE"
    assert body["Error"] == "Invalid username or password."


async def test_login_then_use_token(client, seed_users, seed_contract):
    login = await client.post(
        "/api/Command/Execute/ADMIN",
        json=_envelope("LogIn", {"UserName": "admin", "Password": ADMIN_PASSWORD}),
    )
    assert login.status_code == 200
    token = login.json()["Result"]["Token"]

    response = await client.post(
        "/api/Query/Execute/ADMIN",
        json=_envelope("GetByPagedContract", {"PageNumber": 1, "PageSize": 10}),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200
    assert response.json()["Result"]["Count"] == 1


@pytest.mark.parametrize("headers", [
    {}, {"Authorization": "Bearer null"}, {"Authorization": "Bearer not-a-jwt"},
    {"Authorization": "Basic YWRtaW46YWRtaW4="},
])
async def test_token_required_without_valid_token_is_401(client, headers):
    response = await client.post(
        "/api/Query/Execute/ADMIN", json=_envelope("GetByPagedContract", {}), headers=headers,
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


async def test_unknown_request_name_is_400_envelope(client):
    response = await client.post("/api/Query/Execute/ADMIN", json=_envelope("Missing"))
    assert response.status_code == 400
    assert response.json()["ErrorKind"] == "HANDLER_NOT_FOUND"


async def test_validation_failure_lists_violations(client, auth_header):
    response = await client.post(
        "/api/Query/Execute/ADMIN",
        json=_envelope("GetByPagedContract", {"PageNumber": 0, "PageSize": 0}),
        headers=auth_header("admin", True),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["ErrorKind"] == "VALIDATION_FAILED"
    assert [v["Field"] for v in body["Violations"]] == ["PageNumber", "PageSize"]


@pytest.mark.parametrize("payload", [[], {"Parameter": {}}, {"RequestName": ""}])
async def test_malformed_envelope_is_400(client, payload):
    response = await client.post("/api/Command/Execute/ADMIN", json=payload)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


async def test_unknown_module_is_400(client):
    response = await client.post("/api/Command/Execute/SHOP", json=_envelope("LogIn"))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_MODULE"


# ─── Public ─────────────────────────────────────────────────────

async def test_public_login(client, seed_users):
    response = await client.post(
        "/api/public/execute/ADMIN",
        json=_envelope("LogIn", {"UserName": "admin", "Password": ADMIN_PASSWORD}),
    )
    assert response.status_code == 200
    assert response.json()["Success"] is True


async def test_public_rejects_token_handler_even_with_token(client, auth_header):
    response = await client.post(
        "/api/public/execute/ADMIN",
        json=_envelope("GetByPagedContract", {}),
        headers=auth_header("admin", True),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


# ─── Files ──────────────────────────────────────────────────────

async def test_upload_then_download(client, seed_users, seed_contract, auth_header):
    response = await client.post(
        "/api/Command/Upload/ADMIN",
        data={"data": json.dumps(_envelope("UploadContractAttachment", {"ContractId": "c-1"}))},
        files=[
            ("files", ("scan.pdf", b"%PDF-1.7", "application/pdf")),
            ("files", ("notes.txt", b"hello", "text/plain")),
        ],
        headers=auth_header("admin", True),
    )
    assert response.status_code == 200
    attachments = response.json()["Result"]["Attachments"]
    assert [a["FileName"] for a in attachments] == ["scan.pdf", "notes.txt"]
    attachment_id = attachments[0]["Id"]

    download = await client.get(f"/api/Query/ADMIN/GetContractAttachment/file/{attachment_id}")
    assert download.status_code == 200
    assert download.content == b"%PDF-1.7"
    assert download.headers["content-type"].startswith("application/pdf")
    assert "scan.pdf" in download.headers["content-disposition"]

    public = await client.get(f"/api/public/ADMIN/GetContractAttachment/file/{attachment_id}")
    assert public.content == b"%PDF-1.7"

    posted = await client.post(
        "/api/Query/download/ADMIN", json=_envelope("GetContractAttachment", {"Id": attachment_id}),
    )
    assert posted.content == b"%PDF-1.7"


async def test_upload_with_bad_data_field(client, auth_header):
    response = await client.post(
        "/api/Command/Upload/ADMIN", data={"data": "{not json"}, headers=auth_header("admin"),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


async def test_missing_attachment_is_json_failure(client):
    response = await client.get("/api/Query/ADMIN/GetContractAttachment/file/nope")
    assert response.status_code == 400
    assert response.json()["Success"] is False


# ─── Health ─────────────────────────────────────────────────────

async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["service"] == "legal-admin-api"


async def test_readiness(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["checks"] == {"database": "healthy", "registry": "healthy"}
    assert body["modules"] == ["ADMIN"]


async def test_readiness_fails_without_registered_modules(client):
    app.dependency_overrides[get_registry] = lambda: ModuleRegistry()
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "not_ready"
    assert body["checks"]["registry"] == "not_frozen"
