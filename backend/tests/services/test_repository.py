"""SQLAlchemy Repository — soft delete, paging and audit stamping.

Tests:
    - Soft-deleted rows hidden from get/get_all/find_by unless asked for
    - paged() orders by creation and reports the total
    - add()/update() stamp created_by / last_modified_by from the identity
    - Constraint violations surface as DatabaseError without the SQL text
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import DatabaseError
from app.infrastructure.repository import SqlAlchemyRepository
from app.infrastructure.security import hash_password
from app.models.contract import Contract
from app.models.user import User


@pytest.fixture
async def contracts(test_db, admin_identity):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    rows = [
        Contract(
            id=f"c-{i}", name=f"Contract {i}", author="Ann",
            create_time=start + timedelta(days=i),
        )
        for i in range(1, 6)
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return SqlAlchemyRepository(test_db, Contract, admin_identity)


async def test_soft_delete_hides_row(contracts):
    row = await contracts.get("c-1")
    await contracts.delete(row)
    await contracts.commit()

    assert await contracts.get("c-1") is None
    assert (await contracts.get("c-1", include_deleted=True)).is_deleted
    assert len(await contracts.get_all()) == 4
    assert [c.id for c in await contracts.get_all(is_deleted=True)] == ["c-1"]


async def test_hard_delete_removes_row(contracts):
    await contracts.delete(await contracts.get("c-2"), soft=False)
    await contracts.commit()
    assert await contracts.get("c-2", include_deleted=True) is None


async def test_find_by_and_first_by(contracts):
    assert len(await contracts.find_by(author="Ann")) == 5
    assert (await contracts.first_by(name="Contract 3")).id == "c-3"
    assert await contracts.first_by(name="Nope") is None


async def test_paged(contracts):
    rows, total = await contracts.paged(2, 2)
    assert total == 5
    assert [r.id for r in rows] == ["c-3", "c-4"]

    rows, total = await contracts.paged(3, 2)
    assert [r.id for r in rows] == ["c-5"]


async def test_paged_excludes_deleted(contracts):
    await contracts.delete(await contracts.get("c-5"))
    await contracts.commit()
    rows, total = await contracts.paged(1, 10)
    assert total == 4
    assert "c-5" not in [r.id for r in rows]


async def test_audit_columns(contracts):
    created = await contracts.add(Contract(name="Fresh", author="Zed"))
    assert created.created_by == "admin"
    assert created.id

    row = await contracts.get("c-1")
    await contracts.update(row)
    assert row.last_modified_by == "admin"
    assert row.last_modified_time is not None


async def test_constraint_violation_raises_database_error(test_db, seed_users):
    users = SqlAlchemyRepository(test_db, User)
    duplicate = User(id="clerk-2", username="clerk", password=hash_password("dup-pass"))

    with pytest.raises(DatabaseError) as exc_info:
        await users.add(duplicate)

    assert exc_info.value.message == "Database insert failed: Integrity constraint violated"
    assert "INSERT" not in exc_info.value.message
    assert duplicate.password not in exc_info.value.message
    assert len(await users.get_all()) == 2
