"""User service tests — uniqueness, lookups, and the late unique-constraint path.

Invariants:
    - Duplicate CIN (pre-check) raises UserConflictError; store count stays 1
    - Duplicate CIN missed by the pre-check is caught by uq_users_cin and still
      surfaces as UserConflictError
    - Missing users raise UserNotFoundError with the exact contract message
    - Storage failures leave the repository as DatabaseError, never a raw SQLAlchemy error
"""

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from cin_registry.core.errors import DatabaseError, UserConflictError, UserNotFoundError
from cin_registry.infrastructure.user_repository import SqlUserRepository
from cin_registry.models.user import User
from cin_registry.schemas.user import UserCreate
from cin_registry.services.user_service import UserService


def _candidate(**overrides) -> UserCreate:
    fields = {
        "name": "Jane Doe",
        "cin": "12345678",
        "cin_release_date": date(2022, 5, 10),
        "is_married": True,
    }
    fields.update(overrides)
    return UserCreate(**fields)


async def _count(db, cin: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(User).where(User.cin == cin),
    )
    return result.scalar_one()


class _BlindPrecheckRepository(SqlUserRepository):
    """Misses the first CIN lookup, as a concurrent request would."""

    def __init__(self, db):
        super().__init__(db)
        self.lookups = 0

    async def find_by_cin(self, cin):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return await super().find_by_cin(cin)


@pytest.fixture
def service(test_db) -> UserService:
    return UserService(SqlUserRepository(test_db))


async def test_create_assigns_id(service):
    user = await service.create(_candidate())
    assert user.id is not None
    assert user.cin == "12345678"
    assert user.name == "Jane Doe"
    assert user.cin_release_date == date(2022, 5, 10)
    assert user.is_married is True


async def test_create_duplicate_cin_conflicts(service, test_db):
    await service.create(_candidate())

    with pytest.raises(UserConflictError) as exc_info:
        await service.create(_candidate(name="Someone Else", cin_release_date=date(2019, 1, 1)))

    assert exc_info.value.message == "User with CIN 12345678 already exists."
    assert await _count(test_db, "12345678") == 1


async def test_unique_constraint_violation_maps_to_conflict(test_db):
    await UserService(SqlUserRepository(test_db)).create(_candidate())
    repository = _BlindPrecheckRepository(test_db)

    with pytest.raises(UserConflictError) as exc_info:
        await UserService(repository).create(_candidate(name="Racer"))

    assert exc_info.value.message == "User with CIN 12345678 already exists."
    assert exc_info.value.context.debug_info == {"detected_by": "unique_constraint"}
    assert repository.lookups == 2
    assert await _count(test_db, "12345678") == 1


async def test_different_cins_both_created(service, test_db):
    first = await service.create(_candidate(cin="11111111"))
    second = await service.create(_candidate(cin="22222222"))
    assert first.id != second.id


async def test_find_by_cin_and_release_date(service):
    created = await service.create(_candidate())
    found = await service.find_by_cin_and_release_date("12345678", date(2022, 5, 10))
    assert found.id == created.id


async def test_find_with_wrong_release_date_not_found(service):
    await service.create(_candidate())
    with pytest.raises(UserNotFoundError) as exc_info:
        await service.find_by_cin_and_release_date("12345678", date(2022, 5, 11))
    assert exc_info.value.message == (
        "User not found with CIN: 12345678 and Release Date: 2022-05-11"
    )


async def test_find_by_cin(service):
    created = await service.create(_candidate())
    assert (await service.find_by_cin("12345678")).id == created.id


async def test_find_by_cin_missing(service):
    with pytest.raises(UserNotFoundError) as exc_info:
        await service.find_by_cin("87654321")
    assert exc_info.value.message == "User not found with CIN: 87654321"


@pytest.fixture
async def tableless_db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with async_sessionmaker(engine, expire_on_commit=False)() as db:
        yield db
    await engine.dispose()


async def test_query_failure_is_database_error(tableless_db):
    with pytest.raises(DatabaseError) as exc_info:
        await SqlUserRepository(tableless_db).find_by_cin_and_release_date(
            "12345678", date(2022, 5, 10),
        )
    assert exc_info.value.context.cin == "12345678"
    assert exc_info.value.context.release_date == date(2022, 5, 10)
    assert "query" in exc_info.value.context.debug_info["detail"]


async def test_commit_failure_is_database_error(tableless_db):
    with pytest.raises(DatabaseError) as exc_info:
        await SqlUserRepository(tableless_db).save(_candidate())
    assert exc_info.value.operation == "commit"
    assert exc_info.value.context.cin == "12345678"
