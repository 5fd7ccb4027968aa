"""User Service — creation, uniqueness and best-effort notification against SQLite.

Tests cover:
    - create_user returns Ok, then Err(AlreadyExists) for the same email
    - Email uniqueness is case-insensitive
    - A commit-time unique violation maps to AlreadyExists
    - Notifier failure is reported and does not undo the user
    - A failed activation insert leaves no user behind
    - A clash that is not on email (activation token) is an internal error, not AlreadyExists
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from onboarding.core.domain_types import CreateUserCommand
from onboarding.core.errors import AlreadyExistsError, InternalError
from onboarding.core.result import Err, Ok
from onboarding.infrastructure.user_repository import SqlUserRepository
from onboarding.models.activation import Activation
from onboarding.models.user import User
from onboarding.services.user_service import UserService
from tests.services.fakes import FakeNotifier, RecordingSink


def _service(test_db, notifier=None, sink=None) -> UserService:
    return UserService(
        SqlUserRepository(test_db), notifier or FakeNotifier(), sink or RecordingSink(),
    )


async def _count(test_db, model) -> int:
    return (await test_db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_create_user_twice_conflicts_on_second_call(test_db):
    service = _service(test_db)
    command = CreateUserCommand(email="a@b.com", name="A")

    first = await service.create_user(command)
    second = await service.create_user(command)

    assert isinstance(first, Ok)
    assert first.value.email == "a@b.com"
    assert isinstance(second, Err)
    assert isinstance(second.error, AlreadyExistsError)
    assert second.error.field == "email"
    assert second.error.value == "a@b.com"
    assert await _count(test_db, User) == 1
    assert await _count(test_db, Activation) == 1


async def test_uniqueness_ignores_email_case(test_db):
    service = _service(test_db)
    await service.create_user(
        CreateUserCommand.from_validated({"user": {"email": "Mixed@Case.io"}}),
    )

    result = await service.create_user(
        CreateUserCommand.from_validated({"user": {"email": "mixed@case.IO"}}),
    )

    assert isinstance(result, Err)


async def test_commit_time_race_maps_to_already_exists(test_db):
    repository = SqlUserRepository(test_db)
    await repository.create_with_activation(
        CreateUserCommand(email="race@b.com"), "token-1",
    )
    # Simulate a concurrent writer: the pre-check sees nothing
    repository.find_by = AsyncMock(return_value=None)
    service = UserService(repository, FakeNotifier(), RecordingSink())

    result = await service.create_user(CreateUserCommand(email="race@b.com"))

    assert isinstance(result, Err)
    assert isinstance(result.error, AlreadyExistsError)
    assert await _count(test_db, User) == 1
    assert await _count(test_db, Activation) == 1


async def test_database_failure_returns_internal_error(test_db):
    repository = SqlUserRepository(test_db)
    repository.create_with_activation = AsyncMock(
        side_effect=OperationalError("INSERT", {}, Exception("db gone")),
    )
    service = UserService(repository, FakeNotifier(), RecordingSink())

    result = await service.create_user(CreateUserCommand(email="a@b.com"))

    assert isinstance(result, Err)
    assert isinstance(result.error, InternalError)
    assert isinstance(result.error.cause, OperationalError)


async def test_notifier_failure_is_reported_not_returned(test_db):
    notifier = FakeNotifier()
    notifier.fail_with = TimeoutError("mail relay timeout")
    sink = RecordingSink()
    service = _service(test_db, notifier, sink)

    result = await service.create_user(CreateUserCommand(email="a@b.com"))

    assert isinstance(result, Ok)
    assert sink.reported == [notifier.fail_with]
    assert await _count(test_db, User) == 1


async def test_welcome_receives_activation_token(test_db):
    notifier = FakeNotifier()
    service = _service(test_db, notifier)

    result = await service.create_user(CreateUserCommand(email="a@b.com"))

    activation = (await test_db.execute(select(Activation))).scalar_one()
    assert notifier.sent == [(result.value, activation.token)]


async def test_extra_fields_are_kept_as_attributes(test_db):
    service = _service(test_db)
    command = CreateUserCommand.from_validated(
        {"user": {"email": "a@b.com", "name": "A", "locale": "en", "tags": ["x"]}},
    )

    result = await service.create_user(command)

    fetched = await service.get_user(result.value.id)
    assert fetched == result.value
    assert fetched.attributes == {"locale": "en", "tags": ["x"]}


async def test_list_users_applies_limit_and_offset(test_db):
    service = _service(test_db)
    for i in range(4):
        await service.create_user(CreateUserCommand(email=f"u{i}@b.com"))

    page = await service.list_users(limit=3, offset=2)

    assert len(page) == 2


async def test_failed_activation_insert_leaves_no_user(test_db):
    repository = SqlUserRepository(test_db)

    # NULL token violates activations.token NOT NULL after the user is flushed
    with pytest.raises(IntegrityError):
        await repository.create_with_activation(
            CreateUserCommand(email="half@b.com"), None,
        )

    assert await _count(test_db, User) == 0
    assert await _count(test_db, Activation) == 0


async def test_activation_token_clash_is_internal_error(test_db, monkeypatch):
    monkeypatch.setattr(
        "onboarding.services.user_service.secrets.token_urlsafe",
        lambda nbytes: "same-token",
    )
    service = _service(test_db)
    await service.create_user(CreateUserCommand(email="first@b.com"))

    result = await service.create_user(CreateUserCommand(email="other@b.com"))

    assert isinstance(result, Err)
    assert isinstance(result.error, InternalError)
    assert isinstance(result.error.cause, IntegrityError)
    assert await SqlUserRepository(test_db).find_by("email", "other@b.com") is None
    assert await _count(test_db, User) == 1
