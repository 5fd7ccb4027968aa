"""Domain Types — actor, command construction, representation and permission gate."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from onboarding.core.authorize import PermissionGate
from onboarding.core.domain_types import (
    Action, Actor, CreateUserCommand, UserId, UserRecord,
)


def test_actor_is_immutable():
    actor = Actor(id="u1", permissions=frozenset({"create-user"}))
    with pytest.raises(FrozenInstanceError):
        actor.id = "u2"


def test_command_from_validated_lifts_email_and_name():
    command = CreateUserCommand.from_validated(
        {"user": {"email": " A@B.COM ", "name": "A", "team": "core"}},
    )
    assert command.email == "a@b.com"
    assert command.name == "A"
    assert command.attributes == {"team": "core"}


def test_command_from_validated_does_not_mutate_payload():
    payload = {"user": {"email": "a@b.com", "name": "A"}}
    CreateUserCommand.from_validated(payload)
    assert payload == {"user": {"email": "a@b.com", "name": "A"}}


def test_user_record_representation():
    uid = UserId(uuid4())
    created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    record = UserRecord(uid, "a@b.com", None, {"x": 1}, created)
    assert record.to_representation() == {
        "id": str(uid),
        "email": "a@b.com",
        "name": None,
        "attributes": {"x": 1},
        "created_at": "2026-01-02T03:04:05+00:00",
    }


def test_action_values_and_descriptions():
    assert Action.CREATE_USER.value == "create-user"
    assert Action.CREATE_USER.description == "create users"
    assert Action.VIEW_USERS.description == "view users"


def test_gate_grants_held_permission():
    gate = PermissionGate()
    actor = Actor(id="u1", permissions=frozenset({"create-user"}))
    assert gate.check(actor, Action.CREATE_USER) is True
    assert gate.check(actor, Action.VIEW_USERS) is False


def test_gate_accepts_plain_action_names():
    actor = Actor(id="u1", permissions=frozenset({"create-user"}))
    assert PermissionGate().check(actor, "create-user") is True


def test_gate_wildcard_grants_everything():
    actor = Actor(id="root", permissions=frozenset({"*"}))
    assert PermissionGate().check(actor, Action.VIEW_USERS) is True


def test_gate_denies_empty_permissions():
    assert PermissionGate().check(Actor(id="u"), Action.CREATE_USER) is False
