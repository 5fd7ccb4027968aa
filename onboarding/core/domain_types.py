"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Actor is immutable once built by the authentication collaborator
    - CreateUserCommand is only built from Validator output (from_validated)
    - Email addresses are stored lower-cased

Design Decisions:
    - Frozen dataclasses over Pydantic here: core stays free of IO and framework types
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)

# reporter name -> report id, for one failure occurrence
ReporterResult = dict[str, str]


# ─── Enums ───────────────────────────────────────────────────────

class Action(str, Enum):
    """Capabilities checked by the AuthorizationGate."""
    CREATE_USER = "create-user"
    VIEW_USERS = "view-users"

    @property
    def description(self) -> str:
        return _ACTION_DESCRIPTIONS[self]


_ACTION_DESCRIPTIONS = {
    Action.CREATE_USER: "create users",
    Action.VIEW_USERS: "view users",
}

WILDCARD_PERMISSION = "*"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Actor:
    """Authenticated caller."""
    id: str
    permissions: frozenset[str] = frozenset()


@dataclass(frozen=True)
class CreateUserCommand:
    """Validated user-creation payload."""
    email: str
    name: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_validated(cls, payload: dict) -> "CreateUserCommand":
        data = dict(payload["user"])
        email = str(data.pop("email")).strip().lower()
        name = data.pop("name", None)
        return cls(
            email=email,
            name=str(name) if name is not None else None,
            attributes=data,
        )


@dataclass(frozen=True)
class UserRecord:
    """Persisted user as seen by the domain."""
    id: UserId
    email: str
    name: str | None
    attributes: dict[str, Any]
    created_at: datetime

    def to_representation(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "attributes": self.attributes,
            "created_at": self.created_at.isoformat(),
        }
