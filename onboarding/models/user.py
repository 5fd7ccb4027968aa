"""User ORM — persisted account created by POST /users.

Invariants:
    - id is UUID primary key
    - email is unique and stored lower-cased
    - extra payload fields live in the attributes JSON column

Design Decisions:
    - JSON column for arbitrary extra fields: payload shape is open beyond email/name
    - activation is one-to-one and cascades with the user
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from onboarding.core.domain_types import UserId, UserRecord
from onboarding.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    attributes: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    activation: Mapped["Activation"] = relationship(
        "Activation", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=UserId(self.id),
            email=self.email,
            name=self.name,
            attributes=dict(self.attributes or {}),
            created_at=self.created_at,
        )
