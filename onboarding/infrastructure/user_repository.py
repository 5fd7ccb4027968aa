"""SQL User Repository — UserRepository protocol over an AsyncSession.

Invariants:
    - create_with_activation commits user and activation together or not at all
    - An integrity error on commit surfaces as AlreadyExistsError only when the email is taken;
      any other violation (e.g. activation token clash) propagates as IntegrityError
    - find_by only accepts whitelisted columns

Design Decisions:
    - flush() before adding the activation: user id is needed for the FK, still one transaction
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.core.domain_types import CreateUserCommand, UserId, UserRecord
from onboarding.core.errors import AlreadyExistsError
from onboarding.models.activation import Activation
from onboarding.models.user import User

logger = logging.getLogger(__name__)

_LOOKUP_COLUMNS = {"email": User.email, "name": User.name}


class SqlUserRepository:
    """User persistence backed by SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by(self, field: str, value: str) -> UserRecord | None:
        column = _LOOKUP_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"Cannot look users up by {field!r}")
        result = await self.db.execute(select(User).where(column == value))
        user = result.scalars().first()
        return user.to_record() if user else None

    async def get(self, user_id: UserId) -> UserRecord | None:
        user = await self.db.get(User, user_id)
        return user.to_record() if user else None

    async def list_page(self, limit: int, offset: int) -> list[UserRecord]:
        result = await self.db.execute(
            select(User)
            .order_by(User.created_at.desc(), User.id)
            .limit(limit)
            .offset(offset),
        )
        return [user.to_record() for user in result.scalars().all()]

    async def create_with_activation(
        self, command: CreateUserCommand, activation_token: str,
    ) -> UserRecord:
        user = User(
            email=command.email,
            name=command.name,
            attributes=dict(command.attributes),
        )
        try:
            self.db.add(user)
            await self.db.flush()
            self.db.add(Activation(user_id=user.id, token=activation_token))
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Integrity error creating user: {e.orig}")
            if await self._email_taken(command.email):
                raise AlreadyExistsError("email", command.email) from e
            raise
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user.to_record()

    async def _email_taken(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email))
        return result.first() is not None
