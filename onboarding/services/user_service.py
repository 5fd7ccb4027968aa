"""User Service — business logic for user creation and lookup.

Invariants:
    - Uniqueness by email is checked before anything is written
    - User and activation are created in one transaction (both or neither)
    - The welcome notification is best-effort: its failure is reported, never returned
    - Domain failures are returned as Err values, not raised

Design Decisions:
    - Repository, notifier and failure sink injected: no global facades
    - Unique-constraint races at commit are mapped to AlreadyExists by the repository
"""

import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError

from onboarding.core.domain_types import CreateUserCommand, UserId, UserRecord
from onboarding.core.errors import AlreadyExistsError, InternalError
from onboarding.core.repository_protocols import (
    FailureSink, Notifier, UserRepository,
)
from onboarding.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

ACTIVATION_TOKEN_BYTES = 32


class UserService:
    """Creates and reads users; the only writer of user state."""

    def __init__(
        self,
        repository: UserRepository,
        notifier: Notifier,
        failure_sink: FailureSink,
    ):
        self.repository = repository
        self.notifier = notifier
        self.failure_sink = failure_sink

    async def create_user(
        self, command: CreateUserCommand,
    ) -> Result[UserRecord, AlreadyExistsError | InternalError]:
        existing = await self.repository.find_by("email", command.email)
        if existing is not None:
            return Err(AlreadyExistsError("email", command.email))

        token = secrets.token_urlsafe(ACTIVATION_TOKEN_BYTES)
        try:
            user = await self.repository.create_with_activation(command, token)
        except AlreadyExistsError as e:
            return Err(e)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create user: {e}", exc_info=True)
            return Err(InternalError(e))

        logger.info("User created", extra={"user_id": str(user.id)})
        await self._send_welcome(user, token)
        return Ok(user)

    async def get_user(self, user_id: UserId) -> UserRecord | None:
        return await self.repository.get(user_id)

    async def list_users(self, limit: int, offset: int) -> list[UserRecord]:
        return await self.repository.list_page(limit, offset)

    async def _send_welcome(self, user: UserRecord, token: str) -> None:
        try:
            await self.notifier.send_welcome(user, token)
        except Exception as e:
            logger.warning(
                f"Welcome notification failed: {e}",
                extra={"user_id": str(user.id)},
            )
            await self.failure_sink.report(e)
