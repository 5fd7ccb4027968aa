"""Welcome Notifier — records the welcome message that would be mailed to a new user.

Invariants:
    - Implements the Notifier protocol; delivery itself is out of scope
    - Failures propagate to the caller, which decides they are non-fatal
"""

import logging

from onboarding.core.domain_types import UserRecord

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to the application"


class LogNotifier:
    """Logs the outbound welcome message instead of delivering it."""

    def __init__(self, from_address: str, from_name: str):
        self.from_address = from_address
        self.from_name = from_name

    async def send_welcome(self, user: UserRecord, activation_token: str) -> None:
        recipient = f"{user.name} <{user.email}>" if user.name else user.email
        logger.info(
            f"Welcome mail from {self.from_name} <{self.from_address}> "
            f"to {recipient}: {WELCOME_SUBJECT}",
            extra={"user_id": str(user.id)},
        )
