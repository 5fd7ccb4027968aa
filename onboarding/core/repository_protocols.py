"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the pure core never awaits them itself
"""

from typing import Protocol

from onboarding.core.domain_types import (
    CreateUserCommand, ReporterResult, UserId, UserRecord,
)


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def find_by(self, field: str, value: str) -> UserRecord | None: ...
    async def get(self, user_id: UserId) -> UserRecord | None: ...
    async def list_page(self, limit: int, offset: int) -> list[UserRecord]: ...
    async def create_with_activation(
        self, command: CreateUserCommand, activation_token: str,
    ) -> UserRecord: ...


class Notifier(Protocol):
    """Contract for outbound notifications (welcome mail) — fail-open."""
    async def send_welcome(self, user: UserRecord, activation_token: str) -> None: ...


class ExceptionReporter(Protocol):
    """Telemetry sink: records a failure, returns a correlation id (or None)."""
    name: str

    async def report(self, error: BaseException) -> str | None: ...


class FailureSink(Protocol):
    """Fan-out over all configured reporters, returning the full result mapping."""
    async def report(self, error: BaseException) -> ReporterResult: ...
