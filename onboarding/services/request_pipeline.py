"""Request Pipeline — authenticate, authorize, validate, delegate, respond.

Invariants:
    - Stages run strictly in order; the first failing stage ends the request
    - Authentication, authorization and validation failures never reach reporters
    - Reportable failures are formatted only after the full reporter mapping is collected
    - The pipeline performs no durable side effects of its own

Design Decisions:
    - Collaborators composed in, not inherited (no controller base class)
    - Delegates return Result; anything they raise is wrapped as InternalError
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

from onboarding.core.authorize import PermissionGate
from onboarding.core.domain_types import Action, Actor
from onboarding.core.errors import (
    InternalError, NotAuthenticatedError, NotAuthorizedError, OnboardingError,
)
from onboarding.core.format_errors import (
    ExceptionFormatter, default_formatter, status_for,
)
from onboarding.core.repository_protocols import FailureSink
from onboarding.core.result import Err, Result
from onboarding.core.validate_payload import validate

logger = logging.getLogger(__name__)

Delegate = Callable[[Any], Awaitable[Result[Any, OnboardingError]]]


class Stage(str, Enum):
    """Pipeline states; a response records the last stage reached."""
    START = "start"
    AUTHENTICATED = "authenticated"
    AUTHORIZED = "authorized"
    VALIDATED = "validated"
    DELEGATED = "delegated"
    RESPONDED = "responded"


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Any
    stage: Stage = Stage.RESPONDED


class RequestPipeline:
    """Runs one request through the staged checks and formats the outcome."""

    def __init__(
        self,
        gate: PermissionGate,
        failure_sink: FailureSink,
        formatter: ExceptionFormatter | None = None,
    ):
        self.gate = gate
        self.failure_sink = failure_sink
        self.formatter = formatter or default_formatter()

    async def run(
        self,
        actor: Actor | None,
        action: Action,
        delegate: Delegate,
        payload: Any = None,
        rules: Mapping[str, str] | None = None,
        success_status: int = 200,
    ) -> ApiResponse:
        if actor is None:
            return self._reject(NotAuthenticatedError(), Stage.START)

        if not self.gate.check(actor, action):
            logger.info(
                "Actor denied",
                extra={"actor_id": actor.id, "action": action.value},
            )
            return self._reject(
                NotAuthorizedError(action.description), Stage.AUTHENTICATED,
            )

        validated = payload
        if rules is not None:
            outcome = validate(payload, rules)
            if isinstance(outcome, Err):
                return self._reject(outcome.error, Stage.AUTHORIZED)
            validated = outcome.value

        try:
            result = await delegate(validated)
        except Exception as e:
            logger.error(
                f"Unhandled error in {action.value}: {e}",
                exc_info=True,
                extra={"actor_id": actor.id},
            )
            result = Err(e if isinstance(e, OnboardingError) else InternalError(e))

        if isinstance(result, Err):
            error = result.error
            error.context.actor_id = actor.id
            error.context.action = action.value
            return await self.fail(error)
        return ApiResponse(success_status, result.value)

    async def fail(self, error: BaseException) -> ApiResponse:
        """Report (when reportable) and format a failure from the delegated stage."""
        if isinstance(error, OnboardingError) and not error.reportable:
            return self._reject(error, Stage.DELEGATED)
        reporter_results = await self.failure_sink.report(error)
        return ApiResponse(
            status_for(error),
            self.formatter.format(error, reporter_results),
        )

    def _reject(self, error: OnboardingError, stage: Stage) -> ApiResponse:
        return ApiResponse(error.http_status, error.to_response(), stage)
