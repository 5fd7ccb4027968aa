"""Exception Formatter — turns a failure plus reporter results into a client body.

Invariants:
    - Base step runs first; enrichers only add keys on top of its output
    - Raw causes, tracebacks and messages of non-OnboardingError exceptions never reach the body
    - Empty reporter results add no "report_ids" key

Design Decisions:
    - Decorator over a base formatter: enrichers may depend on fields the base step produced
"""

from typing import Protocol

from onboarding.core.errors import InternalError, OnboardingError


class ExceptionFormatter(Protocol):
    def format(self, error: BaseException, reporter_results: dict[str, str]) -> dict: ...


class BaseExceptionFormatter:
    """Maps any exception onto the OnboardingError envelope."""

    def format(self, error: BaseException, reporter_results: dict[str, str]) -> dict:
        if not isinstance(error, OnboardingError):
            error = InternalError(error)
        return error.to_response()


class ReportIdFormatter:
    """Adds reporter correlation ids to whatever the wrapped formatter produced."""

    def __init__(self, base: ExceptionFormatter):
        self.base = base

    def format(self, error: BaseException, reporter_results: dict[str, str]) -> dict:
        body = dict(self.base.format(error, reporter_results))
        if reporter_results:
            body["report_ids"] = dict(reporter_results)
        return body


def default_formatter() -> ExceptionFormatter:
    return ReportIdFormatter(BaseExceptionFormatter())


def status_for(error: BaseException) -> int:
    """HTTP status for a formatted failure (500 for anything unexpected)."""
    if isinstance(error, OnboardingError):
        return error.http_status
    return 500
