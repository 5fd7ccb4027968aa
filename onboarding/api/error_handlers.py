"""Error Handlers — global exception handlers for the onboarding API.

Invariants:
    - OnboardingError → its own envelope; reportable ones carry report_ids
    - Routes take raw input, so framework parse errors never precede authentication
    - Exception (catch-all) → reported, then a 500 body that never leaks internal details

Design Decisions:
    - Two-layer handler: domain (OnboardingError), catch-all (Exception)
    - Handlers read the dispatcher singleton at call time: exception handlers get no Depends
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from onboarding.core.errors import InternalError, OnboardingError
from onboarding.core.format_errors import default_formatter
from onboarding.infrastructure import report_dispatch

logger = logging.getLogger(__name__)

_formatter = default_formatter()


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_onboarding_error_handler(app)
    _register_generic_error_handler(app)


async def _report(error: BaseException) -> dict[str, str]:
    dispatcher = report_dispatch.report_dispatcher
    if dispatcher is None:
        return {}
    return await dispatcher.report(error)


def _register_onboarding_error_handler(app: FastAPI) -> None:
    """Register onboarding domain/infrastructure error handler."""

    @app.exception_handler(OnboardingError)
    async def onboarding_error_handler(request: Request, exc: OnboardingError):
        """Handle all onboarding errors raised outside the pipeline."""
        logger.error(
            f"OnboardingError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        exc.context.path = request.url.path
        results = await _report(exc) if exc.reportable else {}
        return JSONResponse(
            status_code=exc.http_status, content=_formatter.format(exc, results),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — reports, never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        error = InternalError(exc)
        results = await _report(error)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_formatter.format(error, results),
        )
