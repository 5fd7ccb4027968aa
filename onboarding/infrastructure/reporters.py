"""Exception Reporters — null, log-backed and external error-tracker sinks.

Invariants:
    - Misconfiguration raises ReporterUnavailableError in __init__, never on first report()
    - report() returns a correlation id, or None when nothing was recorded
    - Tracker payloads carry the traceback; client bodies never do

Design Decisions:
    - Tracker talks plain JSON over httpx: any collector that answers {"id": ...} works
    - Reporter name is a class attribute so the dispatcher can key results without extra config
"""

import logging
import traceback
import uuid
from datetime import datetime, timezone

import httpx

from onboarding.config import Settings
from onboarding.core.errors import OnboardingError, ReporterUnavailableError
from onboarding.core.repository_protocols import ExceptionReporter

logger = logging.getLogger(__name__)


class NullReporter:
    """Discards failures."""
    name = "null"

    async def report(self, error: BaseException) -> str | None:
        return None


class LogReporter:
    """Writes the failure to the application log under a fresh report id."""
    name = "log"

    async def report(self, error: BaseException) -> str | None:
        report_id = uuid.uuid4().hex
        logger.error(
            f"Reported {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
            extra={
                "report_id": report_id,
                "reporter": self.name,
                "error_code": getattr(error, "code", None),
            },
        )
        return report_id


class ErrorTrackerReporter:
    """Posts failures to an external error-tracking collector."""
    name = "tracker"

    def __init__(
        self,
        url: str | None,
        token: str | None = None,
        timeout_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ReporterUnavailableError(
                self.name, "ERROR_TRACKER_URL is not configured",
            )
        try:
            self.url = httpx.URL(url)
        except (TypeError, httpx.InvalidURL) as e:
            raise ReporterUnavailableError(self.name, str(e)) from e
        if self.url.scheme not in ("http", "https") or not self.url.host:
            raise ReporterUnavailableError(
                self.name, f"ERROR_TRACKER_URL must be an absolute http(s) URL, got {url!r}",
            )
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def report(self, error: BaseException) -> str | None:
        event_id = uuid.uuid4().hex
        response = await self.client.post(self.url, json=_event_payload(event_id, error))
        response.raise_for_status()
        body = response.json() if response.content else {}
        return str(body.get("id") or event_id)

    async def aclose(self) -> None:
        await self.client.aclose()


def _event_payload(event_id: str, error: BaseException) -> dict:
    return {
        "event_id": event_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": getattr(getattr(error, "severity", None), "value", "error"),
        "exception": {
            "type": type(error).__name__,
            "code": error.code if isinstance(error, OnboardingError) else None,
            "message": str(error),
            "stacktrace": traceback.format_exception(
                type(error), error, error.__traceback__,
            ),
        },
    }


def build_reporter(name: str, settings: Settings) -> ExceptionReporter:
    """Construct one reporter by configured name."""
    if name == NullReporter.name:
        return NullReporter()
    if name == LogReporter.name:
        return LogReporter()
    if name == ErrorTrackerReporter.name:
        return ErrorTrackerReporter(
            settings.error_tracker_url,
            settings.error_tracker_token,
            timeout_seconds=settings.reporter_timeout_seconds,
        )
    raise ReporterUnavailableError(name, "unknown reporter")


def build_reporters(settings: Settings) -> list[ExceptionReporter]:
    return [build_reporter(name, settings) for name in settings.reporters]
