"""Report Dispatcher — fans one failure out to every reporter and collects the ids.

Invariants:
    - report() returns only after every reporter finished, failed, timed out or was cancelled
    - Each reporter call is bounded by timeout_seconds; the whole fan-out by ceiling_seconds
    - A reporter that raises or times out contributes no entry (fail-open)
    - Reporter failures are logged, never propagated to the request

Design Decisions:
    - asyncio.wait over gather: pending calls can be cancelled at the ceiling
    - Singleton dispatcher initialized on startup, same lifecycle as db_manager
"""

import asyncio
import logging

from onboarding.core.domain_types import ReporterResult
from onboarding.core.repository_protocols import ExceptionReporter

logger = logging.getLogger(__name__)


class ReportDispatcher:
    """Concurrent fan-out over configured reporters."""

    def __init__(
        self,
        reporters: list[ExceptionReporter],
        timeout_seconds: float = 2.0,
        ceiling_seconds: float = 5.0,
    ):
        self.reporters = list(reporters)
        self.timeout_seconds = timeout_seconds
        self.ceiling_seconds = ceiling_seconds

    async def report(self, error: BaseException) -> ReporterResult:
        if not self.reporters:
            return {}
        tasks = [
            asyncio.create_task(self._report_one(reporter, error))
            for reporter in self.reporters
        ]
        done, pending = await asyncio.wait(tasks, timeout=self.ceiling_seconds)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                f"{len(pending)} reporter(s) cut off at {self.ceiling_seconds}s ceiling",
            )

        results: ReporterResult = {}
        for task in done:
            name, report_id = task.result()
            if report_id:
                results[name] = report_id
        return results

    async def _report_one(
        self, reporter: ExceptionReporter, error: BaseException,
    ) -> tuple[str, str | None]:
        try:
            report_id = await asyncio.wait_for(
                reporter.report(error), timeout=self.timeout_seconds,
            )
            return reporter.name, report_id
        except asyncio.TimeoutError:
            logger.warning(
                f"Reporter timed out after {self.timeout_seconds}s",
                extra={"reporter": reporter.name},
            )
        except Exception as e:
            logger.warning(
                f"Reporter failed: {e}",
                extra={"reporter": reporter.name},
            )
        return reporter.name, None

    async def aclose(self) -> None:
        for reporter in self.reporters:
            close = getattr(reporter, "aclose", None)
            if close is not None:
                await close()


# Singleton (initialized on startup)
report_dispatcher: ReportDispatcher | None = None


def init_reporting(
    reporters: list[ExceptionReporter],
    timeout_seconds: float = 2.0,
    ceiling_seconds: float = 5.0,
) -> ReportDispatcher:
    global report_dispatcher
    report_dispatcher = ReportDispatcher(
        reporters, timeout_seconds, ceiling_seconds,
    )
    return report_dispatcher


def get_report_dispatcher() -> ReportDispatcher:
    """FastAPI dependency for the report dispatcher."""
    if not report_dispatcher:
        raise RuntimeError("Reporting not initialized")
    return report_dispatcher
