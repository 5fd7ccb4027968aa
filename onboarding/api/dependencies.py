"""API Dependencies — builds request-scoped collaborators for the routes.

Invariants:
    - Every collaborator is injected through Depends (overridable in tests)
    - Actor resolution never fails the request itself; the pipeline decides on None
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.config import Settings, get_settings
from onboarding.core.authorize import PermissionGate
from onboarding.core.domain_types import Actor
from onboarding.core.repository_protocols import Notifier
from onboarding.infrastructure.actor_resolver import ApiKeyActorResolver
from onboarding.infrastructure.database import get_db
from onboarding.infrastructure.notifier import LogNotifier
from onboarding.infrastructure.report_dispatch import (
    ReportDispatcher, get_report_dispatcher,
)
from onboarding.infrastructure.user_repository import SqlUserRepository
from onboarding.services.handle_users import UserRequestHandlers
from onboarding.services.request_pipeline import RequestPipeline
from onboarding.services.user_service import UserService


def get_actor(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> Actor | None:
    return ApiKeyActorResolver(settings.api_keys).resolve(authorization)


def get_notifier(settings: Settings = Depends(get_settings)) -> Notifier:
    return LogNotifier(settings.mail_from_address, settings.mail_from_name)


def get_user_handlers(
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    dispatcher: ReportDispatcher = Depends(get_report_dispatcher),
) -> UserRequestHandlers:
    service = UserService(SqlUserRepository(db), notifier, dispatcher)
    pipeline = RequestPipeline(PermissionGate(), dispatcher)
    return UserRequestHandlers(pipeline, service)
