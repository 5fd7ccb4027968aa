"""User Request Handlers — create, show and list users through the request pipeline.

Invariants:
    - create runs the create-user rule set; its command is built only from validated output
    - show/index require the view-users capability
    - Raw request input (body, path id, paging) is interpreted only after authorization
    - Success on create is 201 with the resource representation
"""

from uuid import UUID

from onboarding.core.domain_types import Action, Actor, CreateUserCommand, UserId
from onboarding.core.errors import ResourceNotFoundError
from onboarding.core.result import Err, Ok
from onboarding.core.validate_payload import (
    CREATE_USER_RULES, LIST_USERS_RULES, as_integer,
)
from onboarding.services.request_pipeline import ApiResponse, RequestPipeline
from onboarding.services.user_service import UserService

DEFAULT_PAGE_SIZE = 10


class UserRequestHandlers:
    """Binds UserService operations to pipeline runs."""

    def __init__(self, pipeline: RequestPipeline, service: UserService):
        self.pipeline = pipeline
        self.service = service

    async def create(self, actor: Actor | None, payload) -> ApiResponse:
        async def delegate(validated: dict):
            result = await self.service.create_user(
                CreateUserCommand.from_validated(validated),
            )
            if isinstance(result, Err):
                return result
            return Ok(result.value.to_representation())

        return await self.pipeline.run(
            actor, Action.CREATE_USER, delegate,
            payload=payload, rules=CREATE_USER_RULES, success_status=201,
        )

    async def show(self, actor: Actor | None, user_id: str) -> ApiResponse:
        async def delegate(_):
            try:
                parsed = UUID(str(user_id))
            except ValueError:
                return Err(ResourceNotFoundError("User", str(user_id)))
            user = await self.service.get_user(UserId(parsed))
            if user is None:
                return Err(ResourceNotFoundError("User", str(user_id)))
            return Ok(user.to_representation())

        return await self.pipeline.run(actor, Action.VIEW_USERS, delegate)

    async def index(
        self, actor: Actor | None, limit=None, offset=None,
    ) -> ApiResponse:
        async def delegate(query: dict):
            page_limit = _or_default(query["limit"], DEFAULT_PAGE_SIZE)
            page_offset = _or_default(query["offset"], 0)
            users = await self.service.list_users(page_limit, page_offset)
            return Ok({
                "users": [u.to_representation() for u in users],
                "pagination": {"limit": page_limit, "offset": page_offset},
            })

        return await self.pipeline.run(
            actor, Action.VIEW_USERS, delegate,
            payload={"limit": limit, "offset": offset}, rules=LIST_USERS_RULES,
        )


def _or_default(value, default: int) -> int:
    parsed = as_integer(value)
    return default if parsed is None else parsed
