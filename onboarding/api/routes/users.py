"""Users — POST /users plus read endpoints, all run through the request pipeline.

Invariants:
    - Body, path id and paging arrive raw: nothing is parsed before authentication
    - Field rules are enforced by the pipeline's validator, not Pydantic
    - Routes only translate ApiResponse into JSONResponse

Design Decisions:
    - Conflict returns 409 (never a 2xx with an error body)
    - Unparseable JSON is handed on as None, which the create-user rules reject
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from onboarding.api.dependencies import get_actor, get_user_handlers
from onboarding.core.domain_types import Actor
from onboarding.schemas.user import (
    ErrorResponse, ReportedErrorResponse, UserListResponse, UserResponse,
    ValidationErrorResponse,
)
from onboarding.services.handle_users import UserRequestHandlers
from onboarding.services.request_pipeline import ApiResponse

router = APIRouter(prefix="/api/v1/users", tags=["users"])

_AUTH_RESPONSES = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
}


def _to_json(response: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {"model": UserResponse},
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ReportedErrorResponse},
        **_AUTH_RESPONSES,
    },
)
async def create_user(
    request: Request,
    actor: Actor | None = Depends(get_actor),
    handlers: UserRequestHandlers = Depends(get_user_handlers),
):
    """Create a user from {"user": {"email": ..., ...}}."""
    return _to_json(await handlers.create(actor, await _read_json(request)))


@router.get(
    "",
    responses={
        status.HTTP_200_OK: {"model": UserListResponse},
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        **_AUTH_RESPONSES,
    },
)
async def list_users(
    limit: str | None = Query(None, description="Page size, 1-100 (default 10)"),
    offset: str | None = Query(None, description="Rows to skip (default 0)"),
    actor: Actor | None = Depends(get_actor),
    handlers: UserRequestHandlers = Depends(get_user_handlers),
):
    """List users, newest first."""
    return _to_json(await handlers.index(actor, limit, offset))


@router.get(
    "/{user_id}",
    responses={
        status.HTTP_200_OK: {"model": UserResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        **_AUTH_RESPONSES,
    },
)
async def get_user(
    user_id: str,
    actor: Actor | None = Depends(get_actor),
    handlers: UserRequestHandlers = Depends(get_user_handlers),
):
    """Get one user's representation."""
    return _to_json(await handlers.show(actor, user_id))
