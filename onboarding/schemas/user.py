"""User Schemas — response contracts documented in the OpenAPI schema.

Invariants:
    - UserResponse mirrors UserRecord.to_representation() field for field
    - Error shapes match OnboardingError.to_response() variants
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class UserResponse(BaseModel):
    """User representation returned by create/show."""
    id: UUID
    email: str
    name: str | None = None
    attributes: dict[str, Any] = {}
    created_at: datetime


class Pagination(BaseModel):
    limit: int
    offset: int


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class ErrorResponse(BaseModel):
    """401/403/404 body."""
    error: str


class ReportedErrorResponse(BaseModel):
    """409/500 body: message, code and reporter correlation ids."""
    error: str
    code: str
    report_ids: dict[str, str] = {}


class ValidationErrorResponse(BaseModel):
    """400 body: field -> ordered messages."""
    errors: dict[str, list[str]]
