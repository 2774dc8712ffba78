"""Pydantic schemas for request/response validation."""
from donezo.schemas.auth import (
    ApiTokenCreate,
    ApiTokenResponse,
    LoginRequest,
    SuccessResponse,
)
from donezo.schemas.task import (
    TaskCreate,
    TaskReorder,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    # Auth schemas
    "LoginRequest",
    "SuccessResponse",
    "ApiTokenCreate",
    "ApiTokenResponse",
    # Task schemas
    "TaskCreate",
    "TaskUpdate",
    "TaskReorder",
    "TaskResponse",
]
