"""Authentication Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Schema for login."""

    password: str = Field(..., description="Shared login secret")


class SuccessResponse(BaseModel):
    """Schema for login and logout responses."""

    success: bool = True


class ApiTokenCreate(BaseModel):
    """Schema for creating an API token."""

    name: str | None = Field(None, description="Optional label for the token")


class ApiTokenResponse(BaseModel):
    """Schema for API token response."""

    id: int
    token: str
    name: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
