"""Task Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., description="Task title, must not be blank")


class TaskUpdate(BaseModel):
    """Schema for updating a task. Omitted fields are left unchanged."""

    title: str | None = Field(None, description="New title, must not be blank")
    completed: bool | None = Field(None, description="New completion state")


class TaskReorder(BaseModel):
    """Schema for reordering tasks."""

    ids: list[int] = Field(..., description="Task IDs in their new display order")


class TaskResponse(BaseModel):
    """Schema for task response."""

    id: int
    title: str
    completed: bool
    position: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
