"""Database models."""
from donezo.models.session import LoginSession
from donezo.models.task import Task
from donezo.models.token import ApiToken

__all__ = [
    "LoginSession",
    "ApiToken",
    "Task",
]
