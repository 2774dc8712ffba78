"""Task model."""
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from donezo.database import Base
from donezo.types import UTCDateTime, utc_now


class Task(Base):
    """Task model.

    ``position`` defines display order. Values are not contiguous in general
    and may collide after a partial reorder; listings break ties by id.
    """

    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    completed: Mapped[bool] = mapped_column(nullable=False, default=False, index=True)
    position: Mapped[int] = mapped_column(nullable=False, default=0, index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utc_now)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title[:30]}, position={self.position})>"
