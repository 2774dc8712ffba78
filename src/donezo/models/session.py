"""Login session model."""
from datetime import datetime

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from donezo.database import Base
from donezo.types import UTCDateTime, utc_now


class LoginSession(Base):
    """Server-side session created by a successful login."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utc_now)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("expires_at > created_at", name="session_expires_after_creation"),
    )

    def __repr__(self) -> str:
        return f"<LoginSession(id={self.id[:8]}..., expires_at={self.expires_at})>"
