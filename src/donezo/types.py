"""Custom SQLAlchemy types."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, TypeDecorator


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime stored as a naive value.

    SQLite has no timezone support, so values are normalized to naive UTC on
    the way in and tagged with UTC on the way out. Comparisons against the
    column go through the same conversion.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert aware datetimes to naive UTC before storing."""
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        """Attach UTC to values read back from the database."""
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value
