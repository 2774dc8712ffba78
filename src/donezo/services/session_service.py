"""Session service: create, validate, revoke and sweep login sessions."""

import logging
from datetime import datetime

from sqlalchemy import delete

from donezo.database import Database
from donezo.models import LoginSession
from donezo.types import utc_now

logger = logging.getLogger(__name__)


def create_session(
    db: Database,
    session_id: str,
    expires_at: datetime,
    created_at: datetime | None = None,
) -> LoginSession:
    """
    Persist a new session.

    Args:
        db: Store handle
        session_id: Opaque session id
        expires_at: Expiry time, must be later than ``created_at``
        created_at: Creation time, defaults to now

    Returns:
        The stored session

    Raises:
        StorageError: If the id already exists or the row is rejected
    """
    session = LoginSession(
        id=session_id,
        created_at=created_at or utc_now(),
        expires_at=expires_at,
    )
    with db.session() as s:
        s.add(session)
        s.flush()
        return session


def get_valid_session(db: Database, session_id: str) -> LoginSession | None:
    """
    Fetch a session by id, treating expired sessions as absent.

    Expired rows are left in place for :func:`sweep_expired_sessions`.
    """
    with db.session() as s:
        session = s.get(LoginSession, session_id)
    if session is None or session.expires_at <= utc_now():
        return None
    return session


def revoke_session(db: Database, session_id: str) -> None:
    """Delete a session. Unknown ids are ignored."""
    with db.session() as s:
        s.execute(
            delete(LoginSession)
            .where(LoginSession.id == session_id)
            .execution_options(synchronize_session=False)
        )


def sweep_expired_sessions(db: Database) -> int:
    """
    Delete every session whose expiry has passed.

    Returns:
        Number of deleted sessions
    """
    with db.session() as s:
        result = s.execute(
            delete(LoginSession)
            .where(LoginSession.expires_at < utc_now())
            .execution_options(synchronize_session=False)
        )
        removed = result.rowcount
    logger.info(f"Removed {removed} expired sessions")
    return removed
