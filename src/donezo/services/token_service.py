"""API token service."""

from sqlalchemy import delete, select

from donezo.database import Database
from donezo.models import ApiToken
from donezo.types import utc_now


def create_api_token(db: Database, token: str, name: str | None = None) -> ApiToken:
    """
    Persist a new API token.

    Args:
        db: Store handle
        token: Opaque token value
        name: Optional label

    Returns:
        The stored token including its id and creation time

    Raises:
        StorageError: If the token value already exists
    """
    api_token = ApiToken(token=token, name=name, created_at=utc_now())
    with db.session() as s:
        s.add(api_token)
        s.flush()
        return api_token


def get_api_token(db: Database, token: str) -> ApiToken | None:
    """Look up a token by value."""
    with db.session() as s:
        stmt = select(ApiToken).where(ApiToken.token == token)
        return s.execute(stmt).scalar_one_or_none()


def list_api_tokens(db: Database) -> list[ApiToken]:
    """List all tokens, newest first."""
    with db.session() as s:
        stmt = select(ApiToken).order_by(ApiToken.created_at.desc(), ApiToken.id.desc())
        return list(s.execute(stmt).scalars().all())


def revoke_api_token(db: Database, token_id: int) -> bool:
    """Delete a token by id. Returns whether a token existed."""
    with db.session() as s:
        result = s.execute(
            delete(ApiToken)
            .where(ApiToken.id == token_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
