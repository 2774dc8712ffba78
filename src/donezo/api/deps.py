"""FastAPI dependencies for authentication and the store."""

import logging
from typing import Annotated

from fastapi import Depends, Request

from donezo.config import Settings
from donezo.core.auth import (
    FULL_ACCESS,
    SESSION_ONLY,
    Credentials,
    authorize,
    has_valid_session,
)
from donezo.database import Database
from donezo.errors import Unauthorized
from donezo.telemetry import auth_rejections

logger = logging.getLogger(__name__)


def get_db(request: Request) -> Database:
    """Dependency returning the shared store handle."""
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was built with."""
    return request.app.state.settings


def get_password_hash(request: Request) -> str:
    """Dependency returning the in-memory hash of the login secret."""
    return request.app.state.password_hash


def get_credentials(request: Request) -> Credentials:
    """Read the session cookies and bearer token presented with the request."""
    return Credentials.from_headers(
        request.headers.getlist("cookie"),
        request.headers.get("authorization"),
    )


def require_auth(
    credentials: Annotated[Credentials, Depends(get_credentials)],
    db: Annotated[Database, Depends(get_db)],
) -> None:
    """
    Require a valid session cookie or a known bearer token.

    Raises:
        Unauthorized: If neither credential is valid
        StorageError: If the token lookup fails
    """
    try:
        authorize(db, credentials, FULL_ACCESS)
    except Unauthorized:
        logger.warning("Unauthorized API access attempt")
        auth_rejections.add(1, {"scope": "full"})
        raise


def require_session_auth(
    credentials: Annotated[Credentials, Depends(get_credentials)],
    db: Annotated[Database, Depends(get_db)],
) -> None:
    """
    Require a valid session cookie; bearer tokens are not accepted.

    Raises:
        Unauthorized: If no valid session cookie was presented
    """
    try:
        authorize(db, credentials, SESSION_ONLY)
    except Unauthorized:
        auth_rejections.add(1, {"scope": "session"})
        raise


def maybe_auth(
    credentials: Annotated[Credentials, Depends(get_credentials)],
    db: Annotated[Database, Depends(get_db)],
) -> bool:
    """Report whether a valid session is present. Never rejects."""
    return has_valid_session(db, credentials)


# Type aliases for cleaner dependency injection
Authenticated = Annotated[None, Depends(require_auth)]
SessionAuthenticated = Annotated[None, Depends(require_session_auth)]
MaybeAuthenticated = Annotated[bool, Depends(maybe_auth)]
DatabaseHandle = Annotated[Database, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
PasswordHash = Annotated[str, Depends(get_password_hash)]


def authorize_matched_route(request: Request) -> None:
    """
    Run the auth check of the route that matched ``request``.

    Used when the request failed before dependencies were solved, so an
    unauthenticated caller is refused before being told anything about the
    request body. Routes without an auth dependency pass.

    Raises:
        Unauthorized: If the route requires credentials that were not presented
        StorageError: If the token lookup fails
    """
    route = request.scope.get("route")
    dependant = getattr(route, "dependant", None)
    if dependant is None:
        return

    calls = {dependency.call for dependency in dependant.dependencies}
    if require_session_auth in calls:
        verifiers = SESSION_ONLY
    elif require_auth in calls:
        verifiers = FULL_ACCESS
    else:
        return

    authorize(get_db(request), get_credentials(request), verifiers)
