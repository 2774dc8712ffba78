"""Authentication and API token routes."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from donezo.api.deps import (
    DatabaseHandle,
    PasswordHash,
    SessionAuthenticated,
    get_credentials,
)
from donezo.core.auth import Credentials
from donezo.core.security import (
    SESSION_COOKIE_NAME,
    SESSION_LIFETIME,
    generate_api_token,
    generate_session_id,
    verify_password,
)
from donezo.errors import NotFound, Unauthorized
from donezo.schemas.auth import (
    ApiTokenCreate,
    ApiTokenResponse,
    LoginRequest,
    SuccessResponse,
)
from donezo.services.session_service import create_session, revoke_session
from donezo.services.token_service import (
    create_api_token,
    list_api_tokens,
    revoke_api_token,
)
from donezo.telemetry import login_attempts
from donezo.types import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=SuccessResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    db: DatabaseHandle,
    password_hash: PasswordHash,
):
    """
    Log in with the shared secret and receive a session cookie.

    Args:
        credentials: Login payload
        response: Outgoing response, receives the cookie
        db: Store handle
        password_hash: Hash of the configured secret

    Returns:
        Success marker

    Raises:
        Unauthorized: If the password is wrong
    """
    if not verify_password(credentials.password, password_hash):
        logger.warning("Failed login attempt")
        login_attempts.add(1, {"outcome": "failure"})
        raise Unauthorized()

    now = utc_now()
    session_id = generate_session_id()
    create_session(db, session_id, now + SESSION_LIFETIME, created_at=now)

    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_id,
        max_age=int(SESSION_LIFETIME.total_seconds()),
        path="/",
        httponly=True,
        samesite="strict",
    )
    login_attempts.add(1, {"outcome": "success"})
    logger.info("User logged in")
    return SuccessResponse()


@router.post("/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    db: DatabaseHandle,
    credentials: Annotated[Credentials, Depends(get_credentials)],
):
    """
    Log out: delete the session named by the cookie and clear the cookie.

    Args:
        response: Outgoing response, receives the cleared cookie
        db: Store handle
        credentials: Presented credentials

    Returns:
        Success marker
    """
    if credentials.session_ids:
        revoke_session(db, credentials.session_ids[0])

    response.delete_cookie(SESSION_COOKIE_NAME, path="/", httponly=True)
    logger.info("User logged out")
    return SuccessResponse()


@router.get("/tokens", response_model=list[ApiTokenResponse])
def list_tokens(_auth: SessionAuthenticated, db: DatabaseHandle):
    """
    List API tokens, newest first.

    Args:
        db: Store handle

    Returns:
        All API tokens
    """
    return list_api_tokens(db)


@router.post("/tokens", response_model=ApiTokenResponse)
def create_token(
    _auth: SessionAuthenticated,
    db: DatabaseHandle,
    token_data: ApiTokenCreate | None = None,
):
    """
    Create a new API token.

    Args:
        db: Store handle
        token_data: Optional token label

    Returns:
        Created token including its value
    """
    name = token_data.name if token_data else None
    api_token = create_api_token(db, generate_api_token(), name)
    logger.info(f"Created API token id={api_token.id} name={name!r}")
    return api_token


@router.delete("/tokens/{token_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_token(token_id: int, _auth: SessionAuthenticated, db: DatabaseHandle):
    """
    Revoke an API token.

    Args:
        token_id: Token ID
        db: Store handle

    Raises:
        NotFound: If no token has this ID
    """
    if not revoke_api_token(db, token_id):
        raise NotFound()
    logger.info(f"Revoked API token id={token_id}")
