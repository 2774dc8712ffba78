"""Credential extraction and authorization decisions.

Two credential kinds authorize the same capability set: a session id carried
in the ``session`` cookie and an API token carried as ``Authorization: Bearer``.
Each kind is checked by an independent verifier; :func:`authorize` walks an
ordered tuple of verifiers and grants on the first success.

A verdict is either granted or not applicable. The error outcome is a raised
:class:`~donezo.errors.StorageError`: the bearer verifier lets it propagate,
while the session verifier logs it and treats the cookie as invalid.

Header parsing here is pure so it can be tested without an HTTP stack.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from donezo.core.security import SESSION_COOKIE_NAME
from donezo.database import Database
from donezo.errors import StorageError, Unauthorized
from donezo.services.session_service import get_valid_session
from donezo.services.token_service import get_api_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def parse_cookie_header(values: Iterable[str]) -> list[tuple[str, str]]:
    """
    Split raw Cookie header values into ordered (name, value) pairs.

    Args:
        values: Raw header values, one per Cookie header received

    Returns:
        Pairs in the order they appeared. Segments without ``=`` are dropped;
        duplicate names are kept.
    """
    pairs: list[tuple[str, str]] = []
    for raw in values:
        for segment in raw.split(";"):
            name, sep, value = segment.strip().partition("=")
            if sep:
                pairs.append((name, value))
    return pairs


def extract_session_ids(cookie_values: Iterable[str]) -> list[str]:
    """Return every value of a cookie named exactly ``session``, in order."""
    return [
        value
        for name, value in parse_cookie_header(cookie_values)
        if name == SESSION_COOKIE_NAME
    ]


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Extract the token from an Authorization header.

    Only the exact, case-sensitive form ``Bearer <token>`` is accepted; any
    other value means no bearer credential was presented.
    """
    if authorization is None or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):]


@dataclass(frozen=True)
class Credentials:
    """Credentials presented with a request."""

    session_ids: list[str] = field(default_factory=list)
    bearer_token: str | None = None

    @classmethod
    def from_headers(
        cls, cookie_values: Iterable[str], authorization: str | None
    ) -> "Credentials":
        """Build credentials from raw header values."""
        return cls(
            session_ids=extract_session_ids(cookie_values),
            bearer_token=extract_bearer_token(authorization),
        )


class Verdict(str, Enum):
    """Outcome of a single credential verifier."""

    GRANTED = "granted"
    NOT_APPLICABLE = "not_applicable"


Verifier = Callable[[Database, Credentials], Verdict]


def verify_session_cookie(db: Database, credentials: Credentials) -> Verdict:
    """
    Grant when any presented session id names an unexpired session.

    Store failures while checking a cookie are logged and the cookie is
    treated as not valid.
    """
    for session_id in credentials.session_ids:
        try:
            if get_valid_session(db, session_id) is not None:
                return Verdict.GRANTED
        except StorageError as exc:
            logger.warning(f"Session lookup failed: {exc}")
    return Verdict.NOT_APPLICABLE


def verify_bearer_token(db: Database, credentials: Credentials) -> Verdict:
    """
    Grant when the presented bearer token exists in the token store.

    Raises:
        StorageError: If the token lookup fails
    """
    if credentials.bearer_token is None:
        return Verdict.NOT_APPLICABLE
    if get_api_token(db, credentials.bearer_token) is not None:
        return Verdict.GRANTED
    return Verdict.NOT_APPLICABLE


# Session first, then bearer
FULL_ACCESS: tuple[Verifier, ...] = (verify_session_cookie, verify_bearer_token)
# Bearer tokens cannot be used to manage bearer tokens
SESSION_ONLY: tuple[Verifier, ...] = (verify_session_cookie,)


def authorize(
    db: Database, credentials: Credentials, verifiers: Iterable[Verifier]
) -> None:
    """
    Authorize a request against an ordered set of verifiers.

    Args:
        db: Store handle
        credentials: Credentials presented with the request
        verifiers: Verifiers tried in order; the first grant wins

    Raises:
        Unauthorized: If no verifier grants access
        StorageError: If a verifier hit a store failure
    """
    for verifier in verifiers:
        if verifier(db, credentials) is Verdict.GRANTED:
            return
    raise Unauthorized()


def has_valid_session(db: Database, credentials: Credentials) -> bool:
    """Return whether a valid session cookie was presented. Never raises."""
    return verify_session_cookie(db, credentials) is Verdict.GRANTED
