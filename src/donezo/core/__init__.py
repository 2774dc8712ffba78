"""Core application modules."""
from donezo.core.auth import (
    FULL_ACCESS,
    SESSION_ONLY,
    Credentials,
    Verdict,
    authorize,
    extract_bearer_token,
    extract_session_ids,
    has_valid_session,
    parse_cookie_header,
    verify_bearer_token,
    verify_session_cookie,
)
from donezo.core.security import (
    SESSION_COOKIE_NAME,
    SESSION_LIFETIME,
    generate_api_token,
    generate_opaque_id,
    generate_session_id,
    hash_password,
    verify_password,
)

__all__ = [
    # Auth
    "Credentials",
    "Verdict",
    "FULL_ACCESS",
    "SESSION_ONLY",
    "authorize",
    "has_valid_session",
    "parse_cookie_header",
    "extract_session_ids",
    "extract_bearer_token",
    "verify_session_cookie",
    "verify_bearer_token",
    # Security
    "SESSION_COOKIE_NAME",
    "SESSION_LIFETIME",
    "hash_password",
    "verify_password",
    "generate_opaque_id",
    "generate_session_id",
    "generate_api_token",
]
