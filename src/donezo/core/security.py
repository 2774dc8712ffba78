"""Security utilities for password hashing and token generation."""

import secrets
import string
from datetime import timedelta

from passlib.context import CryptContext

# Password hashing context using argon2 (salted, memory-hard)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
TOKEN_LENGTH = 64

SESSION_COOKIE_NAME = "session"
SESSION_LIFETIME = timedelta(days=7)


def hash_password(password: str) -> str:
    """Hash a password using argon2 with a fresh random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Returns False instead of raising when the hash is malformed or of an
    unknown scheme.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def generate_opaque_id(length: int = TOKEN_LENGTH) -> str:
    """Generate a random identifier drawn uniformly from letters and digits."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_session_id() -> str:
    """Generate a session id."""
    return generate_opaque_id()


def generate_api_token() -> str:
    """Generate an API token value."""
    return generate_opaque_id()
