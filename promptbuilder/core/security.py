"""Password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from promptbuilder.config import settings
from promptbuilder.core.exceptions import AuthError, ValidationError

# bcrypt only looks at the first 72 bytes; bcrypt>=5 refuses longer input
MAX_PASSWORD_BYTES = 72

USER_SCOPE = "user"
ADMIN_SCOPE = "admin"


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt.

    Raises:
        ValidationError: If the password is longer than bcrypt can hash.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            field="password",
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        # Could never have been hashed
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def _issue_token(subject: str, scope: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": subject, "scope": scope, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _read_token(token: str, scope: str) -> str:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Not authorized, token failed") from e

    if payload.get("scope", USER_SCOPE) != scope:
        raise AuthError("Not authorized, token failed")
    return str(payload["sub"])


def create_access_token(user_id: str, expires_days: int | None = None) -> str:
    """Issue a signed access token for a user."""
    return _issue_token(
        user_id, USER_SCOPE, timedelta(days=expires_days or settings.jwt_expire_days)
    )


def decode_access_token(token: str) -> str:
    """Validate a user token and return the user ID it was issued for.

    Raises:
        AuthError: If the token is expired, tampered with, malformed or an
            admin token.
    """
    return _read_token(token, USER_SCOPE)


def create_admin_token(admin_id: str) -> str:
    """Issue a signed token for an admin session."""
    return _issue_token(
        admin_id, ADMIN_SCOPE, timedelta(hours=settings.admin_token_expire_hours)
    )


def decode_admin_token(token: str) -> str:
    """Validate an admin token and return the admin ID.

    Raises:
        AuthError: If the token is invalid or not an admin token.
    """
    return _read_token(token, ADMIN_SCOPE)
