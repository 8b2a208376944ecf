"""FundRaiser Donation Backend - Password hashing and session tokens."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from src.core.config import Settings
from src.core.exceptions import AuthenticationError

PASSWORD_ROUNDS = 12
OTP_ROUNDS = 10


def hash_password(password: str, rounds: int = PASSWORD_ROUNDS) -> str:
    """Hash a password (or OTP) with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def generate_otp() -> str:
    """Generate a 4-digit one-time password."""
    return str(1000 + secrets.randbelow(9000))


def create_access_token(user_id: int, role: str, settings: Settings) -> str:
    """Issue a signed session token for a donor."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Decode and verify a session token.

    Raises:
        AuthenticationError: If the token is malformed, forged or expired
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid authentication token") from e
    if not claims.get("sub"):
        raise AuthenticationError("Invalid authentication token")
    return claims
