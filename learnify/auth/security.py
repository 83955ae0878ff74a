"""
Password hashing and session tokens

Tokens are HS256 JWTs carrying the numeric user id and role.
"""

from datetime import datetime, timedelta, timezone
from typing import Tuple

import bcrypt
from jose import jwt, JWTError

from learnify.errors import AuthError, ConfigError

ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(hours=24)


def hash_password(raw: str) -> str:
    return bcrypt.hashpw(raw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(hashed: str, raw: str) -> None:
    """Raises AuthError unless raw matches the stored bcrypt hash"""
    if not hashed:
        raise AuthError("invalid credentials")
    try:
        matches = bcrypt.checkpw(raw.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        matches = False
    if not matches:
        raise AuthError("invalid credentials")


def issue_token(user_id: int, role: str, secret: str, ttl: timedelta = DEFAULT_TOKEN_TTL) -> Tuple[str, datetime]:
    if not secret:
        raise ConfigError("jwt secret not configured")

    issued_at = datetime.now(timezone.utc).replace(microsecond=0)
    expires_at = issued_at + ttl
    claims = {
        "userId": user_id,
        "role": role,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM), expires_at


def validate_token(token: str, secret: str) -> Tuple[int, str]:
    """
    Verify signature and expiry

    Returns:
        (user_id, role)

    Raises:
        AuthError: the token is malformed, forged, expired or has no user
    """
    if not secret:
        raise AuthError("invalid token")
    try:
        # Decodes and checks expiration/signature
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthError("invalid token")

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise AuthError("invalid token")
    if not isinstance(role, str):
        raise AuthError("invalid token")
    return user_id, role
