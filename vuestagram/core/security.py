"""Password hashing and bearer token handling."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import bcrypt
import jwt

from vuestagram.core import config
from vuestagram.core.errors import AuthenticationFailed, ValidationFailed

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"

# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def hash_password(password: str) -> str:
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationFailed("Password too long", errors={"password": "too long"})
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _encode(user_id: int, token_type: str, ttl_minutes: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "typ": token_type,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
        # two tokens minted in the same second must still differ
        "jti": uuid4().hex,
    }
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def create_access_token(user_id: int) -> str:
    return _encode(user_id, ACCESS, config.ACCESS_TOKEN_TTL_MINUTES)


def create_refresh_token(user_id: int) -> str:
    return _encode(user_id, REFRESH, config.REFRESH_TOKEN_TTL_MINUTES)


def decode_token(token: str, expected_type: str) -> int:
    """Verify a token and return the user id it was issued for.

    Raises AuthenticationFailed for expired, malformed or wrong-typed tokens.
    """
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise AuthenticationFailed("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid token: {e}")
        raise AuthenticationFailed("Invalid token")

    if payload.get("typ") != expected_type:
        raise AuthenticationFailed("Invalid token type")
    try:
        return int(payload["sub"])
    except (KeyError, ValueError):
        raise AuthenticationFailed("Invalid token subject")
