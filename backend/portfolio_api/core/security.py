"""
Password hashing and JWT primitives.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from portfolio_api.core.config import settings
from portfolio_api.core.exceptions import ExpiredTokenError, InvalidTokenError


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([dhm])\s*$")
_DURATION_UNITS = {
    "d": "days",
    "h": "hours",
    "m": "minutes",
}


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def parse_duration(value: Optional[str], default: timedelta = timedelta(days=7)) -> timedelta:
    """
    Parse a duration such as "15m", "12h" or "7d".

    Anything that is not an integer followed by a d/h/m unit falls back to
    ``default``.
    """
    match = _DURATION_PATTERN.match(value or "")
    if not match:
        return default
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def create_token(
    claims: Dict[str, Any],
    secret: str,
    expires_delta: timedelta,
) -> tuple[str, datetime]:
    """
    Sign a JWT carrying ``claims`` plus issuer, audience, iat and exp.

    Returns:
        The encoded token and its expiry timestamp
    """
    now = utcnow()
    expires_at = now + expires_delta
    payload: Dict[str, Any] = {
        **claims,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decode_token(token: str, secret: str, token_type: str) -> Dict[str, Any]:
    """
    Verify signature, issuer, audience, expiry and token type.

    Raises:
        ExpiredTokenError: If the token is otherwise valid but expired
        InvalidTokenError: For any other verification failure
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError:
        raise InvalidTokenError()

    if payload.get("type") != token_type:
        raise InvalidTokenError()
    return payload
