"""Security utilities for Unfold Note: password hashing and JWT token operations.

Access tokens carry ``sub`` and ``exp`` claims. One-time login codes used by the
auth callback are the same kind of token with a ``purpose`` claim and a much
shorter lifetime, so a leaked code cannot be replayed as a bearer token.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from unfold_note.app.core.settings import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

AUTH_CODE_PURPOSE = "auth_code"
ACCESS_COOKIE_NAME = "access_token"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(subject: Any, expire_delta: timedelta, extra: Optional[Dict[str, Any]] = None) -> str:
    settings = get_settings()
    payload: Dict[str, Any] = {"sub": str(subject), "exp": datetime.now(timezone.utc) + expire_delta}
    if extra:
        payload.update(extra)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def _decode(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    user_identifier = (
        user_id.get("sub") if isinstance(user_id, dict) and "sub" in user_id else user_id
    )
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return _encode(user_identifier, timedelta(minutes=minutes))


def decode_access_token(token: str) -> Dict[str, Any]:
    payload = _decode(token)
    if payload.get("purpose") is not None:
        raise ValueError("Invalid token")
    return payload


def create_auth_code(user_id: int, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.auth_code_expire_minutes
    return _encode(user_id, timedelta(minutes=minutes), {"purpose": AUTH_CODE_PURPOSE})


def decode_auth_code(code: str) -> int:
    """Return the user id a login code was issued for."""
    payload = _decode(code)
    if payload.get("purpose") != AUTH_CODE_PURPOSE:
        raise ValueError("Invalid code")
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise ValueError("Invalid code") from exc
