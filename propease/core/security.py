# propease/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from propease.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_ACCESS = "access"
TOKEN_REFRESH = "refresh"


def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return pwd_context.verify(raw, hashed)


def _encode(subject: str, claims: Dict[str, Any], token_type: str, minutes: int) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "typ": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(subject: str, claims: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    exp_minutes = expires_minutes or get_settings().jwt_access_token_minutes
    return _encode(subject, claims, TOKEN_ACCESS, exp_minutes)


def create_refresh_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    exp_minutes = expires_minutes or get_settings().jwt_refresh_token_minutes
    return _encode(subject, {}, TOKEN_REFRESH, exp_minutes)


def decode_token(token: str, expected_type: str = TOKEN_ACCESS) -> Dict[str, Any]:
    settings = get_settings()
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("typ") != expected_type:
        raise ValueError(f"Expected a {expected_type} token.")
    return payload
