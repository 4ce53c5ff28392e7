from __future__ import annotations

from typing import Optional

from propease.schemas.primitives import CamelModel


class LoginRequest(CamelModel):
    username: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    expires_in_seconds: int
    role: str
    token_type: str = "bearer"


class UserCreate(CamelModel):
    username: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
