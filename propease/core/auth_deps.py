# propease/core/auth_deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from propease.core.security import decode_token
from propease.models.enums import Role
from propease.policies.rbac import Principal, require_action

bearer = HTTPBearer(auto_error=False)

UNAUTHORIZED = "Invalid or expired token."


def get_current_principal(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Principal:
    """
    Canonical authentication dependency.

    Guarantees:
    - bearer token present and a valid, unexpired access token
    - role is a valid Role
    - request id from the middleware is attached for activity logging
    """
    if creds is None:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED, headers={"WWW-Authenticate": "Bearer"})

    try:
        payload = decode_token(creds.credentials)
    except Exception:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED, headers={"WWW-Authenticate": "Bearer"})

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        raise HTTPException(status_code=401, detail="Token missing required claims.")

    try:
        role_enum = Role(role)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid role in token.")

    principal = Principal(
        user_id=str(user_id),
        username=str(payload.get("username") or ""),
        role=role_enum,
        full_name=str(payload.get("full_name") or "Unknown"),
        request_id=getattr(request.state, "request_id", None),
    )
    request.state.principal = principal
    return principal


def require_permission(action: str):
    """Dependency factory: principal must be allowed `action`."""

    def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        try:
            require_action(principal, action)
        except PermissionError as e:
            raise HTTPException(status_code=403, detail=str(e))
        return principal

    return _dep
