# propease/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from propease.core.auth_deps import get_current_principal
from propease.db.session import get_db
from propease.policies.rbac import Principal, allowed_actions
from propease.schemas.auth import LoginRequest, RefreshRequest
from propease.services import auth_service

router = APIRouter()


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    principal = auth_service.authenticate(db, req.username, req.password)
    if not principal:
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    return auth_service.issue_tokens(principal)


@router.post("/refresh")
def refresh(req: RefreshRequest, db: Session = Depends(get_db)):
    tokens = auth_service.refresh(db, req.refresh_token)
    if tokens is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
    return tokens


@router.get("/me")
def get_me(principal: Principal = Depends(get_current_principal)):
    return {
        "userId": principal.user_id,
        "username": principal.username,
        "fullName": principal.full_name,
        "role": principal.role.value,
        "allowedActions": sorted(allowed_actions(principal.role)),
    }
