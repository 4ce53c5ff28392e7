# propease/api/v1/users.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from propease.api.v1.views import user_resp
from propease.core.auth_deps import require_permission
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import ACTION_MANAGE_USERS, Principal
from propease.schemas.auth import UserCreate
from propease.services.auth_service import UsersService

router = APIRouter(prefix="/users")


@router.get("")
def list_users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_MANAGE_USERS)),
):
    return {"users": [user_resp(u) for u in UsersService().list(db)]}


@router.post("")
def create_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_MANAGE_USERS)),
):
    try:
        user = UsersService().create(db, actor=principal, fields=body.model_dump())
    except ValueError as e:
        raise to_http(e)
    return user_resp(user)


@router.post("/{user_id}/deactivate")
def deactivate_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_MANAGE_USERS)),
):
    try:
        user = UsersService().deactivate(db, actor=principal, user_id=user_id)
    except ValueError as e:
        raise to_http(e)
    return user_resp(user)
