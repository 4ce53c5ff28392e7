# propease/services/auth_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from jose import JWTError
from sqlalchemy.orm import Session

from propease.core.config import get_settings
from propease.core.errors import InvalidInput, WorkflowConflict
from propease.core.security import (
    TOKEN_REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from propease.core.validation import check, is_blank, require
from propease.models.enums import Role
from propease.models.user import User
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity

log = logging.getLogger(__name__)


def _principal(user: User) -> Principal:
    return Principal(
        user_id=str(user.id),
        username=user.username,
        role=Role(user.role),
        full_name=user.full_name,
    )


def _find_enabled(db: Session, username: str) -> Optional[User]:
    return db.execute(
        store.users.live().where(User.username == username, User.enabled.is_(True))
    ).scalars().first()


def authenticate(db: Session, username: str, password: str) -> Principal | None:
    user = _find_enabled(db, (username or "").strip())
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return _principal(user)


def issue_tokens(principal: Principal) -> Dict[str, Any]:
    access = create_access_token(
        subject=principal.user_id,
        claims={
            "username": principal.username,
            "role": principal.role.value,
            "full_name": principal.full_name,
        },
    )
    return {
        "accessToken": access,
        "refreshToken": create_refresh_token(principal.user_id),
        "expiresInSeconds": get_settings().jwt_access_token_minutes * 60,
        "role": principal.role.value,
    }


def refresh(db: Session, refresh_token: str) -> Dict[str, Any] | None:
    """
    Exchange a refresh token for a new pair. The user must still exist and
    be enabled; role changes take effect here.
    """
    try:
        payload = decode_token(refresh_token, expected_type=TOKEN_REFRESH)
        user_id = uuid.UUID(payload["sub"])
    except (JWTError, ValueError, KeyError):
        return None

    user = store.users.get(db, user_id)
    if user is None or not user.enabled:
        return None
    return issue_tokens(_principal(user))


class UsersService:
    def create(self, db: Session, *, actor: Principal, fields: Mapping[str, Any]) -> User:
        values = {k: v.strip() if isinstance(v, str) else v for k, v in fields.items()}
        if is_blank(values.get("username")):
            values["username"] = values.get("email")
        require(values, ("full_name", "email", "mobile_number", "password", "username"))
        check("email", values["email"])
        check("phone", values["mobile_number"])

        role = values.get("role") or Role.EMPLOYEE.value
        if role not in {r.value for r in Role}:
            raise InvalidInput(f"Unknown role: {role}")
        if db.execute(store.users.live().where(User.username == values["username"])).scalars().first():
            raise WorkflowConflict("Username already exists.")

        user = store.users.add(
            db,
            username=values["username"],
            password_hash=hash_password(values["password"]),
            full_name=values["full_name"],
            email=values["email"],
            mobile_number=values["mobile_number"],
            role=role,
            enabled=True,
        )
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.USER_CREATED,
            entity="user",
            entity_id=str(user.id),
            details={"username": user.username, "role": role},
        )
        db.commit()
        return user

    def list(self, db: Session) -> List[User]:
        return store.users.list(db, order_by=(User.created_at.desc(), User.id))

    def deactivate(self, db: Session, *, actor: Principal, user_id: uuid.UUID) -> User:
        if str(user_id) == actor.user_id:
            raise WorkflowConflict("You cannot deactivate your own account.")
        user = store.users.update(db, user_id, {"enabled": False})
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.USER_DEACTIVATED,
            entity="user",
            entity_id=str(user.id),
        )
        db.commit()
        log.info("user_deactivated", extra={"user_id": str(user.id)})
        return user
