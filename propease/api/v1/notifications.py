# propease/api/v1/notifications.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import notification_resp
from propease.core.auth_deps import get_current_principal
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications")


@router.get("")
def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = NotificationService().list_for_user(
        db, user_id=uuid.UUID(principal.user_id), unread_only=unread_only
    )
    return {
        "notifications": [notification_resp(n) for n in rows],
        "unread": sum(1 for n in rows if not n.is_read),
    }


@router.post("/{notification_id}/read")
def mark_read(
    notification_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        row = NotificationService().mark_read(
            db, user_id=uuid.UUID(principal.user_id), notification_id=notification_id
        )
    except ValueError as e:
        raise to_http(e)
    return notification_resp(row)
