# propease/services/activity_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from propease.models.activity_log import ActivityLog
from propease.policies.rbac import Principal

log = logging.getLogger(__name__)


class ActivityAction:
    # Projects
    PROJECT_REGISTERED = "PROJECT_REGISTERED"
    PROJECT_UPDATED = "PROJECT_UPDATED"
    PROJECT_DELETED = "PROJECT_DELETED"
    WING_ADDED = "WING_ADDED"
    PROJECT_INFO_UPDATED = "PROJECT_INFO_UPDATED"

    # Clients / enquiries
    CLIENT_CREATED = "CLIENT_CREATED"
    CLIENT_UPDATED = "CLIENT_UPDATED"
    CLIENT_DELETED = "CLIENT_DELETED"
    ENQUIRY_CREATED = "ENQUIRY_CREATED"
    ENQUIRY_UPDATED = "ENQUIRY_UPDATED"
    ENQUIRY_REMARK_ADDED = "ENQUIRY_REMARK_ADDED"
    ENQUIRY_CANCELLED = "ENQUIRY_CANCELLED"

    # Unit lifecycle
    UNIT_BOOKED = "UNIT_BOOKED"
    UNIT_REGISTERED = "UNIT_REGISTERED"
    BOOKING_CANCELLED = "BOOKING_CANCELLED"

    # Follow-ups
    FOLLOW_UP_CREATED = "FOLLOW_UP_CREATED"
    FOLLOW_UP_UPDATED = "FOLLOW_UP_UPDATED"
    FOLLOW_UP_NOTE_ADDED = "FOLLOW_UP_NOTE_ADDED"
    FOLLOW_UP_COMPLETED = "FOLLOW_UP_COMPLETED"

    # Admin
    USER_CREATED = "USER_CREATED"
    USER_DEACTIVATED = "USER_DEACTIVATED"
    SNAPSHOT_IMPORTED = "SNAPSHOT_IMPORTED"


def record_activity(
    db: Session,
    *,
    actor: Principal,
    action: str,
    entity: str,
    entity_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ActivityLog:
    """
    Append one activity row inside the caller's transaction (flush only).
    """
    row = ActivityLog(
        request_id=actor.request_id,
        actor_user_id=actor.user_id,
        actor_name=actor.full_name,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        details_json=details or {},
    )
    db.add(row)
    db.flush()

    log.info(
        action,
        extra={
            "request_id": actor.request_id,
            "actor": actor.user_id,
            "entity": entity,
            "entity_id": row.entity_id,
        },
    )
    return row


def recent_activity(db: Session, *, limit: int = 5) -> List[ActivityLog]:
    return list(
        db.execute(
            select(ActivityLog)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
        ).scalars().all()
    )
