# propease/services/notification_service.py
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from propease.core import clock
from propease.core.errors import NotFound
from propease.models.enums import NotificationType
from propease.models.notification import Notification
from propease.services import store
from propease.services.follow_up_service import FollowUpService

log = logging.getLogger(__name__)


class NotificationService:
    def add(
        self,
        db: Session,
        *,
        notification_type: str,
        title: str,
        message: Optional[str] = None,
        ref_id: Optional[str] = None,
        user_id: Optional[uuid.UUID] = None,
    ) -> Notification:
        row = store.notifications.add(
            db,
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            ref_id=ref_id,
            is_read=False,
        )
        db.commit()
        return row

    def list_for_user(
        self, db: Session, *, user_id: uuid.UUID, unread_only: bool = False
    ) -> List[Notification]:
        """Broadcast notifications (no user) plus the user's own, newest first."""
        stmt = store.notifications.live().where(
            or_(Notification.user_id.is_(None), Notification.user_id == user_id)
        )
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id)
        return list(db.execute(stmt).scalars().all())

    def mark_read(self, db: Session, *, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
        row = store.notifications.require(db, notification_id)
        if row.user_id is not None and row.user_id != user_id:
            raise NotFound("Notification not found.")
        row.is_read = True
        db.commit()
        return row

    def generate_follow_up_reminders(self, db: Session, *, today: Optional[date] = None) -> List[Notification]:
        """
        One ENQUIRY_FOLLOWUP notification per pending follow-up that is due
        today or overdue and has not been reminded yet.
        """
        today = today or clock.today()
        due = [fu for fu in FollowUpService().today_view(db, today=today) if fu.reminded_on is None]
        info = FollowUpService().enquiry_info(db, (fu.enquiry_id for fu in due))

        created = []
        for fu in due:
            details = info.get(fu.enquiry_id, {"clientName": "Unknown", "unitNumber": "Unknown"})
            overdue = fu.follow_up_date < today
            created.append(
                store.notifications.add(
                    db,
                    user_id=None,
                    notification_type=NotificationType.ENQUIRY_FOLLOWUP.value,
                    title="Follow-up overdue" if overdue else "Follow-up due today",
                    message=(
                        f"Follow up with {details['clientName']} for unit {details['unitNumber']} "
                        f"(due {fu.follow_up_date.isoformat()})"
                    ),
                    ref_id=str(fu.id),
                    is_read=False,
                )
            )
            fu.reminded_on = today
        db.commit()

        log.info("follow_up_reminders_generated", extra={"count": len(created), "day": today.isoformat()})
        return created
