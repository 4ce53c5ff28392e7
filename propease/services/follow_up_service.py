# propease/services/follow_up_service.py
"""
Follow-up reminders for enquiries.

A follow-up is created PENDING and can only move to COMPLETED through
`complete`. "Overdue", "due today" and the daily work list are derived on
every read from the stored date and the office-local current date.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from propease.core import clock
from propease.core.config import get_settings
from propease.core.errors import InvalidInput, WorkflowConflict
from propease.core.validation import check, is_blank
from propease.models.client import Client
from propease.models.enquiry import Enquiry
from propease.models.enums import FollowUpStatus
from propease.models.follow_up import FollowUp, FollowUpNode
from propease.models.project import Flat
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity

log = logging.getLogger(__name__)

COMPLETION_DEFAULT_REMARK = "Follow-up completed"
INITIAL_FOLLOW_UP_NOTES = "Initial follow-up created"

PENDING = FollowUpStatus.PENDING.value
COMPLETED = FollowUpStatus.COMPLETED.value


def default_next_date(today: Optional[date] = None) -> date:
    return (today or clock.today()) + timedelta(days=get_settings().follow_up_default_days)


def is_overdue(fu: FollowUp, today: date) -> bool:
    return fu.status == PENDING and fu.follow_up_date < today


def is_due_today(fu: FollowUp, today: date) -> bool:
    return fu.status == PENDING and fu.follow_up_date == today


def schedule_follow_up(
    db: Session,
    *,
    enquiry_id: uuid.UUID,
    follow_up_date: date,
    notes: Optional[str],
    agent_name: Optional[str],
    follow_up_time: Optional[str] = None,
) -> FollowUp:
    """Stage a new PENDING follow-up; the caller commits."""
    return store.follow_ups.add(
        db,
        enquiry_id=enquiry_id,
        follow_up_date=follow_up_date,
        follow_up_time=follow_up_time or get_settings().follow_up_default_time,
        status=PENDING,
        notes=notes,
        agent_name=agent_name,
    )


class FollowUpService:
    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def create(
        self,
        db: Session,
        *,
        actor: Principal,
        enquiry_id: Optional[uuid.UUID],
        follow_up_date: Optional[date],
        notes: Optional[str] = None,
        follow_up_time: Optional[str] = None,
    ) -> FollowUp:
        if enquiry_id is None or follow_up_date is None:
            raise InvalidInput("Please fill all required fields")
        enquiry = store.enquiries.require(db, enquiry_id)
        check("time", follow_up_time, optional=True)

        fu = schedule_follow_up(
            db,
            enquiry_id=enquiry.id,
            follow_up_date=follow_up_date,
            notes=notes,
            agent_name=actor.full_name,
            follow_up_time=None if is_blank(follow_up_time) else follow_up_time.strip(),
        )
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.FOLLOW_UP_CREATED,
            entity="follow_up",
            entity_id=str(fu.id),
            details={"enquiryId": str(enquiry.id), "followUpDate": follow_up_date.isoformat()},
        )
        db.commit()
        return fu

    def update(
        self, db: Session, *, actor: Principal, follow_up_id: uuid.UUID, patch: Mapping[str, Any]
    ) -> FollowUp:
        """
        Reschedule or annotate a pending follow-up. Status is not patchable:
        completion goes through `complete`.
        """
        if "status" in patch:
            raise InvalidInput("Follow-up status can only change by completing it.")
        fu = store.follow_ups.require(db, follow_up_id)
        if fu.status != PENDING:
            raise WorkflowConflict("Completed follow-ups cannot be edited.")
        if "follow_up_date" in patch and patch["follow_up_date"] is None:
            raise InvalidInput("Please fill all required fields")
        if "follow_up_time" in patch:
            if is_blank(patch["follow_up_time"]):
                raise InvalidInput("Please fill all required fields")
            check("time", patch["follow_up_time"])
            patch = {**patch, "follow_up_time": patch["follow_up_time"].strip()}

        fu = store.follow_ups.update(db, follow_up_id, patch)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.FOLLOW_UP_UPDATED,
            entity="follow_up",
            entity_id=str(fu.id),
            details={"fields": sorted(patch)},
        )
        db.commit()
        return fu

    def add_note(
        self,
        db: Session,
        *,
        actor: Principal,
        follow_up_id: uuid.UUID,
        body: Optional[str],
        at: Optional[datetime] = None,
    ) -> FollowUpNode:
        if is_blank(body):
            raise InvalidInput("Please enter a note")
        fu = store.follow_ups.require(db, follow_up_id)

        node = store.follow_up_nodes.add(
            db,
            follow_up_id=fu.id,
            follow_up_date_time=at or clock.utcnow(),
            body=body.strip(),
            agent_name=actor.full_name,
            user_id=actor.user_id,
        )
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.FOLLOW_UP_NOTE_ADDED,
            entity="follow_up",
            entity_id=str(fu.id),
        )
        db.commit()
        return node

    def complete(
        self,
        db: Session,
        *,
        actor: Principal,
        follow_up_id: uuid.UUID,
        remark: Optional[str] = None,
        next_follow_up_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Tuple[FollowUp, FollowUpNode, Optional[FollowUp]]:
        """
        PENDING -> COMPLETED, in one transaction:
        - append a completion note (remark, or the default text)
        - mark the follow-up completed and stamp completed_at
        - optionally schedule the next follow-up for the same enquiry
        """
        today = today or clock.today()
        fu = store.follow_ups.require(db, follow_up_id)
        if fu.status != PENDING:
            raise WorkflowConflict("Follow-up is already completed.")
        if next_follow_up_date is not None and next_follow_up_date < today:
            raise InvalidInput("Next follow-up date cannot be in the past")

        now = clock.utcnow()
        node = store.follow_up_nodes.add(
            db,
            follow_up_id=fu.id,
            follow_up_date_time=now,
            body=remark.strip() if not is_blank(remark) else COMPLETION_DEFAULT_REMARK,
            agent_name=actor.full_name,
            user_id=actor.user_id,
        )

        fu.status = COMPLETED
        fu.completed_at = now

        next_fu = None
        if next_follow_up_date is not None:
            next_fu = schedule_follow_up(
                db,
                enquiry_id=fu.enquiry_id,
                follow_up_date=next_follow_up_date,
                notes="",
                agent_name=actor.full_name,
            )

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.FOLLOW_UP_COMPLETED,
            entity="follow_up",
            entity_id=str(fu.id),
            details={"nextFollowUpId": str(next_fu.id) if next_fu else None},
        )
        db.commit()

        log.info(
            "follow_up_completed",
            extra={"follow_up_id": str(fu.id), "next_follow_up_id": str(next_fu.id) if next_fu else None},
        )
        return fu, node, next_fu

    # ---------------------------
    # READS
    # ---------------------------

    def get(self, db: Session, follow_up_id: uuid.UUID) -> FollowUp:
        return store.follow_ups.require(db, follow_up_id)

    def list(
        self,
        db: Session,
        *,
        enquiry_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
    ) -> List[FollowUp]:
        return store.follow_ups.list(
            db,
            enquiry_id=enquiry_id,
            status=status,
            order_by=(FollowUp.follow_up_date, FollowUp.created_at, FollowUp.id),
        )

    def today_view(self, db: Session, *, today: Optional[date] = None) -> List[FollowUp]:
        """
        Pending follow-ups due today or earlier, oldest date first.
        Ties break on creation time, then id.
        """
        today = today or clock.today()
        stmt = (
            store.follow_ups.live()
            .where(FollowUp.status == PENDING, FollowUp.follow_up_date <= today)
            .order_by(FollowUp.follow_up_date, FollowUp.created_at, FollowUp.id)
        )
        return list(db.execute(stmt).scalars().all())

    def stats(self, db: Session, *, today: Optional[date] = None) -> Dict[str, int]:
        today = today or clock.today()

        def _count(*conditions) -> int:
            return db.execute(
                select(func.count())
                .select_from(FollowUp)
                .where(FollowUp.is_deleted.is_(False), *conditions)
            ).scalar_one()

        start, end = clock.local_day_bounds(today)
        return {
            "overdue": _count(FollowUp.status == PENDING, FollowUp.follow_up_date < today),
            "todayPending": _count(FollowUp.status == PENDING, FollowUp.follow_up_date == today),
            "completedToday": _count(
                FollowUp.status == COMPLETED,
                FollowUp.completed_at >= start,
                FollowUp.completed_at < end,
            ),
            "completedDueToday": _count(FollowUp.status == COMPLETED, FollowUp.follow_up_date == today),
        }

    def nodes(self, db: Session, follow_up_id: uuid.UUID) -> List[FollowUpNode]:
        return store.follow_up_nodes.list(
            db,
            follow_up_id=follow_up_id,
            order_by=(FollowUpNode.follow_up_date_time, FollowUpNode.created_at, FollowUpNode.id),
        )

    def timeline(self, db: Session, follow_up_id: uuid.UUID) -> List[Dict[str, Any]]:
        fu = store.follow_ups.require(db, follow_up_id)
        events: List[Dict[str, Any]] = [
            {
                "title": "Follow-up Created",
                "timestamp": fu.follow_up_date.isoformat(),
                "description": fu.notes or "No description",
                "agent": fu.agent_name,
            }
        ]
        for node in self.nodes(db, fu.id):
            events.append(
                {
                    "title": "Note Added",
                    "timestamp": clock.iso(node.follow_up_date_time),
                    "description": node.body,
                    "agent": node.agent_name,
                }
            )
        return events

    def enquiry_info(self, db: Session, enquiry_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Dict[str, str]]:
        """
        Client name and unit number per enquiry, for list views.
        """
        ids = set(enquiry_ids)
        if not ids:
            return {}
        rows = db.execute(
            select(Enquiry.id, Client.client_name, Flat.unit_number)
            .join(Client, Client.id == Enquiry.client_id, isouter=True)
            .join(Flat, Flat.id == Enquiry.property_id, isouter=True)
            .where(Enquiry.id.in_(ids))
        ).all()
        return {
            eid: {"clientName": name or "Unknown", "unitNumber": unit or "Unknown"}
            for eid, name, unit in rows
        }
