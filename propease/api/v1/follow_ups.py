# propease/api/v1/follow_ups.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import follow_up_resp, node_resp, notification_resp
from propease.core import clock
from propease.core.auth_deps import get_current_principal
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.schemas.follow_ups import FollowUpComplete, FollowUpCreate, FollowUpPatch, NoteIn
from propease.services.follow_up_service import FollowUpService, default_next_date, is_due_today, is_overdue
from propease.services.notification_service import NotificationService

router = APIRouter(prefix="/follow-ups")


def _listing(db: Session, rows) -> list:
    today = clock.today()
    info = FollowUpService().enquiry_info(db, (fu.enquiry_id for fu in rows))
    return [
        follow_up_resp(
            fu,
            {
                **info.get(fu.enquiry_id, {}),
                "isOverdue": is_overdue(fu, today),
                "isDueToday": is_due_today(fu, today),
            },
        )
        for fu in rows
    ]


@router.get("")
def list_follow_ups(
    enquiry_id: Optional[uuid.UUID] = Query(default=None, alias="enquiryId"),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = FollowUpService().list(db, enquiry_id=enquiry_id, status=status)
    return {"followUps": _listing(db, rows)}


@router.post("")
def create_follow_up(
    body: FollowUpCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        fu = FollowUpService().create(
            db,
            actor=principal,
            enquiry_id=body.enquiry_id,
            follow_up_date=body.follow_up_date,
            notes=body.notes,
            follow_up_time=body.follow_up_time,
        )
    except ValueError as e:
        raise to_http(e)
    return follow_up_resp(fu)


@router.get("/today")
def today_view(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {
        "today": clock.today().isoformat(),
        "followUps": _listing(db, FollowUpService().today_view(db)),
    }


@router.get("/stats")
def follow_up_stats(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {
        **FollowUpService().stats(db),
        "defaultNextFollowUpDate": default_next_date().isoformat(),
    }


@router.post("/reminders")
def generate_reminders(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    created = NotificationService().generate_follow_up_reminders(db)
    return {"created": len(created), "notifications": [notification_resp(n) for n in created]}


@router.get("/{follow_up_id}")
def get_follow_up(
    follow_up_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = FollowUpService()
    try:
        fu = svc.get(db, follow_up_id)
    except ValueError as e:
        raise to_http(e)
    return {
        **_listing(db, [fu])[0],
        "nodes": [node_resp(n) for n in svc.nodes(db, fu.id)],
    }


@router.patch("/{follow_up_id}")
def update_follow_up(
    follow_up_id: uuid.UUID,
    body: FollowUpPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        fu = FollowUpService().update(db, actor=principal, follow_up_id=follow_up_id, patch=body.patch())
    except ValueError as e:
        raise to_http(e)
    return follow_up_resp(fu)


@router.post("/{follow_up_id}/complete")
def complete_follow_up(
    follow_up_id: uuid.UUID,
    body: FollowUpComplete,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        fu, node, next_fu = FollowUpService().complete(
            db,
            actor=principal,
            follow_up_id=follow_up_id,
            remark=body.remark,
            next_follow_up_date=body.next_follow_up_date,
        )
    except ValueError as e:
        raise to_http(e)
    return {
        "followUp": follow_up_resp(fu),
        "node": node_resp(node),
        "nextFollowUp": follow_up_resp(next_fu) if next_fu else None,
    }


@router.get("/{follow_up_id}/notes")
def list_notes(
    follow_up_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = FollowUpService()
    try:
        svc.get(db, follow_up_id)
    except ValueError as e:
        raise to_http(e)
    return {"nodes": [node_resp(n) for n in svc.nodes(db, follow_up_id)]}


@router.post("/{follow_up_id}/notes")
def add_note(
    follow_up_id: uuid.UUID,
    body: NoteIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        node = FollowUpService().add_note(
            db, actor=principal, follow_up_id=follow_up_id, body=body.body, at=body.follow_up_date_time
        )
    except ValueError as e:
        raise to_http(e)
    return node_resp(node)


@router.get("/{follow_up_id}/timeline")
def timeline(
    follow_up_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        events = FollowUpService().timeline(db, follow_up_id)
    except ValueError as e:
        raise to_http(e)
    return {"timeline": events}
