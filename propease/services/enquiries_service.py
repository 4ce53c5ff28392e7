# propease/services/enquiries_service.py
"""
Enquiry workflow.

Creating an enquiry may also create the client, always records the first
remark and schedules the first follow-up; those writes share one commit.
Remarks are kept as individual rows and only rendered to the legacy
"[stamp] body" text for snapshot export.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from propease.core import clock
from propease.core.errors import InvalidInput, WorkflowConflict
from propease.core.validation import is_blank, require
from propease.models.client import Client
from propease.models.enquiry import Enquiry, EnquiryRemark
from propease.models.enums import EnquiryStatus
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity
from propease.services.clients_service import new_client
from propease.services.follow_up_service import (
    INITIAL_FOLLOW_UP_NOTES,
    default_next_date,
    schedule_follow_up,
)

log = logging.getLogger(__name__)

NEW_CLIENT_MESSAGE = "Please fill all required client fields"
NO_CLIENT_MESSAGE = "Please select or create a client"

ENQUIRY_STATUSES = {s.value for s in EnquiryStatus}
CLOSED_STATUSES = {EnquiryStatus.COMPLETED.value, EnquiryStatus.CANCELLED.value}


def render_remark_log(remarks: Iterable[EnquiryRemark]) -> str:
    return "\n".join(f"[{clock.local_stamp(r.created_at)}] {r.body}" for r in remarks)


class EnquiriesService:
    def create(
        self,
        db: Session,
        *,
        actor: Principal,
        client_id: Optional[uuid.UUID],
        create_new_client: bool,
        new_client_fields: Optional[Mapping[str, Any]],
        project_id: Optional[uuid.UUID],
        property_id: Optional[uuid.UUID],
        budget: Optional[str],
        reference: Optional[str] = None,
        reference_name: Optional[str] = None,
        remark: Optional[str] = None,
        status: str = EnquiryStatus.ONGOING.value,
        today: Optional[date] = None,
    ) -> Enquiry:
        if status not in ENQUIRY_STATUSES:
            raise InvalidInput(f"Unknown enquiry status: {status}")

        if not create_new_client and client_id is None:
            raise InvalidInput(NO_CLIENT_MESSAGE)
        require(
            {"project_id": project_id, "property_id": property_id, "budget": budget},
            ("project_id", "property_id", "budget"),
        )

        project = store.projects.require(db, project_id)
        flat = store.flats.require(db, property_id)
        if flat.project_id != project.id:
            raise InvalidInput("Selected unit does not belong to the selected project")

        if create_new_client:
            client = new_client(db, new_client_fields or {}, required_message=NEW_CLIENT_MESSAGE)
        else:
            client = store.clients.require(db, client_id)

        enquiry = store.enquiries.add(
            db,
            project_id=project.id,
            client_id=client.id,
            property_id=flat.id,
            budget=budget.strip(),
            reference=reference,
            reference_name=reference_name,
            status=status,
        )
        if not is_blank(remark):
            store.enquiry_remarks.add(
                db, enquiry_id=enquiry.id, body=remark.strip(), author=actor.full_name
            )

        follow_up = schedule_follow_up(
            db,
            enquiry_id=enquiry.id,
            follow_up_date=default_next_date(today),
            notes=INITIAL_FOLLOW_UP_NOTES,
            agent_name=actor.full_name,
        )

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.ENQUIRY_CREATED,
            entity="enquiry",
            entity_id=str(enquiry.id),
            details={
                "clientId": str(client.id),
                "propertyId": str(flat.id),
                "newClient": bool(create_new_client),
                "followUpId": str(follow_up.id),
            },
        )
        db.commit()

        log.info(
            "enquiry_created",
            extra={"enquiry_id": str(enquiry.id), "client_id": str(client.id), "property_id": str(flat.id)},
        )
        return enquiry

    def update(
        self, db: Session, *, actor: Principal, enquiry_id: uuid.UUID, patch: Mapping[str, Any]
    ) -> Enquiry:
        patch = dict(patch)
        if "status" in patch and patch["status"] not in ENQUIRY_STATUSES:
            raise InvalidInput(f"Unknown enquiry status: {patch['status']}")
        for name in ("project_id", "property_id", "budget"):
            if name in patch and is_blank(patch[name]):
                raise InvalidInput("Please fill all required fields")

        enquiry = store.enquiries.require(db, enquiry_id)
        if "project_id" in patch or "property_id" in patch:
            project_id = patch.get("project_id", enquiry.project_id)
            flat = store.flats.require(db, patch.get("property_id", enquiry.property_id))
            store.projects.require(db, project_id)
            if flat.project_id != project_id:
                raise InvalidInput("Selected unit does not belong to the selected project")

        old_status = enquiry.status
        enquiry = store.enquiries.update(db, enquiry_id, patch)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.ENQUIRY_UPDATED,
            entity="enquiry",
            entity_id=str(enquiry.id),
            details={"fields": sorted(patch), "oldStatus": old_status, "newStatus": enquiry.status},
        )
        db.commit()
        return enquiry

    def add_remark(
        self, db: Session, *, actor: Principal, enquiry_id: uuid.UUID, body: Optional[str]
    ) -> EnquiryRemark:
        if is_blank(body):
            raise InvalidInput("Please enter a remark")
        enquiry = store.enquiries.require(db, enquiry_id)
        entry = store.enquiry_remarks.add(
            db, enquiry_id=enquiry.id, body=body.strip(), author=actor.full_name
        )
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.ENQUIRY_REMARK_ADDED,
            entity="enquiry",
            entity_id=str(enquiry.id),
        )
        db.commit()
        return entry

    def cancel(
        self, db: Session, *, actor: Principal, enquiry_id: uuid.UUID, remark: Optional[str] = None
    ) -> Enquiry:
        enquiry = store.enquiries.require(db, enquiry_id)
        if enquiry.status in CLOSED_STATUSES:
            raise WorkflowConflict(f"Enquiry is already {enquiry.status.lower()}.")

        enquiry.status = EnquiryStatus.CANCELLED.value
        if not is_blank(remark):
            store.enquiry_remarks.add(
                db, enquiry_id=enquiry.id, body=remark.strip(), author=actor.full_name
            )
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.ENQUIRY_CANCELLED,
            entity="enquiry",
            entity_id=str(enquiry.id),
        )
        db.commit()
        log.info("enquiry_cancelled", extra={"enquiry_id": str(enquiry.id)})
        return enquiry

    def get(self, db: Session, enquiry_id: uuid.UUID) -> Enquiry:
        return store.enquiries.require(db, enquiry_id)

    def remarks(self, db: Session, enquiry_id: uuid.UUID) -> List[EnquiryRemark]:
        store.enquiries.require(db, enquiry_id)
        return store.enquiry_remarks.list(
            db,
            enquiry_id=enquiry_id,
            order_by=(EnquiryRemark.created_at, EnquiryRemark.id),
        )

    def list(
        self,
        db: Session,
        *,
        project_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Enquiry]:
        stmt = store.enquiries.live()
        if project_id is not None:
            stmt = stmt.where(Enquiry.project_id == project_id)
        if status:
            stmt = stmt.where(Enquiry.status == status)
        term = (search or "").strip().lower()
        if term:
            stmt = stmt.join(Client, Client.id == Enquiry.client_id).where(
                or_(
                    func.lower(Client.client_name).contains(term),
                    Client.mobile_number.contains(term),
                    func.lower(Enquiry.budget).contains(term),
                )
            )
        stmt = stmt.order_by(Enquiry.created_at.desc(), Enquiry.id)
        return list(db.execute(stmt).scalars().all())

    def status_counts(self, db: Session) -> Dict[str, int]:
        rows = db.execute(
            select(Enquiry.status, func.count())
            .where(Enquiry.is_deleted.is_(False))
            .group_by(Enquiry.status)
        ).all()
        counts = {s.value: 0 for s in EnquiryStatus}
        counts.update({status: n for status, n in rows})
        return counts
