# propease/services/store.py
"""
Per-entity table access with soft-delete filtering.

Every read goes through `EntityStore`, so rows flagged `is_deleted` never
reach a caller. Writes only flush; the calling service owns the commit, which
lets a workflow group several writes into one transaction.
"""
from __future__ import annotations

import uuid
from typing import Any, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from propease.core.errors import InvalidInput, NotFound
from propease.models import (
    Amenity, BankDetail, Booking, Client, Disbursement, Document, Enquiry, EnquiryRemark,
    Flat, Floor, FollowUp, FollowUpNode, Notification, Project, User, Wing,
)

ModelT = TypeVar("ModelT")


class EntityStore(Generic[ModelT]):
    def __init__(self, model: Type[ModelT], label: str, patchable: Iterable[str] = ()):
        self.model = model
        self.label = label
        self.patchable = frozenset(patchable)

    def live(self) -> Select:
        return select(self.model).where(self.model.is_deleted.is_(False))

    def add(self, db: Session, **fields: Any) -> ModelT:
        obj = self.model(**fields)
        db.add(obj)
        db.flush()
        return obj

    def get(self, db: Session, entity_id: Optional[uuid.UUID]) -> Optional[ModelT]:
        if entity_id is None:
            return None
        obj = db.get(self.model, entity_id)
        if obj is None or obj.is_deleted:
            return None
        return obj

    def require(self, db: Session, entity_id: Optional[uuid.UUID]) -> ModelT:
        obj = self.get(db, entity_id)
        if obj is None:
            raise NotFound(f"{self.label} not found.")
        return obj

    def update(self, db: Session, entity_id: uuid.UUID, patch: Mapping[str, Any]) -> ModelT:
        """
        Partial merge: only keys present in `patch` are assigned.
        """
        obj = self.require(db, entity_id)
        unknown = set(patch) - self.patchable
        if unknown:
            raise InvalidInput(
                f"{self.label} fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        for key, value in patch.items():
            setattr(obj, key, value)
        db.flush()
        return obj

    def soft_delete(self, db: Session, entity_id: uuid.UUID) -> ModelT:
        obj = self.require(db, entity_id)
        obj.is_deleted = True
        db.flush()
        return obj

    def list(self, db: Session, *, order_by: Optional[tuple] = None, **filters: Any) -> List[ModelT]:
        stmt = self.live()
        for key, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, key) == value)
        stmt = stmt.order_by(*(order_by or (self.model.created_at, self.model.id)))
        return list(db.execute(stmt).scalars().all())


users = EntityStore(User, "User", patchable={"full_name", "email", "mobile_number", "role", "enabled"})

projects = EntityStore(
    Project,
    "Project",
    patchable={
        "project_name", "maharera_no", "start_date", "completion_date",
        "status", "progress", "project_address", "letter_head_file_url",
    },
)
wings = EntityStore(Wing, "Wing")
floors = EntityStore(Floor, "Floor")
flats = EntityStore(Flat, "Unit", patchable={"unit_number", "area", "bhk"})

bank_details = EntityStore(BankDetail, "Bank detail")
amenities = EntityStore(Amenity, "Amenity")
documents = EntityStore(Document, "Document")
disbursements = EntityStore(Disbursement, "Disbursement")

clients = EntityStore(
    Client,
    "Client",
    patchable={
        "client_name", "email", "mobile_number", "dob", "city", "address",
        "occupation", "company", "pan_no", "aadhar_no",
    },
)
enquiries = EntityStore(
    Enquiry,
    "Enquiry",
    patchable={"project_id", "property_id", "budget", "reference", "reference_name", "status"},
)
enquiry_remarks = EntityStore(EnquiryRemark, "Remark")
bookings = EntityStore(Booking, "Booking")
follow_ups = EntityStore(
    FollowUp, "Follow-up", patchable={"follow_up_date", "follow_up_time", "notes", "agent_name"}
)
follow_up_nodes = EntityStore(FollowUpNode, "Follow-up note")
notifications = EntityStore(Notification, "Notification")
