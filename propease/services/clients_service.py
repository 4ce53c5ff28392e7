# propease/services/clients_service.py
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from propease.core.errors import InvalidInput
from propease.core.validation import check_fields, is_blank, require
from propease.models.booking import Booking
from propease.models.client import Client
from propease.models.enquiry import Enquiry
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity


REQUIRED_CLIENT_FIELDS = ("client_name", "email", "mobile_number")

CLIENT_FORMATS = {
    "email": "email",
    "mobile_number": "phone",
    "pan_no": "pan",
    "aadhar_no": "aadhar",
}
OPTIONAL_FORMATS = ("pan_no", "aadhar_no")


def normalize_client_fields(values: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, str):
            value = value.strip()
            if key == "pan_no":
                value = value.upper()
            if key in OPTIONAL_FORMATS and not value:
                value = None
        out[key] = value
    return out


def validate_client_fields(
    values: Mapping[str, Any],
    *,
    partial: bool = False,
    required_message: str = "Please fill all required fields",
) -> None:
    """
    Full validation for new clients; for patches only the keys present are
    checked, and required fields may not be blanked.
    """
    if partial:
        for name in REQUIRED_CLIENT_FIELDS:
            if name in values and is_blank(values[name]):
                raise InvalidInput(required_message)
        kinds = {k: v for k, v in CLIENT_FORMATS.items() if k in values}
    else:
        require(values, REQUIRED_CLIENT_FIELDS, required_message)
        kinds = CLIENT_FORMATS
    check_fields(values, kinds, optional=OPTIONAL_FORMATS)


def new_client(db: Session, fields: Mapping[str, Any], *, required_message: str) -> Client:
    """
    Validate and stage a client row without committing. Used by the client
    form and by enquiry/booking forms that create a client inline.
    """
    values = normalize_client_fields(fields)
    validate_client_fields(values, required_message=required_message)
    return store.clients.add(db, **values)


class ClientsService:
    def create(self, db: Session, *, actor: Principal, fields: Mapping[str, Any]) -> Client:
        client = new_client(db, fields, required_message="Please fill all required fields")
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.CLIENT_CREATED,
            entity="client",
            entity_id=str(client.id),
            details={"clientName": client.client_name},
        )
        db.commit()
        return client

    def update(
        self, db: Session, *, actor: Principal, client_id: uuid.UUID, patch: Mapping[str, Any]
    ) -> Client:
        values = normalize_client_fields(patch)
        validate_client_fields(values, partial=True)
        client = store.clients.update(db, client_id, values)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.CLIENT_UPDATED,
            entity="client",
            entity_id=str(client.id),
            details={"fields": sorted(values)},
        )
        db.commit()
        return client

    def delete(self, db: Session, *, actor: Principal, client_id: uuid.UUID) -> Client:
        client = store.clients.soft_delete(db, client_id)
        record_activity(
            db, actor=actor, action=ActivityAction.CLIENT_DELETED, entity="client", entity_id=str(client.id)
        )
        db.commit()
        return client

    def get(self, db: Session, client_id: uuid.UUID) -> Client:
        return store.clients.require(db, client_id)

    def list(self, db: Session, *, search: Optional[str] = None) -> List[Client]:
        """
        Newest first; `search` matches name, mobile or email.
        """
        stmt = store.clients.live()
        term = (search or "").strip().lower()
        if term:
            stmt = stmt.where(
                or_(
                    func.lower(Client.client_name).contains(term),
                    Client.mobile_number.contains(term),
                    func.lower(Client.email).contains(term),
                )
            )
        stmt = stmt.order_by(Client.created_at.desc(), Client.id)
        return list(db.execute(stmt).scalars().all())

    def profile(self, db: Session, client_id: uuid.UUID) -> Dict[str, Any]:
        client = store.clients.require(db, client_id)
        enquiries = db.execute(
            store.enquiries.live()
            .where(Enquiry.client_id == client.id)
            .order_by(Enquiry.created_at.desc())
        ).scalars().all()
        bookings = db.execute(
            store.bookings.live()
            .where(Booking.client_id == client.id)
            .order_by(Booking.created_at.desc())
        ).scalars().all()
        return {"client": client, "enquiries": list(enquiries), "bookings": list(bookings)}
