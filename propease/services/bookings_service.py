# propease/services/bookings_service.py
"""
Booking / unit-status workflow.

A unit's status is never patched directly. It is derived from the unit's
active booking, the most recently created booking that is neither deleted
nor cancelled:

    active booking registered   -> REGISTERED
    active booking present      -> BOOKED
    no active booking           -> VACANT

`Flat.status` caches that value and is rewritten by `sync_unit_status` in the
same transaction as every booking change.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from propease.core import clock
from propease.core.config import get_settings
from propease.core.errors import InvalidInput, WorkflowConflict
from propease.core.validation import is_blank
from propease.models.booking import Booking
from propease.models.enums import EnquiryStatus, FlatStatus
from propease.models.project import Flat, Floor
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity
from propease.services.clients_service import new_client

log = logging.getLogger(__name__)

NEW_CLIENT_MESSAGE = "Please fill all required client fields"
NO_CLIENT_MESSAGE = "Please select or create a client"
AMOUNTS_MESSAGE = "Please fill booking and agreement amounts"
NO_BOOKING_MESSAGE = "No booking found for this unit"
CANCEL_REASON_MESSAGE = "Please provide a cancellation reason"


def _decimal(value: Any, message: str) -> Decimal:
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(message)
    if not d.is_finite():
        raise InvalidInput(message)
    return d


def gst_amount(agreement_amount: Decimal, gst_percentage: Decimal) -> Decimal:
    return (Decimal(agreement_amount) * Decimal(gst_percentage) / Decimal("100")).quantize(Decimal("0.01"))


def active_booking(db: Session, property_id: uuid.UUID) -> Optional[Booking]:
    stmt = (
        store.bookings.live()
        .where(Booking.property_id == property_id, Booking.is_cancelled.is_(False))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def derive_unit_status(booking: Optional[Booking]) -> str:
    if booking is None:
        return FlatStatus.VACANT.value
    if booking.is_registered:
        return FlatStatus.REGISTERED.value
    return FlatStatus.BOOKED.value


def sync_unit_status(db: Session, flat: Flat) -> str:
    old = flat.status
    flat.status = derive_unit_status(active_booking(db, flat.id))
    db.flush()
    if old != flat.status:
        log.info(
            "unit_status_changed",
            extra={"property_id": str(flat.id), "old_status": old, "new_status": flat.status},
        )
    return flat.status


class BookingsService:
    def book(
        self,
        db: Session,
        *,
        actor: Principal,
        property_id: Optional[uuid.UUID],
        client_id: Optional[uuid.UUID],
        create_new_client: bool,
        new_client_fields: Optional[Mapping[str, Any]],
        booking_amount: Any,
        agreement_amount: Any,
        gst_percentage: Any = None,
        booking_date: Optional[date] = None,
        cheque_no: Optional[str] = None,
        enquiry_id: Optional[uuid.UUID] = None,
    ) -> Booking:
        """
        VACANT -> BOOKED. Creates the booking (and the client when requested),
        closes the linked enquiry and refreshes the unit status in one commit.
        """
        if not create_new_client and client_id is None:
            raise InvalidInput(NO_CLIENT_MESSAGE)
        if property_id is None:
            raise InvalidInput("Please select a unit")
        if is_blank(booking_amount) or is_blank(agreement_amount):
            raise InvalidInput(AMOUNTS_MESSAGE)

        booking_amt = _decimal(booking_amount, AMOUNTS_MESSAGE)
        agreement_amt = _decimal(agreement_amount, AMOUNTS_MESSAGE)
        if booking_amt <= 0 or agreement_amt <= 0:
            raise InvalidInput("Amounts must be greater than zero")

        gst = (
            Decimal(str(get_settings().default_gst_percentage))
            if is_blank(gst_percentage)
            else _decimal(gst_percentage, "Invalid GST percentage")
        )
        if gst < 0 or gst > 100:
            raise InvalidInput("GST percentage must be between 0 and 100")

        flat = store.flats.require(db, property_id)
        current = derive_unit_status(active_booking(db, flat.id))
        if current != FlatStatus.VACANT.value:
            raise WorkflowConflict(f"Unit {flat.unit_number} is not vacant ({current}).")

        enquiry = None
        if enquiry_id is not None:
            enquiry = store.enquiries.require(db, enquiry_id)
            if enquiry.status != EnquiryStatus.ONGOING.value:
                raise WorkflowConflict(f"Enquiry is already {enquiry.status.lower()}.")
            if enquiry.property_id != flat.id:
                raise InvalidInput("Selected enquiry is for a different unit")

        if create_new_client:
            client = new_client(db, new_client_fields or {}, required_message=NEW_CLIENT_MESSAGE)
        else:
            client = store.clients.require(db, client_id)

        booking = store.bookings.add(
            db,
            project_id=flat.project_id,
            client_id=client.id,
            property_id=flat.id,
            enquiry_id=enquiry.id if enquiry else None,
            booking_amount=booking_amt,
            agreement_amount=agreement_amt,
            gst_percentage=gst,
            booking_date=booking_date or clock.today(),
            cheque_no=cheque_no or None,
            is_registered=False,
            is_cancelled=False,
        )
        sync_unit_status(db, flat)

        if enquiry is not None:
            enquiry.status = EnquiryStatus.COMPLETED.value

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.UNIT_BOOKED,
            entity="booking",
            entity_id=str(booking.id),
            details={
                "propertyId": str(flat.id),
                "unitNumber": flat.unit_number,
                "clientId": str(client.id),
                "enquiryId": str(enquiry.id) if enquiry else None,
            },
        )
        db.commit()
        return booking

    def register(
        self,
        db: Session,
        *,
        actor: Principal,
        property_id: uuid.UUID,
        registration_date: Optional[date] = None,
    ) -> Booking:
        """BOOKED -> REGISTERED."""
        flat = store.flats.require(db, property_id)
        booking = active_booking(db, flat.id)
        if booking is None:
            raise InvalidInput(NO_BOOKING_MESSAGE)
        if booking.is_registered:
            raise WorkflowConflict(f"Unit {flat.unit_number} is already registered.")

        booking.is_registered = True
        booking.registration_date = registration_date or clock.today()
        sync_unit_status(db, flat)

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.UNIT_REGISTERED,
            entity="booking",
            entity_id=str(booking.id),
            details={"propertyId": str(flat.id), "unitNumber": flat.unit_number},
        )
        db.commit()
        return booking

    def cancel(
        self,
        db: Session,
        *,
        actor: Principal,
        property_id: uuid.UUID,
        reason: Optional[str],
    ) -> Booking:
        """BOOKED -> VACANT. Registered bookings cannot be cancelled."""
        if is_blank(reason):
            raise InvalidInput(CANCEL_REASON_MESSAGE)

        flat = store.flats.require(db, property_id)
        booking = active_booking(db, flat.id)
        if booking is None:
            raise InvalidInput(NO_BOOKING_MESSAGE)
        if booking.is_registered:
            raise WorkflowConflict(f"Unit {flat.unit_number} is registered; the booking cannot be cancelled.")

        booking.is_cancelled = True
        booking.cancellation_reason = reason.strip()
        booking.cancelled_at = clock.utcnow()
        sync_unit_status(db, flat)

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.BOOKING_CANCELLED,
            entity="booking",
            entity_id=str(booking.id),
            details={"propertyId": str(flat.id), "reason": booking.cancellation_reason},
        )
        db.commit()
        return booking

    def get(self, db: Session, booking_id: uuid.UUID) -> Booking:
        return store.bookings.require(db, booking_id)

    def list(
        self,
        db: Session,
        *,
        project_id: Optional[uuid.UUID] = None,
        client_id: Optional[uuid.UUID] = None,
        property_id: Optional[uuid.UUID] = None,
        include_cancelled: bool = True,
    ) -> List[Booking]:
        stmt = store.bookings.live()
        if project_id is not None:
            stmt = stmt.where(Booking.project_id == project_id)
        if client_id is not None:
            stmt = stmt.where(Booking.client_id == client_id)
        if property_id is not None:
            stmt = stmt.where(Booking.property_id == property_id)
        if not include_cancelled:
            stmt = stmt.where(Booking.is_cancelled.is_(False))
        stmt = stmt.order_by(Booking.created_at.desc(), Booking.id)
        return list(db.execute(stmt).scalars().all())

    def unit_board(
        self,
        db: Session,
        *,
        wing_id: Optional[uuid.UUID] = None,
        project_id: Optional[uuid.UUID] = None,
    ) -> List[Dict[str, Any]]:
        stmt = store.flats.live().join(Floor, Floor.id == Flat.floor_id)
        if wing_id is not None:
            stmt = stmt.where(Flat.wing_id == wing_id)
        if project_id is not None:
            stmt = stmt.where(Flat.project_id == project_id)
        flats = db.execute(stmt.order_by(Floor.floor_no, Flat.unit_number, Flat.id)).scalars().all()
        board = []
        for flat in flats:
            booking = active_booking(db, flat.id)
            board.append({"flat": flat, "status": derive_unit_status(booking), "booking": booking})
        return board
