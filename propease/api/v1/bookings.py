# propease/api/v1/bookings.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import booking_resp, flat_resp
from propease.core.auth_deps import get_current_principal
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.schemas.bookings import BookingCreate, CancellationIn, RegistrationIn
from propease.services import store
from propease.services.bookings_service import BookingsService

router = APIRouter(prefix="/bookings")


def _with_unit(db: Session, booking) -> dict:
    flat = store.flats.get(db, booking.property_id)
    return {
        **booking_resp(booking),
        "unitNumber": flat.unit_number if flat else None,
        "unitStatus": flat.status if flat else None,
    }


@router.get("")
def list_bookings(
    project_id: Optional[uuid.UUID] = Query(default=None, alias="projectId"),
    client_id: Optional[uuid.UUID] = Query(default=None, alias="clientId"),
    include_cancelled: bool = Query(default=True, alias="includeCancelled"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = BookingsService().list(
        db, project_id=project_id, client_id=client_id, include_cancelled=include_cancelled
    )
    return {"bookings": [_with_unit(db, b) for b in rows]}


@router.post("")
def book_unit(
    body: BookingCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        booking = BookingsService().book(
            db,
            actor=principal,
            property_id=body.property_id,
            client_id=body.client_id,
            create_new_client=body.create_new_client,
            new_client_fields=body.new_client.model_dump() if body.new_client else None,
            booking_amount=body.booking_amount,
            agreement_amount=body.agreement_amount,
            gst_percentage=body.gst_percentage,
            booking_date=body.booking_date,
            cheque_no=body.cheque_no,
            enquiry_id=body.enquiry_id,
        )
    except ValueError as e:
        raise to_http(e)
    return _with_unit(db, booking)


@router.get("/units")
def unit_board(
    wing_id: Optional[uuid.UUID] = Query(default=None, alias="wingId"),
    project_id: Optional[uuid.UUID] = Query(default=None, alias="projectId"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    board = BookingsService().unit_board(db, wing_id=wing_id, project_id=project_id)
    return {
        "units": [
            {
                **flat_resp(entry["flat"]),
                "status": entry["status"],
                "booking": booking_resp(entry["booking"]) if entry["booking"] else None,
            }
            for entry in board
        ]
    }


@router.post("/register/{property_id}")
def register_unit(
    property_id: uuid.UUID,
    body: Optional[RegistrationIn] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        booking = BookingsService().register(
            db,
            actor=principal,
            property_id=property_id,
            registration_date=body.registration_date if body else None,
        )
    except ValueError as e:
        raise to_http(e)
    return _with_unit(db, booking)


@router.post("/cancel/{property_id}")
def cancel_booking(
    property_id: uuid.UUID,
    body: CancellationIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        booking = BookingsService().cancel(db, actor=principal, property_id=property_id, reason=body.reason)
    except ValueError as e:
        raise to_http(e)
    return _with_unit(db, booking)
