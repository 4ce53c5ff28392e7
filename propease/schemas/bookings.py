from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from propease.schemas.clients import ClientFields
from propease.schemas.primitives import CamelModel


class BookingCreate(CamelModel):
    property_id: Optional[uuid.UUID] = None
    client_id: Optional[uuid.UUID] = None
    create_new_client: bool = False
    new_client: Optional[ClientFields] = None

    # strings accepted: the booking form posts amounts as typed
    booking_amount: Optional[str | float] = None
    agreement_amount: Optional[str | float] = None
    gst_percentage: Optional[str | float] = None
    booking_date: Optional[date] = None
    cheque_no: Optional[str] = None
    enquiry_id: Optional[uuid.UUID] = None


class RegistrationIn(CamelModel):
    registration_date: Optional[date] = None


class CancellationIn(CamelModel):
    reason: Optional[str] = None
