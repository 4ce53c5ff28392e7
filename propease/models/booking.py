# propease/models/booking.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String, Text, Date, DateTime, Boolean, Numeric, ForeignKey, CheckConstraint, Index, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.mixins import RecordMixin


class Booking(RecordMixin, Base):
    """
    Reservation of a unit by a client. The unit's status is derived from
    its most recent non-cancelled booking.
    """

    __tablename__ = "bookings"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("clients.id"), nullable=False)
    property_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("flats.id"), nullable=False)
    enquiry_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("enquiries.id"), nullable=True)

    booking_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    agreement_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    gst_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    cheque_no: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    is_registered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    registration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    is_cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("booking_amount > 0", name="ck_bookings_booking_amount_pos"),
        CheckConstraint("agreement_amount > 0", name="ck_bookings_agreement_amount_pos"),
        CheckConstraint("gst_percentage >= 0 AND gst_percentage <= 100", name="ck_bookings_gst_range"),
        Index("ix_bookings_property_active", "property_id", "is_cancelled", "is_deleted"),
        Index("ix_bookings_client", "client_id"),
    )
