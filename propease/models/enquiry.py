# propease/models/enquiry.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from propease.core.clock import utcnow
from propease.db.base import Base
from propease.models.enums import EnquiryStatus
from propease.models.mixins import RecordMixin


class Enquiry(RecordMixin, Base):
    __tablename__ = "enquiries"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("clients.id"), nullable=False)
    property_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("flats.id"), nullable=False)

    budget: Mapped[str] = mapped_column(String(64), nullable=False)
    reference: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    reference_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=EnquiryStatus.ONGOING.value)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_enquiries_project_status", "project_id", "status"),
        Index("ix_enquiries_client", "client_id"),
    )


class EnquiryRemark(RecordMixin, Base):
    """
    One entry of an enquiry's remark history. Append-only.
    """

    __tablename__ = "enquiry_remarks"

    enquiry_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("enquiries.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    __table_args__ = (Index("ix_enquiry_remarks_enquiry", "enquiry_id", "created_at"),)
