# propease/models/follow_up.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.enums import FollowUpStatus
from propease.models.mixins import RecordMixin


class FollowUp(RecordMixin, Base):
    __tablename__ = "follow_ups"

    enquiry_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("enquiries.id"), nullable=False)

    follow_up_date: Mapped[date] = mapped_column(Date, nullable=False)
    follow_up_time: Mapped[str] = mapped_column(String(8), nullable=False, default="10:00")

    # PENDING -> COMPLETED only
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=FollowUpStatus.PENDING.value)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    agent_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    reminded_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    __table_args__ = (
        Index("ix_follow_ups_status_date", "status", "follow_up_date"),
        Index("ix_follow_ups_enquiry", "enquiry_id"),
    )


class FollowUpNode(RecordMixin, Base):
    """Timestamped activity note on a follow-up."""

    __tablename__ = "follow_up_nodes"

    follow_up_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("follow_ups.id"), nullable=False)
    follow_up_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    agent_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    __table_args__ = (Index("ix_follow_up_nodes_parent", "follow_up_id", "follow_up_date_time"),)
