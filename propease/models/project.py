# propease/models/project.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey, CheckConstraint, Index, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from propease.core.clock import utcnow
from propease.db.base import Base
from propease.models.enums import FlatStatus, ProjectStatus
from propease.models.mixins import RecordMixin


class Project(RecordMixin, Base):
    __tablename__ = "projects"

    project_name: Mapped[str] = mapped_column(String(256), nullable=False)
    maharera_no: Mapped[str] = mapped_column(String(32), nullable=False)

    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ProjectStatus.UPCOMING.value
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    project_address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    letter_head_file_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_projects_progress_range"),
    )


class Wing(RecordMixin, Base):
    __tablename__ = "wings"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    wing_name: Mapped[str] = mapped_column(String(64), nullable=False)
    no_of_floors: Mapped[int] = mapped_column(Integer, nullable=False)
    no_of_properties: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("ix_wings_project", "project_id"),)


class Floor(RecordMixin, Base):
    __tablename__ = "floors"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    wing_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("wings.id"), nullable=False)

    floor_no: Mapped[int] = mapped_column(Integer, nullable=False)
    floor_name: Mapped[str] = mapped_column(String(32), nullable=False)
    property_type: Mapped[str] = mapped_column(String(32), nullable=False, default="Residential")
    area: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("1000"))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_floors_wing_no", "wing_id", "floor_no"),)


class Flat(RecordMixin, Base):
    """
    A sellable unit. `id` is the property id referenced by enquiries and
    bookings. `status` is a cache of the value derived from the unit's
    bookings and is only written by the booking workflow.
    """

    __tablename__ = "flats"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    wing_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("wings.id"), nullable=False)
    floor_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("floors.id"), nullable=False)

    unit_number: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=FlatStatus.VACANT.value)
    area: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("1000"))
    bhk: Mapped[str] = mapped_column(String(16), nullable=False, default="2BHK")

    __table_args__ = (
        Index("ix_flats_project_status", "project_id", "status"),
        Index("ix_flats_wing", "wing_id"),
    )
