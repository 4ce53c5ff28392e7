# propease/models/project_info.py
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Text, Numeric, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.enums import DocumentType
from propease.models.mixins import RecordMixin


class BankDetail(RecordMixin, Base):
    __tablename__ = "bank_details"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    bank_name: Mapped[str] = mapped_column(String(128), nullable=False)
    branch_name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact_person: Mapped[str] = mapped_column(String(128), nullable=False)
    contact_number: Mapped[str] = mapped_column(String(16), nullable=False)
    ifsc: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)


class Amenity(RecordMixin, Base):
    __tablename__ = "amenities"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    amenity_name: Mapped[str] = mapped_column(String(128), nullable=False)


class Document(RecordMixin, Base):
    __tablename__ = "documents"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    document_type: Mapped[str] = mapped_column(String(32), nullable=False, default=DocumentType.FLOOR_PLAN.value)
    document_title: Mapped[str] = mapped_column(String(256), nullable=False)
    document_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)


class Disbursement(RecordMixin, Base):
    """A named payment stage; a project's stages sum to 100 percent."""

    __tablename__ = "disbursements"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    disbursement_title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("percentage > 0 AND percentage <= 100", name="ck_disbursements_percentage"),
    )
