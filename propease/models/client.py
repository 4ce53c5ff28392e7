# propease/models/client.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.mixins import RecordMixin


class Client(RecordMixin, Base):
    __tablename__ = "clients"

    client_name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    mobile_number: Mapped[str] = mapped_column(String(16), nullable=False)

    dob: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    occupation: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    # identity numbers
    pan_no: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    aadhar_no: Mapped[Optional[str]] = mapped_column(String(12), nullable=True)

    __table_args__ = (Index("ix_clients_mobile", "mobile_number"),)
