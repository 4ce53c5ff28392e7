# propease/models/user.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.enums import Role
from propease.models.mixins import RecordMixin


class User(RecordMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)

    full_name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    role: Mapped[str] = mapped_column(String(16), nullable=False, default=Role.EMPLOYEE.value)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
