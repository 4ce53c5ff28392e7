# propease/models/notification.py
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import String, Text, Boolean, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from propease.db.base import Base
from propease.models.mixins import RecordMixin


class Notification(RecordMixin, Base):
    __tablename__ = "notifications"

    # None = visible to every user
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    notification_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ref_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_notifications_user_read", "user_id", "is_read"),)
