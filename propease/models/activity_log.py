# propease/models/activity_log.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, DateTime, Index, JSON, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from propease.core.clock import utcnow
from propease.db.base import Base


class ActivityLog(Base):
    """
    Activity trail shown on the dashboard.
    - Append-only (never UPDATE, no soft delete)
    - One row per completed workflow step, tagged with the request-id.
    """
    __tablename__ = "activity_log"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    request_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    actor_user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    actor_name: Mapped[str] = mapped_column(String(256), nullable=False)

    action: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g. UNIT_BOOKED
    entity: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g. booking
    entity_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    details_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_activity_created", "created_at"),
        Index("ix_activity_entity", "entity", "entity_id"),
    )
