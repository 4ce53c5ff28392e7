from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from propease.schemas.primitives import CamelModel


class FollowUpCreate(CamelModel):
    enquiry_id: Optional[uuid.UUID] = None
    follow_up_date: Optional[date] = None
    follow_up_time: Optional[str] = None
    notes: Optional[str] = None


class FollowUpPatch(CamelModel):
    follow_up_date: Optional[date] = None
    follow_up_time: Optional[str] = None
    notes: Optional[str] = None
    agent_name: Optional[str] = None
    status: Optional[str] = None


class FollowUpComplete(CamelModel):
    remark: Optional[str] = None
    next_follow_up_date: Optional[date] = None


class NoteIn(CamelModel):
    body: Optional[str] = None
    follow_up_date_time: Optional[datetime] = None
