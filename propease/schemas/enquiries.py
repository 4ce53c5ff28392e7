from __future__ import annotations

import uuid
from typing import Optional

from pydantic import Field

from propease.schemas.clients import ClientFields
from propease.schemas.primitives import CamelModel


class EnquiryCreate(CamelModel):
    client_id: Optional[uuid.UUID] = None
    create_new_client: bool = False
    new_client: Optional[ClientFields] = None

    project_id: Optional[uuid.UUID] = None
    property_id: Optional[uuid.UUID] = None
    budget: Optional[str] = None
    reference: Optional[str] = None
    reference_name: Optional[str] = None
    remark: Optional[str] = None
    status: str = Field(default="ONGOING")


class EnquiryPatch(CamelModel):
    project_id: Optional[uuid.UUID] = None
    property_id: Optional[uuid.UUID] = None
    budget: Optional[str] = None
    reference: Optional[str] = None
    reference_name: Optional[str] = None
    status: Optional[str] = None


class RemarkIn(CamelModel):
    remark: Optional[str] = None
