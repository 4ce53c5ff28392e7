from __future__ import annotations

from datetime import date
from typing import Optional

from propease.schemas.primitives import CamelModel


class ClientFields(CamelModel):
    client_name: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    dob: Optional[date] = None
    city: Optional[str] = None
    address: Optional[str] = None
    occupation: Optional[str] = None
    company: Optional[str] = None
    pan_no: Optional[str] = None
    aadhar_no: Optional[str] = None
