from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from propease.schemas.primitives import CamelModel, Percentage


class ProjectBasic(CamelModel):
    project_name: Optional[str] = None
    maharera_no: Optional[str] = None
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    project_address: Optional[str] = None
    letter_head_file_url: Optional[str] = Field(default=None, alias="letterHeadFileURL")


class WingIn(CamelModel):
    wing_name: Optional[str] = None
    no_of_floors: Optional[int] = None
    no_of_properties: Optional[int] = None


class BankIn(CamelModel):
    bank_name: Optional[str] = None
    branch_name: Optional[str] = None
    contact_person: Optional[str] = None
    contact_number: Optional[str] = None
    ifsc: Optional[str] = None


class DocumentIn(CamelModel):
    document_title: Optional[str] = None
    document_type: Optional[str] = None
    document_url: Optional[str] = Field(default=None, alias="documentURL")


class DisbursementIn(CamelModel):
    disbursement_title: Optional[str] = None
    description: Optional[str] = None
    percentage: Optional[Percentage] = None


class ProjectRegistration(CamelModel):
    """Everything the registration wizard collects, submitted at once."""

    basic_info: ProjectBasic
    wings: List[WingIn] = Field(default_factory=list)
    banks: List[BankIn] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    documents: List[DocumentIn] = Field(default_factory=list)
    disbursements: List[DisbursementIn] = Field(default_factory=list)


class AmenitiesIn(CamelModel):
    amenities: List[str] = Field(default_factory=list)


class DisbursementSchedule(CamelModel):
    disbursements: List[DisbursementIn] = Field(default_factory=list)


class FlatPatch(CamelModel):
    unit_number: Optional[str] = None
    area: Optional[float] = None
    bhk: Optional[str] = None
