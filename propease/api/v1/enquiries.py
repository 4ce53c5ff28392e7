# propease/api/v1/enquiries.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import enquiry_resp, remark_resp
from propease.core.auth_deps import get_current_principal
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.schemas.enquiries import EnquiryCreate, EnquiryPatch, RemarkIn
from propease.services.enquiries_service import EnquiriesService
from propease.services.follow_up_service import FollowUpService

router = APIRouter(prefix="/enquiries")


@router.get("")
def list_enquiries(
    project_id: Optional[uuid.UUID] = Query(default=None, alias="projectId"),
    status: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = EnquiriesService().list(db, project_id=project_id, status=status, search=search)
    info = FollowUpService().enquiry_info(db, (e.id for e in rows))
    return {"enquiries": [{**enquiry_resp(e), **info.get(e.id, {})} for e in rows]}


@router.post("")
def create_enquiry(
    body: EnquiryCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        enquiry = EnquiriesService().create(
            db,
            actor=principal,
            client_id=body.client_id,
            create_new_client=body.create_new_client,
            new_client_fields=body.new_client.model_dump() if body.new_client else None,
            project_id=body.project_id,
            property_id=body.property_id,
            budget=body.budget,
            reference=body.reference,
            reference_name=body.reference_name,
            remark=body.remark,
            status=body.status,
        )
    except ValueError as e:
        raise to_http(e)
    return enquiry_resp(enquiry)


@router.post("/cancel/{enquiry_id}")
def cancel_enquiry(
    enquiry_id: uuid.UUID,
    body: Optional[RemarkIn] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        enquiry = EnquiriesService().cancel(
            db, actor=principal, enquiry_id=enquiry_id, remark=body.remark if body else None
        )
    except ValueError as e:
        raise to_http(e)
    return enquiry_resp(enquiry)


@router.get("/{enquiry_id}")
def get_enquiry(
    enquiry_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = EnquiriesService()
    try:
        enquiry = svc.get(db, enquiry_id)
        remarks = svc.remarks(db, enquiry_id)
    except ValueError as e:
        raise to_http(e)
    info = FollowUpService().enquiry_info(db, [enquiry.id])
    return {
        **enquiry_resp(enquiry),
        **info.get(enquiry.id, {}),
        "remarks": [remark_resp(r) for r in remarks],
    }


@router.patch("/{enquiry_id}")
def update_enquiry(
    enquiry_id: uuid.UUID,
    body: EnquiryPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        enquiry = EnquiriesService().update(db, actor=principal, enquiry_id=enquiry_id, patch=body.patch())
    except ValueError as e:
        raise to_http(e)
    return enquiry_resp(enquiry)


@router.get("/{enquiry_id}/remarks")
def list_remarks(
    enquiry_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        remarks = EnquiriesService().remarks(db, enquiry_id)
    except ValueError as e:
        raise to_http(e)
    return {"remarks": [remark_resp(r) for r in remarks]}


@router.post("/{enquiry_id}/remarks")
def add_remark(
    enquiry_id: uuid.UUID,
    body: RemarkIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        entry = EnquiriesService().add_remark(db, actor=principal, enquiry_id=enquiry_id, body=body.remark)
    except ValueError as e:
        raise to_http(e)
    return remark_resp(entry)
