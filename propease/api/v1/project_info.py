# propease/api/v1/project_info.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from propease.api.v1.views import amenity_resp, bank_resp, disbursement_resp, document_resp
from propease.core.auth_deps import get_current_principal, require_permission
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import ACTION_UPDATE_PROJECT, Principal
from propease.schemas.projects import AmenitiesIn, BankIn, DisbursementSchedule
from propease.services.projects_service import ProjectsService

router = APIRouter()


@router.get("/bankProjectInfo/{project_id}")
def list_bank_details(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"bankDetails": [bank_resp(b) for b in ProjectsService().bank_details(db, project_id)]}


@router.post("/bankProjectInfo/{project_id}")
def add_bank_detail(
    project_id: uuid.UUID,
    body: BankIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        row = ProjectsService().add_bank_detail(db, actor=principal, project_id=project_id, bank=body.model_dump())
    except ValueError as e:
        raise to_http(e)
    return bank_resp(row)


@router.get("/amenities/{project_id}")
def list_amenities(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"amenities": [amenity_resp(a) for a in ProjectsService().amenities(db, project_id)]}


@router.put("/amenities/{project_id}")
def replace_amenities(
    project_id: uuid.UUID,
    body: AmenitiesIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        rows = ProjectsService().replace_amenities(
            db, actor=principal, project_id=project_id, names=body.amenities
        )
    except ValueError as e:
        raise to_http(e)
    return {"amenities": [amenity_resp(a) for a in rows]}


@router.get("/documents/{project_id}")
def list_documents(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"documents": [document_resp(d) for d in ProjectsService().documents(db, project_id)]}


@router.post("/documents/{project_id}")
async def upload_document(
    project_id: uuid.UUID,
    document_title: Optional[str] = Form(default=None, alias="documentTitle"),
    document_type: Optional[str] = Form(default=None, alias="documentType"),
    file: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    content = await file.read() if file is not None else None
    try:
        row = ProjectsService().upload_document(
            db,
            actor=principal,
            project_id=project_id,
            document_title=document_title,
            document_type=document_type,
            filename=file.filename if file is not None else None,
            content=content,
        )
    except ValueError as e:
        raise to_http(e)
    return document_resp(row)


@router.get("/disbursements/{project_id}")
def list_disbursements(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = ProjectsService().disbursements(db, project_id)
    return {
        "disbursements": [disbursement_resp(d) for d in rows],
        "totalPercentage": float(sum(d.percentage for d in rows)),
    }


@router.put("/disbursements/{project_id}")
def replace_disbursements(
    project_id: uuid.UUID,
    body: DisbursementSchedule,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        rows = ProjectsService().replace_disbursements(
            db,
            actor=principal,
            project_id=project_id,
            rows=[d.model_dump() for d in body.disbursements],
        )
    except ValueError as e:
        raise to_http(e)
    return {"disbursements": [disbursement_resp(d) for d in rows]}
