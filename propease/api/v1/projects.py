# propease/api/v1/projects.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import flat_resp, floor_resp, project_resp, wing_resp
from propease.core.auth_deps import get_current_principal, require_permission
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import (
    ACTION_DELETE_PROJECT,
    ACTION_REGISTER_PROJECT,
    ACTION_UPDATE_PROJECT,
    Principal,
)
from propease.schemas.projects import FlatPatch, ProjectBasic, ProjectRegistration, WingIn
from propease.services.projects_service import ProjectsService

router = APIRouter()


@router.get("/projects")
def list_projects(
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = ProjectsService()
    return {
        "projects": [
            {**project_resp(p), "units": svc.unit_counts(db, p.id)}
            for p in svc.list(db, status=status)
        ]
    }


@router.post("/projects")
def register_project(
    body: ProjectRegistration,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_REGISTER_PROJECT)),
):
    try:
        project = ProjectsService().register(
            db,
            actor=principal,
            basic=body.basic_info.model_dump(),
            wings=[w.model_dump() for w in body.wings],
            banks=[b.model_dump() for b in body.banks],
            amenities=body.amenities,
            documents=[d.model_dump() for d in body.documents],
            disbursements=[d.model_dump() for d in body.disbursements],
        )
    except ValueError as e:
        raise to_http(e)
    return project_resp(project)


@router.get("/projects/{project_id}")
def get_project(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = ProjectsService()
    try:
        project = svc.get(db, project_id)
    except ValueError as e:
        raise to_http(e)
    return {
        **project_resp(project),
        "units": svc.unit_counts(db, project.id),
        "wings": [wing_resp(w) for w in svc.wings(db, project.id)],
    }


@router.patch("/projects/{project_id}")
def update_project(
    project_id: uuid.UUID,
    body: ProjectBasic,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        project = ProjectsService().update(db, actor=principal, project_id=project_id, patch=body.patch())
    except ValueError as e:
        raise to_http(e)
    return project_resp(project)


@router.delete("/projects/{project_id}")
def delete_project(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_DELETE_PROJECT)),
):
    try:
        project = ProjectsService().delete(db, actor=principal, project_id=project_id)
    except ValueError as e:
        raise to_http(e)
    return {"projectId": str(project.id), "isDeleted": True}


# ---------------------------
# WINGS / FLOORS / FLATS
# ---------------------------


@router.get("/wings/{project_id}")
def list_wings(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"wings": [wing_resp(w) for w in ProjectsService().wings(db, project_id)]}


@router.post("/wings/{project_id}")
def add_wing(
    project_id: uuid.UUID,
    body: WingIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        wing = ProjectsService().add_wing(db, actor=principal, project_id=project_id, wing=body.model_dump())
    except ValueError as e:
        raise to_http(e)
    return wing_resp(wing)


@router.get("/floors/{wing_id}")
def list_floors(
    wing_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        floors = ProjectsService().floors(db, wing_id)
    except ValueError as e:
        raise to_http(e)
    return {"floors": [floor_resp(f) for f in floors]}


@router.get("/flats")
def list_flats(
    project_id: Optional[uuid.UUID] = Query(default=None, alias="projectId"),
    wing_id: Optional[uuid.UUID] = Query(default=None, alias="wingId"),
    floor_id: Optional[uuid.UUID] = Query(default=None, alias="floorId"),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    flats = ProjectsService().flats(
        db, project_id=project_id, wing_id=wing_id, floor_id=floor_id, status=status
    )
    return {"flats": [flat_resp(f) for f in flats]}


@router.patch("/flats/{property_id}")
def update_flat(
    property_id: uuid.UUID,
    body: FlatPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_UPDATE_PROJECT)),
):
    try:
        flat = ProjectsService().update_flat(db, actor=principal, property_id=property_id, patch=body.patch())
    except ValueError as e:
        raise to_http(e)
    return flat_resp(flat)
