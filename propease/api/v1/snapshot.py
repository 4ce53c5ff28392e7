# propease/api/v1/snapshot.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from propease.core.auth_deps import require_permission
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import ACTION_EXPORT_SNAPSHOT, ACTION_IMPORT_SNAPSHOT, Principal
from propease.services.snapshot_service import SnapshotService

router = APIRouter(prefix="/snapshot")


@router.get("")
def export_snapshot(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_EXPORT_SNAPSHOT)),
):
    return SnapshotService().export(db)


@router.post("")
def import_snapshot(
    document: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ACTION_IMPORT_SNAPSHOT)),
):
    try:
        counts = SnapshotService().import_(db, actor=principal, document=document)
    except ValueError as e:
        raise to_http(e)
    return {"imported": counts}
