# propease/api/v1/clients.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from propease.api.v1.views import booking_resp, client_resp, enquiry_resp
from propease.core.auth_deps import get_current_principal
from propease.core.errors import to_http
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.schemas.clients import ClientFields
from propease.services.clients_service import ClientsService

router = APIRouter(prefix="/clients")


@router.get("")
def list_clients(
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"clients": [client_resp(c) for c in ClientsService().list(db, search=search)]}


@router.post("")
def create_client(
    body: ClientFields,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        client = ClientsService().create(db, actor=principal, fields=body.model_dump())
    except ValueError as e:
        raise to_http(e)
    return client_resp(client)


@router.get("/{client_id}")
def get_client_profile(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        profile = ClientsService().profile(db, client_id)
    except ValueError as e:
        raise to_http(e)
    return {
        **client_resp(profile["client"]),
        "enquiries": [enquiry_resp(e) for e in profile["enquiries"]],
        "bookings": [booking_resp(b) for b in profile["bookings"]],
    }


@router.patch("/{client_id}")
def update_client(
    client_id: uuid.UUID,
    body: ClientFields,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        client = ClientsService().update(db, actor=principal, client_id=client_id, patch=body.patch())
    except ValueError as e:
        raise to_http(e)
    return client_resp(client)


@router.delete("/{client_id}")
def delete_client(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        client = ClientsService().delete(db, actor=principal, client_id=client_id)
    except ValueError as e:
        raise to_http(e)
    return {"clientId": str(client.id), "isDeleted": True}
