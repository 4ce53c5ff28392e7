from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from propease.core.auth_deps import get_current_principal
from propease.db.session import get_db
from propease.policies.rbac import Principal
from propease.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/dashboard")
def dashboard(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return DashboardService().summary(db)
