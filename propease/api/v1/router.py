from fastapi import APIRouter

from propease.api.v1.health import router as health_router
from propease.api.v1.auth import router as auth_router
from propease.api.v1.users import router as users_router

from propease.api.v1.projects import router as projects_router
from propease.api.v1.project_info import router as project_info_router

from propease.api.v1.clients import router as clients_router
from propease.api.v1.enquiries import router as enquiries_router
from propease.api.v1.bookings import router as bookings_router
from propease.api.v1.follow_ups import router as follow_ups_router
from propease.api.v1.notifications import router as notifications_router

from propease.api.v1.dashboard import router as dashboard_router
from propease.api.v1.snapshot import router as snapshot_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / AUTH
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])
v1_router.include_router(users_router, tags=["users"])

# ------------------------------------------------------------------
# INVENTORY
# ------------------------------------------------------------------
v1_router.include_router(projects_router, tags=["projects"])
v1_router.include_router(project_info_router, tags=["project-info"])

# ------------------------------------------------------------------
# SALES
# ------------------------------------------------------------------
v1_router.include_router(clients_router, tags=["clients"])
v1_router.include_router(enquiries_router, tags=["enquiries"])
v1_router.include_router(bookings_router, tags=["bookings"])
v1_router.include_router(follow_ups_router, tags=["follow-ups"])
v1_router.include_router(notifications_router, tags=["notifications"])

# ------------------------------------------------------------------
# REPORTING / ADMIN
# ------------------------------------------------------------------
v1_router.include_router(dashboard_router, tags=["dashboard"])
v1_router.include_router(snapshot_router, tags=["snapshot"])
