# propease/services/dashboard_service.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from propease.core import clock
from propease.models.booking import Booking
from propease.models.client import Client
from propease.models.enquiry import Enquiry
from propease.models.project import Project
from propease.services.activity_service import recent_activity
from propease.services.enquiries_service import EnquiriesService
from propease.services.follow_up_service import FollowUpService
from propease.services.projects_service import ProjectsService


def _live_count(db: Session, model, *conditions) -> int:
    return db.execute(
        select(func.count()).select_from(model).where(model.is_deleted.is_(False), *conditions)
    ).scalar_one()


class DashboardService:
    def summary(self, db: Session, *, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or clock.today()
        projects_svc = ProjectsService()

        units = []
        for project in projects_svc.list(db):
            counts = projects_svc.unit_counts(db, project.id)
            units.append(
                {
                    "projectId": str(project.id),
                    "projectName": project.project_name,
                    "vacant": counts["VACANT"],
                    "booked": counts["BOOKED"],
                    "registered": counts["REGISTERED"],
                    "total": sum(counts.values()),
                }
            )

        return {
            "today": today.isoformat(),
            "totals": {
                "projects": _live_count(db, Project),
                "enquiries": _live_count(db, Enquiry),
                "bookings": _live_count(db, Booking, Booking.is_cancelled.is_(False)),
                "clients": _live_count(db, Client),
            },
            "units": units,
            "followUps": FollowUpService().stats(db, today=today),
            "enquiryStatus": EnquiriesService().status_counts(db),
            "recentActivity": [
                {
                    "activityId": str(a.id),
                    "action": a.action,
                    "entity": a.entity,
                    "entityId": a.entity_id,
                    "actorName": a.actor_name,
                    "createdAtIso": clock.iso(a.created_at),
                }
                for a in recent_activity(db, limit=5)
            ],
        }
