from datetime import timedelta

from propease.services.bookings_service import BookingsService
from propease.services.dashboard_service import DashboardService
from propease.services.enquiries_service import EnquiriesService
from propease.services.follow_up_service import FollowUpService
from propease.tests.conftest import TODAY


def test_summary(db, actor, project, flats, customer):
    enquiry = EnquiriesService().create(
        db,
        actor=actor,
        client_id=customer.id,
        create_new_client=False,
        new_client_fields=None,
        project_id=project.id,
        property_id=flats[0].id,
        budget="₹50-60 Lakhs",
        today=TODAY,
    )
    FollowUpService().create(db, actor=actor, enquiry_id=enquiry.id, follow_up_date=TODAY - timedelta(days=1))
    bookings = BookingsService()
    bookings.book(
        db,
        actor=actor,
        property_id=flats[0].id,
        client_id=customer.id,
        create_new_client=False,
        new_client_fields=None,
        booking_amount=50000,
        agreement_amount=5000000,
        enquiry_id=enquiry.id,
    )
    bookings.book(
        db,
        actor=actor,
        property_id=flats[1].id,
        client_id=customer.id,
        create_new_client=False,
        new_client_fields=None,
        booking_amount=50000,
        agreement_amount=5000000,
    )
    bookings.cancel(db, actor=actor, property_id=flats[1].id, reason="Loan rejected")

    summary = DashboardService().summary(db, today=TODAY)

    assert summary["today"] == "2025-03-10"
    assert summary["totals"] == {"projects": 1, "enquiries": 1, "bookings": 1, "clients": 1}
    assert summary["units"] == [
        {
            "projectId": str(project.id),
            "projectName": "Sunrise Apartments",
            "vacant": 3,
            "booked": 1,
            "registered": 0,
            "total": 4,
        }
    ]
    assert summary["followUps"]["overdue"] == 1
    assert summary["enquiryStatus"]["COMPLETED"] == 1

    recent = summary["recentActivity"]
    assert len(recent) == 5
    assert recent[0]["action"] == "BOOKING_CANCELLED"
    assert recent[0]["actorName"] == "Agent Smith"
