import uuid
from datetime import timedelta

import pytest

from propease.core.errors import NotFound
from propease.services.enquiries_service import EnquiriesService
from propease.services.follow_up_service import FollowUpService
from propease.services.notification_service import NotificationService
from propease.tests.conftest import TODAY


@pytest.fixture
def enquiry(db, actor, project, flats, customer):
    return EnquiriesService().create(
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


def test_reminders_for_due_and_overdue_follow_ups(db, actor, enquiry):
    follow_ups = FollowUpService()
    overdue = follow_ups.create(db, actor=actor, enquiry_id=enquiry.id, follow_up_date=TODAY - timedelta(days=2))
    due = follow_ups.create(db, actor=actor, enquiry_id=enquiry.id, follow_up_date=TODAY)

    svc = NotificationService()
    created = svc.generate_follow_up_reminders(db, today=TODAY)

    assert [n.ref_id for n in created] == [str(overdue.id), str(due.id)]
    assert [n.title for n in created] == ["Follow-up overdue", "Follow-up due today"]
    assert all(n.notification_type == "ENQUIRY_FOLLOWUP" for n in created)
    assert "Rajesh Kumar" in created[0].message
    assert "A-01" in created[0].message
    assert overdue.reminded_on == TODAY

    assert svc.generate_follow_up_reminders(db, today=TODAY) == []


def test_completed_follow_ups_are_not_reminded(db, actor, enquiry):
    follow_ups = FollowUpService()
    fu = follow_ups.create(db, actor=actor, enquiry_id=enquiry.id, follow_up_date=TODAY)
    follow_ups.complete(db, actor=actor, follow_up_id=fu.id, remark="Called", today=TODAY)

    assert NotificationService().generate_follow_up_reminders(db, today=TODAY) == []


def test_visibility_and_mark_read(db):
    svc = NotificationService()
    me, other = uuid.uuid4(), uuid.uuid4()
    broadcast = svc.add(db, notification_type="DEMAND_LETTER", title="Maintenance tonight")
    mine = svc.add(db, notification_type="DEMAND_LETTER", title="Welcome", user_id=me)
    theirs = svc.add(db, notification_type="DEMAND_LETTER", title="Private", user_id=other)

    visible = {n.id for n in svc.list_for_user(db, user_id=me)}
    assert visible == {broadcast.id, mine.id}

    svc.mark_read(db, user_id=me, notification_id=mine.id)
    assert [n.id for n in svc.list_for_user(db, user_id=me, unread_only=True)] == [broadcast.id]

    with pytest.raises(NotFound):
        svc.mark_read(db, user_id=me, notification_id=theirs.id)
