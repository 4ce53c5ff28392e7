import pytest

from propease.core.errors import InvalidInput, NotFound, WorkflowConflict
from propease.models.client import Client
from propease.models.enquiry import Enquiry
from propease.models.follow_up import FollowUp
from propease.services import store
from propease.services.enquiries_service import EnquiriesService, render_remark_log
from propease.tests.conftest import TODAY, make_client, register_project

NEW_CLIENT = {
    "client_name": "Sneha Reddy",
    "email": "sneha@example.com",
    "mobile_number": "9876543213",
    "pan_no": "defgh4567i",
}


def _create(db, actor, project, flat, **overrides):
    kwargs = dict(
        actor=actor,
        client_id=None,
        create_new_client=False,
        new_client_fields=None,
        project_id=project.id,
        property_id=flat.id,
        budget="₹50-60 Lakhs",
        reference="Website",
        reference_name="Google Search",
        remark="Interested in 2BHK units",
        today=TODAY,
    )
    kwargs.update(overrides)
    return EnquiriesService().create(db, **kwargs)


def test_enquiry_without_client_is_rejected_and_nothing_written(db, actor, project, flats):
    with pytest.raises(InvalidInput) as exc:
        _create(db, actor, project, flats[0])

    assert str(exc.value) == "Please select or create a client"
    assert db.query(Enquiry).count() == 0
    assert db.query(FollowUp).count() == 0


def test_create_with_existing_client(db, actor, project, flats, customer):
    enquiry = _create(db, actor, project, flats[0], client_id=customer.id)

    assert enquiry.status == "ONGOING"
    assert enquiry.client_id == customer.id
    remarks = EnquiriesService().remarks(db, enquiry.id)
    assert [r.body for r in remarks] == ["Interested in 2BHK units"]
    assert remarks[0].author == "Agent Smith"


def test_create_with_new_client_creates_both(db, actor, project, flats):
    enquiry = _create(db, actor, project, flats[0], create_new_client=True, new_client_fields=NEW_CLIENT)

    client = store.clients.require(db, enquiry.client_id)
    assert client.client_name == "Sneha Reddy"
    assert client.pan_no == "DEFGH4567I"


def test_new_client_fields_validated(db, actor, project, flats):
    with pytest.raises(InvalidInput) as exc:
        _create(
            db, actor, project, flats[0],
            create_new_client=True, new_client_fields={"client_name": "Sneha Reddy"},
        )
    assert str(exc.value) == "Please fill all required client fields"

    with pytest.raises(InvalidInput, match="Mobile number must be 10 digits"):
        _create(
            db, actor, project, flats[0],
            create_new_client=True, new_client_fields={**NEW_CLIENT, "mobile_number": "98765"},
        )
    assert db.query(Client).count() == 0
    assert db.query(Enquiry).count() == 0


def test_unit_must_belong_to_project(db, actor, flats, customer):
    other = register_project(db, actor, name="Green Valley Residency")
    with pytest.raises(InvalidInput, match="does not belong"):
        _create(db, actor, other, flats[0], client_id=customer.id)


def test_budget_required(db, actor, project, flats, customer):
    with pytest.raises(InvalidInput, match="Please fill all required fields"):
        _create(db, actor, project, flats[0], client_id=customer.id, budget=" ")


def test_remark_log_appends_entries(db, actor, project, flats, customer):
    svc = EnquiriesService()
    enquiry = _create(db, actor, project, flats[0], client_id=customer.id)

    with pytest.raises(InvalidInput, match="Please enter a remark"):
        svc.add_remark(db, actor=actor, enquiry_id=enquiry.id, body="")
    svc.add_remark(db, actor=actor, enquiry_id=enquiry.id, body="Asked for a site visit")

    remarks = svc.remarks(db, enquiry.id)
    assert [r.body for r in remarks] == ["Interested in 2BHK units", "Asked for a site visit"]

    text = render_remark_log(remarks)
    lines = text.split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("[") and lines[0].endswith("] Interested in 2BHK units")


def test_cancel(db, actor, project, flats, customer):
    svc = EnquiriesService()
    enquiry = _create(db, actor, project, flats[0], client_id=customer.id)

    cancelled = svc.cancel(db, actor=actor, enquiry_id=enquiry.id, remark="Budget mismatch")
    assert cancelled.status == "CANCELLED"
    assert svc.remarks(db, enquiry.id)[-1].body == "Budget mismatch"

    with pytest.raises(WorkflowConflict):
        svc.cancel(db, actor=actor, enquiry_id=enquiry.id)


def test_list_filters_and_search(db, actor, project, flats, customer):
    svc = EnquiriesService()
    other_client = make_client(db, name="Priya Sharma", mobile="9876543211", email="priya@example.com")
    first = _create(db, actor, project, flats[0], client_id=customer.id)
    second = _create(db, actor, project, flats[1], client_id=other_client.id, budget="₹60-70 Lakhs")
    svc.cancel(db, actor=actor, enquiry_id=second.id)

    assert {e.id for e in svc.list(db, status="ONGOING")} == {first.id}
    assert [e.id for e in svc.list(db, search="priya")] == [second.id]
    assert svc.status_counts(db) == {"ONGOING": 1, "COMPLETED": 0, "CANCELLED": 1}

    store.enquiries.soft_delete(db, first.id)
    db.commit()
    assert [e.id for e in svc.list(db)] == [second.id]
    with pytest.raises(NotFound):
        svc.get(db, first.id)


def test_update_validates_status(db, actor, project, flats, customer):
    svc = EnquiriesService()
    enquiry = _create(db, actor, project, flats[0], client_id=customer.id)

    with pytest.raises(InvalidInput):
        svc.update(db, actor=actor, enquiry_id=enquiry.id, patch={"status": "LOST"})

    updated = svc.update(db, actor=actor, enquiry_id=enquiry.id, patch={"budget": "₹70 Lakhs"})
    assert updated.budget == "₹70 Lakhs"
