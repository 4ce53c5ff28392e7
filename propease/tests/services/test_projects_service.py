from datetime import date

import pytest

from propease.core.errors import InvalidInput
from propease.models.project import Flat, Project
from propease.services import store
from propease.services.projects_service import ProjectsService, floor_name, spread_units
from propease.tests.conftest import register_project


def test_floor_names():
    assert [floor_name(i) for i in range(6)] == ["Ground", "1st", "2nd", "3rd", "4th", "5th"]
    assert floor_name(11) == "11th"
    assert floor_name(12) == "12th"
    assert floor_name(21) == "21st"
    assert floor_name(23) == "23rd"


def test_spread_units_gives_remainder_to_lower_floors():
    assert spread_units(20, 5) == [4, 4, 4, 4, 4]
    assert spread_units(7, 3) == [3, 2, 2]
    assert sum(spread_units(13, 4)) == 13


def test_register_builds_hierarchy(db, actor):
    svc = ProjectsService()
    project = register_project(
        db, actor, wings=[{"wing_name": "A", "no_of_floors": 3, "no_of_properties": 7}]
    )

    wings = svc.wings(db, project.id)
    assert len(wings) == 1
    floors = svc.floors(db, wings[0].id)
    assert [(f.floor_no, f.floor_name, f.quantity) for f in floors] == [
        (0, "Ground", 3),
        (1, "1st", 2),
        (2, "2nd", 2),
    ]

    flats = svc.flats(db, project_id=project.id)
    assert len(flats) == 7
    assert {f.status for f in flats} == {"VACANT"}
    assert {f.bhk for f in flats} == {"2BHK"}
    assert sorted(f.unit_number for f in flats) == [
        "A-01", "A-02", "A-03", "A-11", "A-12", "A-21", "A-22",
    ]
    assert svc.unit_counts(db, project.id) == {"VACANT": 7, "BOOKED": 0, "REGISTERED": 0}
    assert sum(d.percentage for d in svc.disbursements(db, project.id)) == 100


def test_register_rejects_schedule_not_totalling_100(db, actor):
    with pytest.raises(InvalidInput, match="must equal 100%"):
        ProjectsService().register(
            db,
            actor=actor,
            basic={
                "project_name": "Green Valley",
                "maharera_no": "P52100067890",
                "start_date": date(2025, 6, 1),
                "completion_date": date(2027, 12, 31),
            },
            disbursements=[{"disbursement_title": "Token", "percentage": 50}],
        )
    assert db.query(Project).count() == 0


def test_register_validates_every_section_before_writing(db, actor):
    with pytest.raises(InvalidInput, match="Please fill all bank fields"):
        ProjectsService().register(
            db,
            actor=actor,
            basic={
                "project_name": "Green Valley",
                "maharera_no": "P52100067890",
                "start_date": date(2025, 6, 1),
                "completion_date": date(2027, 12, 31),
            },
            wings=[{"wing_name": "A", "no_of_floors": 1, "no_of_properties": 2}],
            banks=[{"bank_name": "HDFC Bank"}],
            disbursements=[{"disbursement_title": "Full", "percentage": 100}],
        )
    assert db.query(Project).count() == 0
    assert db.query(Flat).count() == 0


@pytest.mark.parametrize(
    "basic,message",
    [
        ({"project_name": "X", "maharera_no": "P52100012345", "start_date": date(2024, 1, 1)},
         "Please fill all required fields"),
        ({"project_name": "X", "maharera_no": "52100012345", "start_date": date(2024, 1, 1),
          "completion_date": date(2025, 1, 1)}, "Invalid Maharera number format"),
        ({"project_name": "X", "maharera_no": "P52100012345", "start_date": date(2024, 1, 1),
          "completion_date": date(2023, 1, 1)}, "Completion date cannot be before start date"),
        ({"project_name": "X", "maharera_no": "P52100012345", "start_date": date(2024, 1, 1),
          "completion_date": date(2025, 1, 1), "progress": "half"}, "Progress must be between 0 and 100"),
        ({"project_name": "X", "maharera_no": "P52100012345", "start_date": date(2024, 1, 1),
          "completion_date": date(2025, 1, 1), "progress": 120}, "Progress must be between 0 and 100"),
    ],
)
def test_register_basic_info_validation(db, actor, basic, message):
    with pytest.raises(InvalidInput) as exc:
        ProjectsService().register(
            db, actor=actor, basic=basic, disbursements=[{"disbursement_title": "Full", "percentage": 100}]
        )
    assert str(exc.value) == message


def test_wing_fields_required(db, actor, project):
    with pytest.raises(InvalidInput, match="Please fill all wing fields"):
        ProjectsService().add_wing(
            db, actor=actor, project_id=project.id, wing={"wing_name": "B", "no_of_floors": 2}
        )


def test_add_wing_generates_units(db, actor, project):
    wing = ProjectsService().add_wing(
        db,
        actor=actor,
        project_id=project.id,
        wing={"wing_name": "B", "no_of_floors": 2, "no_of_properties": 2},
    )
    units = ProjectsService().flats(db, wing_id=wing.id)
    assert [f.unit_number for f in units] == ["B-01", "B-11"]


def test_update_flat_refuses_status(db, actor, flats):
    svc = ProjectsService()
    with pytest.raises(InvalidInput):
        svc.update_flat(db, actor=actor, property_id=flats[0].id, patch={"status": "BOOKED"})

    flat = svc.update_flat(db, actor=actor, property_id=flats[0].id, patch={"bhk": "3BHK"})
    assert flat.bhk == "3BHK"
    assert flat.status == "VACANT"


def test_replace_disbursements(db, actor, project):
    svc = ProjectsService()
    rows = svc.replace_disbursements(
        db,
        actor=actor,
        project_id=project.id,
        rows=[
            {"disbursement_title": "Token", "percentage": 25},
            {"disbursement_title": "Handover", "percentage": 75},
        ],
    )
    assert [r.disbursement_title for r in rows] == ["Token", "Handover"]
    assert len(svc.disbursements(db, project.id)) == 2

    with pytest.raises(InvalidInput, match="Please fill all disbursement fields"):
        svc.replace_disbursements(db, actor=actor, project_id=project.id, rows=[{"percentage": 100}])

    with pytest.raises(InvalidInput, match="Please fill all disbursement fields"):
        svc.replace_disbursements(
            db, actor=actor, project_id=project.id,
            rows=[{"disbursement_title": "Token", "percentage": "NaN"}],
        )
    assert len(svc.disbursements(db, project.id)) == 2


def test_bank_contact_and_ifsc_validated(db, actor, project):
    svc = ProjectsService()
    bank = {
        "bank_name": "SBI",
        "branch_name": "Kurla",
        "contact_person": "Priya Sharma",
        "contact_number": "9876543201",
        "ifsc": "SBIN0001234",
    }
    row = svc.add_bank_detail(db, actor=actor, project_id=project.id, bank=bank)
    assert row.ifsc == "SBIN0001234"

    with pytest.raises(InvalidInput, match="Invalid IFSC code"):
        svc.add_bank_detail(db, actor=actor, project_id=project.id, bank={**bank, "ifsc": "SBIN1234"})


def test_document_upload_writes_file(db, actor, project, tmp_path, monkeypatch):
    from propease.core.config import get_settings

    monkeypatch.setattr(get_settings(), "upload_dir", str(tmp_path))
    doc = ProjectsService().upload_document(
        db,
        actor=actor,
        project_id=project.id,
        document_title="Ground floor plan",
        document_type="FloorPlan",
        filename="plan.pdf",
        content=b"%PDF-1.4",
    )
    assert doc.document_url.endswith("_plan.pdf")
    assert len(list((tmp_path / str(project.id)).iterdir())) == 1

    with pytest.raises(InvalidInput, match="Please enter document title"):
        ProjectsService().upload_document(
            db, actor=actor, project_id=project.id, document_title=" ",
            document_type=None, filename=None, content=None,
        )


def test_soft_deleted_project_hidden(db, actor, project):
    svc = ProjectsService()
    svc.delete(db, actor=actor, project_id=project.id)
    assert svc.list(db) == []
    assert store.projects.get(db, project.id) is None
