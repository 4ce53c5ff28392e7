from datetime import date, timedelta

import pytest

from propease.core import clock

REGISTRATION = {
    "basicInfo": {
        "projectName": "Sunrise Apartments",
        "mahareraNo": "P52100012345",
        "startDate": "2023-01-15",
        "completionDate": "2025-12-31",
        "status": "IN_PROGRESS",
        "progress": 65,
        "projectAddress": "Baner, Pune",
    },
    "wings": [{"wingName": "A", "noOfFloors": 2, "noOfProperties": 4}],
    "banks": [
        {
            "bankName": "HDFC Bank",
            "branchName": "Baner",
            "contactPerson": "Rahul Mehta",
            "contactNumber": "9876543220",
            "ifsc": "HDFC0001234",
        }
    ],
    "amenities": ["Swimming Pool", "Gymnasium"],
    "disbursements": [
        {"disbursementTitle": "Token", "percentage": 10},
        {"disbursementTitle": "Structure", "percentage": 90},
    ],
}

NEW_CLIENT = {
    "clientName": "Sneha Reddy",
    "email": "sneha@example.com",
    "mobileNumber": "9876543213",
}


@pytest.fixture
def project(client, admin_headers):
    r = client.post("/api/projects", json=REGISTRATION, headers=admin_headers)
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def units(client, project, employee_headers):
    r = client.get("/api/flats", params={"projectId": project["projectId"]}, headers=employee_headers)
    assert r.status_code == 200
    return r.json()["flats"]


def test_only_admins_register_projects(client, employee_headers):
    r = client.post("/api/projects", json=REGISTRATION, headers=employee_headers)
    assert r.status_code == 403
    assert "not permitted" in r.json()["message"]


def test_registration_builds_inventory(client, project, units, employee_headers):
    assert [u["unitNumber"] for u in units] == ["A-01", "A-02", "A-11", "A-12"]
    assert {u["status"] for u in units} == {"VACANT"}

    wings = client.get(f"/api/wings/{project['projectId']}", headers=employee_headers).json()["wings"]
    floors = client.get(f"/api/floors/{wings[0]['wingId']}", headers=employee_headers).json()["floors"]
    assert [f["floorName"] for f in floors] == ["Ground", "1st"]

    banks = client.get(f"/api/bankProjectInfo/{project['projectId']}", headers=employee_headers)
    assert banks.json()["bankDetails"][0]["ifsc"] == "HDFC0001234"


def test_invalid_registration_is_rejected(client, admin_headers):
    bad = {**REGISTRATION, "basicInfo": {**REGISTRATION["basicInfo"], "mahareraNo": "12345"}}
    r = client.post("/api/projects", json=bad, headers=admin_headers)
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid Maharera number format"}
    assert client.get("/api/projects", headers=admin_headers).json()["projects"] == []


def test_enquiry_to_registration(client, project, units, employee_headers):
    h = employee_headers
    unit = units[0]

    missing = client.post(
        "/api/enquiries",
        json={"projectId": project["projectId"], "propertyId": unit["propertyId"], "budget": "₹50 Lakhs"},
        headers=h,
    )
    assert missing.status_code == 400
    assert missing.json() == {"message": "Please select or create a client"}

    r = client.post(
        "/api/enquiries",
        json={
            "createNewClient": True,
            "newClient": NEW_CLIENT,
            "projectId": project["projectId"],
            "propertyId": unit["propertyId"],
            "budget": "₹50-60 Lakhs",
            "reference": "Website",
            "remark": "Interested in 2BHK units",
        },
        headers=h,
    )
    assert r.status_code == 200, r.text
    enquiry = r.json()
    assert enquiry["status"] == "ONGOING"

    listing = client.get("/api/enquiries", headers=h).json()["enquiries"]
    assert listing[0]["clientName"] == "Sneha Reddy"
    assert listing[0]["unitNumber"] == "A-01"

    follow_ups = client.get(
        "/api/follow-ups", params={"enquiryId": enquiry["enquiryId"]}, headers=h
    ).json()["followUps"]
    assert len(follow_ups) == 1
    assert follow_ups[0]["followUpDate"] == (clock.today() + timedelta(days=7)).isoformat()

    booked = client.post(
        "/api/bookings",
        json={
            "propertyId": unit["propertyId"],
            "clientId": enquiry["clientId"],
            "bookingAmount": "50000",
            "agreementAmount": "5000000",
            "gstPercentage": "18",
            "enquiryId": enquiry["enquiryId"],
        },
        headers=h,
    )
    assert booked.status_code == 200, booked.text
    booking = booked.json()
    assert booking["isRegistered"] is False
    assert booking["isCancelled"] is False
    assert booking["unitStatus"] == "BOOKED"
    assert booking["gstAmount"] == 900000.0

    enquiry_after = client.get(f"/api/enquiries/{enquiry['enquiryId']}", headers=h).json()
    assert enquiry_after["status"] == "COMPLETED"

    again = client.post(
        "/api/bookings",
        json={
            "propertyId": unit["propertyId"],
            "clientId": enquiry["clientId"],
            "bookingAmount": "50000",
            "agreementAmount": "5000000",
        },
        headers=h,
    )
    assert again.status_code == 409

    registered = client.post(f"/api/bookings/register/{unit['propertyId']}", headers=h)
    assert registered.status_code == 200
    assert registered.json()["unitStatus"] == "REGISTERED"

    cancel = client.post(f"/api/bookings/cancel/{unit['propertyId']}", json={"reason": "Changed mind"}, headers=h)
    assert cancel.status_code == 409

    board = client.get("/api/bookings/units", params={"projectId": project["projectId"]}, headers=h).json()
    assert [u["status"] for u in board["units"]] == ["REGISTERED", "VACANT", "VACANT", "VACANT"]


def test_cancel_and_rebook(client, project, units, employee_headers):
    h = employee_headers
    unit = units[1]
    client_id = client.post("/api/clients", json=NEW_CLIENT, headers=h).json()["clientId"]
    payload = {
        "propertyId": unit["propertyId"],
        "clientId": client_id,
        "bookingAmount": 50000,
        "agreementAmount": 5000000,
    }

    assert client.post("/api/bookings", json=payload, headers=h).status_code == 200

    no_reason = client.post(f"/api/bookings/cancel/{unit['propertyId']}", json={}, headers=h)
    assert no_reason.status_code == 400
    assert no_reason.json() == {"message": "Please provide a cancellation reason"}

    cancelled = client.post(
        f"/api/bookings/cancel/{unit['propertyId']}", json={"reason": "Loan rejected"}, headers=h
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["unitStatus"] == "VACANT"

    rebooked = client.post("/api/bookings", json=payload, headers=h)
    assert rebooked.status_code == 200
    assert rebooked.json()["unitStatus"] == "BOOKED"

    active = client.get("/api/bookings", params={"includeCancelled": "false"}, headers=h).json()["bookings"]
    assert [b["bookingId"] for b in active] == [rebooked.json()["bookingId"]]


def test_follow_up_endpoints(client, project, units, employee_headers):
    h = employee_headers
    client_id = client.post("/api/clients", json=NEW_CLIENT, headers=h).json()["clientId"]
    enquiry = client.post(
        "/api/enquiries",
        json={
            "clientId": client_id,
            "projectId": project["projectId"],
            "propertyId": units[2]["propertyId"],
            "budget": "₹60 Lakhs",
        },
        headers=h,
    ).json()

    today = clock.today()
    due = client.post(
        "/api/follow-ups",
        json={"enquiryId": enquiry["enquiryId"], "followUpDate": today.isoformat(), "notes": "Call back"},
        headers=h,
    ).json()

    today_view = client.get("/api/follow-ups/today", headers=h).json()
    assert [f["followUpId"] for f in today_view["followUps"]] == [due["followUpId"]]
    assert today_view["followUps"][0]["isDueToday"] is True
    assert today_view["followUps"][0]["clientName"] == "Sneha Reddy"

    stats = client.get("/api/follow-ups/stats", headers=h).json()
    assert stats["todayPending"] == 1
    assert stats["defaultNextFollowUpDate"] == (today + timedelta(days=7)).isoformat()

    blocked = client.patch(f"/api/follow-ups/{due['followUpId']}", json={"status": "COMPLETED"}, headers=h)
    assert blocked.status_code == 400

    cleared = client.patch(f"/api/follow-ups/{due['followUpId']}", json={"followUpTime": None}, headers=h)
    assert cleared.status_code == 400
    assert cleared.json() == {"message": "Please fill all required fields"}

    note =client.post(f"/api/follow-ups/{due['followUpId']}/notes", json={"body": "No answer"}, headers=h)
    assert note.status_code == 200

    past = (today - timedelta(days=1)).isoformat()
    bad = client.post(f"/api/follow-ups/{due['followUpId']}/complete", json={"nextFollowUpDate": past}, headers=h)
    assert bad.status_code == 400

    done = client.post(
        f"/api/follow-ups/{due['followUpId']}/complete",
        json={"remark": "Site visit booked", "nextFollowUpDate": (today + timedelta(days=3)).isoformat()},
        headers=h,
    )
    assert done.status_code == 200, done.text
    result = done.json()
    assert result["followUp"]["status"] == "COMPLETED"
    assert result["node"]["body"] == "Site visit booked"
    assert result["nextFollowUp"]["status"] == "PENDING"

    stats = client.get("/api/follow-ups/stats", headers=h).json()
    assert stats["completedToday"] == 1
    assert stats["completedDueToday"] == 1

    timeline = client.get(f"/api/follow-ups/{due['followUpId']}/timeline", headers=h).json()["timeline"]
    assert len(timeline) == 3

    missing = client.get(f"/api/follow-ups/{enquiry['enquiryId']}", headers=h)
    assert missing.status_code == 404


def test_reminders_and_notifications(client, project, units, employee_headers):
    h = employee_headers
    client_id = client.post("/api/clients", json=NEW_CLIENT, headers=h).json()["clientId"]
    enquiry = client.post(
        "/api/enquiries",
        json={
            "clientId": client_id,
            "projectId": project["projectId"],
            "propertyId": units[0]["propertyId"],
            "budget": "₹60 Lakhs",
        },
        headers=h,
    ).json()
    client.post(
        "/api/follow-ups",
        json={"enquiryId": enquiry["enquiryId"], "followUpDate": (clock.today() - timedelta(days=1)).isoformat()},
        headers=h,
    )

    generated = client.post("/api/follow-ups/reminders", headers=h).json()
    assert generated["created"] == 1
    assert client.post("/api/follow-ups/reminders", headers=h).json()["created"] == 0

    inbox = client.get("/api/notifications", headers=h).json()
    assert inbox["unread"] == 1
    notification_id = inbox["notifications"][0]["notificationId"]

    read = client.post(f"/api/notifications/{notification_id}/read", headers=h)
    assert read.json()["isRead"] is True
    assert client.get("/api/notifications", params={"unreadOnly": "true"}, headers=h).json()["unread"] == 0


def test_dashboard_and_snapshot(client, project, units, admin_headers):
    dashboard = client.get("/api/dashboard", headers=admin_headers).json()
    assert dashboard["totals"]["projects"] == 1
    assert dashboard["units"][0]["vacant"] == 4

    exported = client.get("/api/snapshot", headers=admin_headers)
    assert exported.status_code == 200
    doc = exported.json()
    assert len(doc["data"]["flats"]) == 4

    imported = client.post("/api/snapshot", json=doc, headers=admin_headers)
    assert imported.status_code == 200, imported.text
    assert imported.json()["imported"]["flats"] == 4

    bad = client.post("/api/snapshot", json={"data": {"flats": "nope"}}, headers=admin_headers)
    assert bad.status_code == 400
