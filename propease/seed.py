# propease/seed.py
"""
Demo data set: users, three projects, clients, the Sunrise Apartments
inventory with its payment schedule and banks, two enquiries and two
bookings (one registered). Runs through the services so every invariant
holds. Skips everything when the admin user already exists.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from propease.core.config import get_settings
from propease.core.logging import configure_logging
from propease.core.security import hash_password
from propease.db.session import session_scope
from propease.models.user import User
from propease.policies.rbac import SYSTEM
from propease.services import store
from propease.services.bookings_service import BookingsService
from propease.services.clients_service import ClientsService
from propease.services.enquiries_service import EnquiriesService
from propease.services.projects_service import ProjectsService

log = logging.getLogger(__name__)

DEMO_PASSWORD = "1234"

USERS = [
    ("admin@propease.test", "Admin User", "9876543200", "ADMIN"),
    ("agent@propease.test", "Agent Smith", "9876543210", "EMPLOYEE"),
    ("sarah@propease.test", "Sarah Johnson", "9876543211", "EMPLOYEE"),
    ("mike@propease.test", "Mike Wilson", "9876543212", "EMPLOYEE"),
]

CLIENTS = [
    ("Rajesh Kumar", "rajesh@example.com", "9876543210", date(1985, 5, 15), "Mumbai",
     "123 Main Street, Mumbai", "Software Engineer", "Infosys", "ABCDE1234F", "123456789012"),
    ("Priya Sharma", "priya@example.com", "9876543211", date(1990, 3, 22), "Mumbai",
     "456 Oak Avenue, Mumbai", "Doctor", "Apollo Hospital", "BCDEF2345G", "234567890123"),
    ("Amit Patel", "amit@example.com", "9876543212", date(1988, 7, 10), "Bangalore",
     "789 Pine Road, Bangalore", "Business Owner", "Patel Enterprises", "CDEFG3456H", "345678901234"),
    ("Sneha Reddy", "sneha@example.com", "9876543213", date(1992, 11, 5), "Hyderabad",
     "321 Elm Street, Hyderabad", "Architect", "Design Studios", "DEFGH4567I", "456789012345"),
    ("Vikram Singh", "vikram@example.com", "9876543214", date(1987, 2, 18), "Delhi",
     "654 Maple Drive, Delhi", "Consultant", "McKinsey", "EFGHI5678J", "567890123456"),
    ("Anita Desai", "anita@example.com", "9876543215", date(1991, 9, 30), "Mumbai",
     "987 Cedar Lane, Mumbai", "Teacher", "St. Xavier School", "FGHIJ6789K", "678901234567"),
    ("Rohit Mehta", "rohit@example.com", "9876543216", date(1986, 4, 12), "Pune",
     "147 Birch Street, Pune", "Engineer", "TCS", "GHIJK7890L", "789012345678"),
    ("Kavita Iyer", "kavita@example.com", "9876543217", date(1993, 6, 25), "Bangalore",
     "258 Spruce Avenue, Bangalore", "Finance Manager", "ICICI Bank", "HIJKL8901M", "890123456789"),
    ("Suresh Nair", "suresh@example.com", "9876543218", date(1984, 8, 14), "Kochi",
     "369 Willow Road, Kochi", "Businessman", "Nair Trading", "IJKLM9012N", "901234567890"),
    ("Deepa Joshi", "deepa@example.com", "9876543219", date(1989, 12, 8), "Ahmedabad",
     "741 Ash Court, Ahmedabad", "Lawyer", "Joshi & Associates", "JKLMN0123O", "012345678901"),
]

SUNRISE_SCHEDULE = [
    ("Token", "Token Amount", 10),
    ("Foundation", "Foundation Work", 20),
    ("Structure", "Structure Work", 30),
    ("Finishing", "Finishing Work", 25),
    ("Handover", "Handover", 15),
]


def _seed_users(db: Session) -> None:
    for username, full_name, mobile, role in USERS:
        store.users.add(
            db,
            username=username,
            password_hash=hash_password(DEMO_PASSWORD),
            full_name=full_name,
            email=username,
            mobile_number=mobile,
            role=role,
            enabled=True,
        )
    db.commit()


def seed(db: Session) -> None:
    if db.query(User).filter(User.username == USERS[0][0]).first():
        log.info("seed_skipped", extra={"reason": "admin user exists"})
        return

    _seed_users(db)
    projects = ProjectsService()

    sunrise = projects.register(
        db,
        actor=SYSTEM,
        basic={
            "project_name": "Sunrise Apartments",
            "maharera_no": "P52100012345",
            "start_date": date(2023, 1, 15),
            "completion_date": date(2025, 12, 31),
            "status": "IN_PROGRESS",
            "progress": 60,
            "project_address": "Plot No 45, Sector 21, Mumbai",
        },
        wings=[
            {"wing_name": "A", "no_of_floors": 5, "no_of_properties": 20},
            {"wing_name": "B", "no_of_floors": 5, "no_of_properties": 20},
        ],
        banks=[
            {"bank_name": "HDFC Bank", "branch_name": "Andheri", "contact_person": "Rajesh Gupta",
             "contact_number": "9876543200"},
            {"bank_name": "SBI", "branch_name": "Kurla", "contact_person": "Priya Sharma",
             "contact_number": "9876543201"},
        ],
        disbursements=[
            {"disbursement_title": t, "description": d, "percentage": p} for t, d, p in SUNRISE_SCHEDULE
        ],
    )
    for basic in (
        {"project_name": "Green Valley Residency", "maharera_no": "P52100067890",
         "start_date": date(2025, 6, 1), "completion_date": date(2027, 12, 31), "status": "UPCOMING",
         "progress": 0, "project_address": "Plot No 12, Sector 45, Bangalore"},
        {"project_name": "Royal Heights", "maharera_no": "P52100098765",
         "start_date": date(2021, 1, 1), "completion_date": date(2024, 6, 30), "status": "COMPLETED",
         "progress": 100, "project_address": "Plot No 78, Sector 12, Pune"},
    ):
        projects.register(
            db,
            actor=SYSTEM,
            basic=basic,
            disbursements=[{"disbursement_title": "Full Payment", "percentage": 100}],
        )

    # corner units on every floor are the larger 3BHK layout
    flats = projects.flats(db, project_id=sunrise.id)
    for flat in flats:
        if int(flat.unit_number[-1]) > 2:
            flat.area = Decimal("1500")
            flat.bhk = "3BHK"
    db.commit()

    clients = ClientsService()
    client_rows = [
        clients.create(
            db,
            actor=SYSTEM,
            fields={
                "client_name": name, "email": email, "mobile_number": mobile, "dob": dob,
                "city": city, "address": address, "occupation": occupation,
                "company": company, "pan_no": pan, "aadhar_no": aadhar,
            },
        )
        for name, email, mobile, dob, city, address, occupation, company, pan, aadhar in CLIENTS
    ]

    enquiries = EnquiriesService()
    for client, flat, budget, ref, ref_name, remark in (
        (client_rows[0], flats[0], "₹50-60 Lakhs", "Website", "Google Search", "Interested in 2BHK units"),
        (client_rows[1], flats[1], "₹60-70 Lakhs", "Referral", "Friend", "Looking for 3BHK"),
    ):
        enquiries.create(
            db,
            actor=SYSTEM,
            client_id=client.id,
            create_new_client=False,
            new_client_fields=None,
            project_id=sunrise.id,
            property_id=flat.id,
            budget=budget,
            reference=ref,
            reference_name=ref_name,
            remark=remark,
        )

    bookings = BookingsService()
    bookings.book(
        db,
        actor=SYSTEM,
        property_id=flats[2].id,
        client_id=client_rows[2].id,
        create_new_client=False,
        new_client_fields=None,
        booking_amount="100000",
        agreement_amount="5000000",
        gst_percentage=18,
        booking_date=date(2024, 1, 15),
        cheque_no="CH001",
    )
    bookings.book(
        db,
        actor=SYSTEM,
        property_id=flats[4].id,
        client_id=client_rows[3].id,
        create_new_client=False,
        new_client_fields=None,
        booking_amount="150000",
        agreement_amount="7500000",
        booking_date=date(2024, 2, 1),
        cheque_no="CH002",
    )
    bookings.register(db, actor=SYSTEM, property_id=flats[4].id, registration_date=date(2024, 3, 1))

    log.info("seed_completed", extra={"project_id": str(sunrise.id), "units": len(flats)})


def main() -> None:
    configure_logging(get_settings())
    with session_scope() as db:
        seed(db)


if __name__ == "__main__":
    main()
