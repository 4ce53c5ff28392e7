import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import propease.models  # noqa

from propease.core.security import hash_password
from propease.db.base import Base
from propease.db.session import get_db
from propease.main import create_app
from propease.models.enums import Role
from propease.policies.rbac import Principal
from propease.services import auth_service, store
from propease.services.projects_service import ProjectsService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

TODAY = date(2025, 3, 10)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app = create_app()

    def override_get_db():
        s = TestingSessionLocal()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


@pytest.fixture
def actor():
    return Principal(
        user_id=str(uuid.uuid4()),
        username="agent@propease.test",
        role=Role.EMPLOYEE,
        full_name="Agent Smith",
        request_id="RID-TEST",
    )


def make_user(db, username, role=Role.EMPLOYEE, password="1234", full_name="Test User"):
    user = store.users.add(
        db,
        username=username,
        password_hash=hash_password(password),
        full_name=full_name,
        email=username,
        mobile_number="9876543200",
        role=role.value,
        enabled=True,
    )
    db.commit()
    return user


def bearer(user) -> dict:
    principal = Principal(
        user_id=str(user.id), username=user.username, role=Role(user.role), full_name=user.full_name
    )
    return {"Authorization": f"Bearer {auth_service.issue_tokens(principal)['accessToken']}"}


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin@propease.test", Role.ADMIN, full_name="Admin User")


@pytest.fixture
def employee_user(db):
    return make_user(db, "agent@propease.test", Role.EMPLOYEE, full_name="Agent Smith")


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def employee_headers(employee_user):
    return bearer(employee_user)


def register_project(db, actor, *, wings=None, name="Sunrise Apartments"):
    return ProjectsService().register(
        db,
        actor=actor,
        basic={
            "project_name": name,
            "maharera_no": "P52100012345",
            "start_date": date(2023, 1, 15),
            "completion_date": date(2025, 12, 31),
            "status": "IN_PROGRESS",
        },
        wings=wings if wings is not None else [{"wing_name": "A", "no_of_floors": 2, "no_of_properties": 4}],
        disbursements=[
            {"disbursement_title": "Token", "percentage": 10},
            {"disbursement_title": "Structure", "percentage": 90},
        ],
    )


def make_client(db, *, name="Rajesh Kumar", mobile="9876543210", email="rajesh@example.com"):
    client = store.clients.add(db, client_name=name, email=email, mobile_number=mobile)
    db.commit()
    return client


@pytest.fixture
def project(db, actor):
    return register_project(db, actor)


@pytest.fixture
def flats(db, project):
    return ProjectsService().flats(db, project_id=project.id)


@pytest.fixture
def customer(db):
    return make_client(db)
