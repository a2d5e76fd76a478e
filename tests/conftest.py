"""Test fixtures: in-memory MongoDB per test, seeded users with tokens.

mongomock stands in for the MongoDB server; app.db.mongodb.set_mongo_db()
points every service at it. Tokens are minted directly with
create_access_token so tests don't need to go through /auth/login.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.auth import create_access_token, hash_password
from app.db import mongodb
from app.main import app
from app.services.mongo_service import CompanyService, UserService

PASSWORD = "password123"
# bcrypt is slow; hash once for every seeded user
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def mongo_db():
    db = mongomock.MongoClient()["placement_portal_test"]
    mongodb.set_mongo_db(db)
    yield db
    mongodb.set_mongo_db(None)


@pytest.fixture()
def client():
    return TestClient(app)


def make_user(name: str, role: str, roll_no: str, **extra) -> dict:
    email = f"{roll_no.lower()}@college.edu"
    user_id = UserService().insert(
        name=name,
        email=email,
        password_hash=PASSWORD_HASH,
        roll_no=roll_no,
        role=role,
        **extra
    )
    token = create_access_token({"sub": user_id, "role": role})
    return {
        "id": user_id,
        "name": name,
        "email": email,
        "role": role,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture()
def admin():
    return make_user("Asha Admin", "admin", "A001")


@pytest.fixture()
def coordinator():
    return make_user("Pranav Coordinator", "placementCoordinator", "P001")


@pytest.fixture()
def student():
    return make_user("Sana Student", "student", "S001")


@pytest.fixture()
def other_student():
    return make_user("Omar Student", "student", "S002")


@pytest.fixture()
def company():
    return CompanyService().insert({
        "name": "Acme Analytics",
        "status": "Ongoing",
        "type_of_offer": "FTE",
        "profile": "Data Analyst",
        "profile_category": "Analytics",
        "interview_shortlist": 12,
        "date_of_offer": None,
        "locations": ["Pune", "Remote"],
        "ctc": 12.5,
        "ctc_breakup": {"base": 10.0, "other": 2.5},
        "cutoffs": {
            "pg": {"cgpa": None, "percentage": None},
            "ug": {"cgpa": 7.0, "percentage": None},
            "twelfth": {"cgpa": None, "percentage": 60.0},
            "tenth": {"cgpa": None, "percentage": 60.0},
        },
        "bond": "None",
        "selected_students_roll_no": ["S010", "S011"],
    })


@pytest.fixture()
def user_factory():
    return make_user
