"""Application startup and health."""

from fastapi.testclient import TestClient

from app.main import app


def test_startup_creates_indexes(mongo_db):
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200

    email_indexes = [
        index for index in mongo_db["users"].index_information().values()
        if index["key"] == [("email", 1)]
    ]
    assert email_indexes and email_indexes[0].get("unique") is True
