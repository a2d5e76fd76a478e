"""Company endpoints: listing, add, update, delete and their role gate."""

from bson import ObjectId

from app.services.mongo_service import CompanyService

MISSING_ID = str(ObjectId())

NEW_COMPANY = {
    "name": "Globex Systems",
    "status": "Upcoming",
    "type_of_offer": "Internship + FTE",
    "profile": "Software Engineer",
    "profile_category": "Engineering",
    "locations": ["Bengaluru"],
    "ctc": 18.0,
    "ctc_breakup": {"base": 15.0},
    "cutoffs": {"ug": {"cgpa": 7.5}, "twelfth": {"percentage": 70}},
    "date_of_offer": "2025-02-14T00:00:00",
}


def test_list_companies_requires_auth(client):
    assert client.get("/api/companies").status_code == 401


def test_any_role_can_list_companies(client, student, company):
    r = client.get("/api/companies", headers=student["headers"])
    assert r.status_code == 200
    assert [c["name"] for c in r.json()] == ["Acme Analytics"]


def test_get_company(client, student, company):
    r = client.get(f"/api/companies/{company['_id']}", headers=student["headers"])
    assert r.status_code == 200
    assert r.json()["ctc_breakup"]["base"] == 10.0


def test_get_company_errors(client, student):
    assert client.get("/api/companies/acme", headers=student["headers"]).status_code == 400
    assert client.get(f"/api/companies/{MISSING_ID}", headers=student["headers"]).status_code == 404


def test_coordinator_adds_company(client, coordinator):
    r = client.post("/api/companies", json=NEW_COMPANY, headers=coordinator["headers"])
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Globex Systems"
    assert body["cutoffs"]["ug"]["cgpa"] == 7.5
    assert body["selected_students_roll_no"] == []
    assert CompanyService().get_by_id(body["_id"]) is not None


def test_student_cannot_add_company(client, student):
    r = client.post("/api/companies", json=NEW_COMPANY, headers=student["headers"])
    assert r.status_code == 400
    assert r.json()["detail"] == "You are not allowed to manage companies"
    assert CompanyService().find_all() == []


def test_add_company_validation_is_itemized(client, admin):
    r = client.post("/api/companies", json={"status": "Open"}, headers=admin["headers"])
    assert r.status_code == 400
    errors = r.json()["detail"]
    assert any(e.startswith("name") for e in errors)
    assert any(e.startswith("ctc") for e in errors)


def test_add_company_base_cannot_exceed_ctc(client, admin):
    r = client.post(
        "/api/companies",
        json={**NEW_COMPANY, "ctc": 10.0, "ctc_breakup": {"base": 12.0}},
        headers=admin["headers"],
    )
    assert r.status_code == 400
    assert any("cannot exceed ctc" in e for e in r.json()["detail"])


def test_update_company(client, admin, company):
    r = client.put(
        f"/api/companies/{company['_id']}",
        json={"status": "Completed", "selected_students_roll_no": ["S010", "S011", "S012"]},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "Completed"
    assert len(body["selected_students_roll_no"]) == 3
    assert body["ctc"] == 12.5


def test_update_company_checks_base_against_stored_ctc(client, admin, company):
    r = client.put(
        f"/api/companies/{company['_id']}",
        json={"ctc_breakup": {"base": 20.0}},
        headers=admin["headers"],
    )
    assert r.status_code == 400
    assert CompanyService().get_by_id(company["_id"])["ctc_breakup"]["base"] == 10.0


def test_update_company_errors(client, admin, student, company):
    assert client.put("/api/companies/acme", json={"status": "x"}, headers=admin["headers"]).status_code == 400
    assert client.put(f"/api/companies/{MISSING_ID}", json={"status": "x"}, headers=admin["headers"]).status_code == 404
    assert client.put(f"/api/companies/{company['_id']}", json={}, headers=admin["headers"]).status_code == 400
    r = client.put(f"/api/companies/{company['_id']}", json={"status": "x"}, headers=student["headers"])
    assert r.status_code == 400


def test_delete_company(client, coordinator, company):
    r = client.delete(f"/api/companies/{company['_id']}", headers=coordinator["headers"])
    assert r.status_code == 200
    assert r.json()["message"] == "Company Acme Analytics deleted successfully"
    assert CompanyService().get_by_id(company["_id"]) is None


def test_delete_company_errors(client, admin, student, company):
    assert client.delete(f"/api/companies/{MISSING_ID}", headers=admin["headers"]).status_code == 404
    assert client.delete("/api/companies/acme", headers=admin["headers"]).status_code == 400
    assert client.delete(f"/api/companies/{company['_id']}", headers=student["headers"]).status_code == 400
    assert CompanyService().get_by_id(company["_id"]) is not None


def test_update_company_rejects_null_ctc(client, admin, company):
    r = client.put(f"/api/companies/{company['_id']}", json={"ctc": None}, headers=admin["headers"])
    assert r.status_code == 400
    assert any(e.startswith("ctc") for e in r.json()["detail"])
    assert CompanyService().get_by_id(company["_id"])["ctc"] == 12.5


def test_update_company_merges_ctc_breakup(client, admin, company):
    r = client.put(
        f"/api/companies/{company['_id']}",
        json={"ctc_breakup": {"other": 1.0}},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    assert r.json()["ctc_breakup"] == {"base": 10.0, "other": 1.0}


def test_update_company_merges_cutoffs(client, admin, company):
    r = client.put(
        f"/api/companies/{company['_id']}",
        json={"cutoffs": {"ug": {"percentage": 70.0}}},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    cutoffs = r.json()["cutoffs"]
    assert cutoffs["ug"] == {"cgpa": 7.0, "percentage": 70.0}
    assert cutoffs["twelfth"]["percentage"] == 60.0


def test_update_company_lowering_ctc_below_base(client, admin, company):
    r = client.put(f"/api/companies/{company['_id']}", json={"ctc": 8.0}, headers=admin["headers"])
    assert r.status_code == 400
    assert CompanyService().get_by_id(company["_id"])["ctc"] == 12.5
