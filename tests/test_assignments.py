from app.core.config import settings
from tests.helpers import USER_HEADERS, USER_ID, assignment, cycle, person, template

MANAGER_PATH = f"/performance/assignments/manager/{USER_ID}"
EMPLOYEE_PATH = f"/performance/assignments/employee/{USER_ID}"


def test_list_requires_user(client):
    r = client.get("/performance/assignments")
    assert r.status_code == 401
    assert r.json()["detail"] == "User not authenticated"


def test_list_merges_sources(client, fake_api):
    fake_api.on("GET", MANAGER_PATH, 200, [assignment("a1")])
    fake_api.on("GET", EMPLOYEE_PATH, 200, [assignment("a1"), assignment("a2", status="IN_PROGRESS")])

    r = client.get("/performance/assignments", headers=USER_HEADERS)
    assert r.status_code == 200
    view = r.json()
    assert [row["id"] for row in view["rows"]] == ["a1", "a2"]
    assert view["rows"][1]["badge"]["css_class"] == "badge-warning"
    assert view["rows"][0]["actions"][0]["href"] == "/performance/evaluations/a1"


def test_list_all_forbidden_shows_banner(client, fake_api):
    fake_api.on("GET", MANAGER_PATH, 403, {"message": "Forbidden"})
    fake_api.on("GET", EMPLOYEE_PATH, 403, {"message": "Forbidden"})

    r = client.get("/performance/assignments", headers=USER_HEADERS)
    assert r.status_code == 200
    assert r.json()["rows"] == []
    assert r.json()["error"] == "You are not authorized to view assignments. HR can assign you as a manager."


def test_list_filtered_by_cycle(client, fake_api):
    fake_api.on("GET", "/performance/cycles/c1/assignments", 200, [assignment("a9")])

    r = client.get("/performance/assignments", params={"cycle_id": "c1"}, headers=USER_HEADERS)
    assert [row["id"] for row in r.json()["rows"]] == ["a9"]
    assert r.json()["filters"] == {"cycle_id": "c1"}
    assert fake_api.called("GET", MANAGER_PATH) == []


def test_new_assignment_form(client, fake_api, monkeypatch):
    monkeypatch.setattr(settings, "EMPLOYEE_PROFILE_URL", "/employee-profile")
    fake_api.on("GET", "/performance/cycles", 200, [cycle("c1")])
    fake_api.on("GET", "/performance/templates", 200, [template()])
    fake_api.on("GET", "/employee-profile", 200, {"items": [person("e1", "Jane", "Doe")]})

    r = client.get("/performance/assignments/new", params={"cycle": "c1"})
    assert r.status_code == 200
    form = r.json()
    assert form["values"]["cycle_id"] == "c1"
    assert form["options"]["cycles"] == [{"value": "c1", "label": "2025 Annual"}]
    assert form["options"]["employees"] == [{"value": "e1", "label": "Jane Doe"}]


def test_new_assignment_form_tolerates_failures(client, fake_api):
    fake_api.on("GET", "/performance/cycles", 500, {"message": "down"})
    fake_api.on("GET", "/performance/templates", 200, [template()])

    r = client.get("/performance/assignments/new")
    assert r.status_code == 200
    assert r.json()["options"]["cycles"] == []
    assert r.json()["options"]["templates"][0]["value"] == "tpl-1"


def test_toggle_employee(client):
    form = {"cycle_id": "c1", "template_id": "t1", "employee_ids": ["e1"]}
    r = client.post("/performance/assignments/form/toggle-employee", json={"form": form, "employee_id": "e2"})
    assert r.json()["employee_ids"] == ["e1", "e2"]

    r = client.post("/performance/assignments/form/toggle-employee", json={"form": form, "employee_id": "e1"})
    assert r.json()["employee_ids"] == []


def test_create_assignments(client, fake_api):
    fake_api.on("POST", "/performance/cycles/c1/assignments", 201, [assignment("a1"), assignment("a2")])

    r = client.post(
        "/performance/assignments",
        json={"cycle_id": "c1", "template_id": "tpl-1", "employee_ids": ["e1", "e2"]},
    )
    assert r.status_code == 201
    assert r.json()["redirect_to"] == "/performance/assignments"
    sent = fake_api.called("POST", "/performance/cycles/c1/assignments")[0]["json"]
    assert sent == {"templateId": "tpl-1", "employeeIds": ["e1", "e2"]}


def test_create_assignments_without_employees_makes_no_call(client, fake_api):
    r = client.post("/performance/assignments", json={"cycle_id": "c1", "template_id": "tpl-1"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Please select at least one employee or provide employee IDs"
    assert fake_api.calls == []


def test_create_assignments_bad_json_makes_no_call(client, fake_api):
    r = client.post(
        "/performance/assignments",
        json={"cycle_id": "c1", "template_id": "tpl-1", "employee_ids_json": "not json"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid JSON format for employee IDs"
    assert fake_api.calls == []


def test_delete_assignment_error(client, fake_api):
    fake_api.on("DELETE", "/performance/assignments/a1", 409, {"message": "Assignment already has a record"})

    r = client.delete("/performance/assignments/a1")
    assert r.status_code == 409
    assert r.json()["detail"] == "Assignment already has a record"
