from tests.helpers import assignment, cycle, person, record


def test_publish_queue_collects_manager_submitted_records(client, fake_api):
    fake_api.on("GET", "/performance/cycles", 200, [cycle("c1"), cycle("c2", "Mid-Year")])
    fake_api.on(
        "GET",
        "/performance/cycles/c1/assignments",
        200,
        [
            assignment("a1", status="SUBMITTED", latestAppraisalId="r1"),
            assignment("a2", status="SUBMITTED", cycleId="c1"),
            assignment("a3", status="IN_PROGRESS", latestAppraisalId="r3"),
        ],
    )
    fake_api.on("GET", "/performance/cycles/c2/assignments", 500, {"message": "boom"})
    fake_api.on("GET", "/performance/assignments/a2", 200, assignment("a2", status="SUBMITTED", latestAppraisalId={"_id": "r2"}))
    fake_api.on("GET", "/performance/records/r1", 200, record("r1"))
    fake_api.on("GET", "/performance/records/r2", 200, record("r2", status="HR_PUBLISHED"))

    r = client.get("/performance/publish")
    assert r.status_code == 200
    view = r.json()
    assert view["error"] is None
    assert [row["id"] for row in view["rows"]] == ["r1"]
    row = view["rows"][0]
    assert row["cells"]["employee"] == "Jane Doe"
    assert row["cells"]["cycle"] == "2025 Annual"
    assert row["cells"]["total_score"] == "4.0"
    assert row["actions"][1] == {"label": "Publish", "href": "/performance/publish/r1", "method": "POST"}
    # in-progress assignments are never looked up
    assert fake_api.called("GET", "/performance/records/r3") == []


def test_publish_queue_fills_in_missing_cycle_name(client, fake_api):
    fake_api.on("GET", "/performance/cycles", 200, [cycle("c1", "2025 Annual")])
    fake_api.on(
        "GET",
        "/performance/cycles/c1/assignments",
        200,
        [assignment("a1", status="SUBMITTED", cycleId="c1", latestAppraisalId="r1",
                    employeeProfileId=person("e", "Tom", "Ng"))],
    )
    fake_api.on("GET", "/performance/records/r1", 200, record("r1"))

    row = client.get("/performance/publish").json()["rows"][0]
    assert row["cells"]["cycle"] == "2025 Annual"
    assert row["cells"]["employee"] == "Tom Ng"


def test_publish_queue_cycles_failure(client, fake_api):
    fake_api.on("GET", "/performance/cycles", 500, {"message": "down"})

    view = client.get("/performance/publish").json()
    assert view["rows"] == []
    assert view["error"] == "Failed to load appraisals: down"


def test_publish_record(client, fake_api):
    fake_api.on("POST", "/performance/records/r1/publish", 200, record("r1", status="HR_PUBLISHED"))

    r = client.post("/performance/publish/r1")
    assert r.status_code == 200
    assert r.json()["message"] == "Appraisal published successfully"
    assert r.json()["redirect_to"] == "/performance/publish"


def test_publish_record_failure(client, fake_api):
    fake_api.on("POST", "/performance/records/r1/publish", 403, {"message": "HR only"})

    r = client.post("/performance/publish/r1")
    assert r.status_code == 403
    assert r.json()["detail"] == "HR only"
