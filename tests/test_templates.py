from tests.helpers import template


def test_list_templates(client, fake_api):
    fake_api.on("GET", "/performance/templates", 200, [template(), template("tpl-2", "Old", active=False)])

    r = client.get("/performance/templates")
    assert r.status_code == 200
    rows = r.json()["rows"]
    assert rows[0]["cells"]["criteria"] == 2
    assert rows[0]["cells"]["rating_scale"]
    assert rows[0]["badge"] == {"label": "Active", "css_class": "badge-success"}
    assert rows[1]["badge"] == {"label": "Inactive", "css_class": "badge-error"}
    assert fake_api.called("GET", "/performance/templates")[0]["params"] == {}


def test_list_active_templates_only(client, fake_api):
    fake_api.on("GET", "/performance/templates", 200, [template()])

    client.get("/performance/templates", params={"active_only": "true"})
    assert fake_api.called("GET", "/performance/templates")[0]["params"] == {"activeOnly": "true"}


def test_add_criterion_requires_key_and_title(client):
    form = {"name": "T", "criteria": []}

    r = client.post(
        "/performance/templates/form/criteria",
        json={"form": form, "edit": {"op": "add", "value": {"key": "", "title": "Quality"}}},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Key and title are required for criteria"

    r = client.post(
        "/performance/templates/form/criteria",
        json={"form": form, "edit": {"op": "add", "value": {"key": "quality", "title": "Quality", "weight": 40}}},
    )
    assert r.status_code == 200
    assert r.json()["criteria"][0]["key"] == "quality"
    assert r.json()["criteria"][0]["weight"] == 40


def test_create_template(client, fake_api):
    fake_api.on("POST", "/performance/templates", 201, template("tpl-new"))

    r = client.post(
        "/performance/templates",
        json={
            "name": " Engineering ",
            "rating_scale": {"labels": "Poor, Fair, Good"},
            "criteria": [{"key": "q", "title": "Quality", "max_score": 10}],
        },
    )
    assert r.status_code == 201
    sent = fake_api.called("POST", "/performance/templates")[0]["json"]
    assert sent["name"] == "Engineering"
    assert sent["templateType"] == "ANNUAL"
    assert sent["ratingScale"]["labels"] == ["Poor", "Fair", "Good"]
    assert sent["criteria"][0]["maxScore"] == 10
    assert sent["isActive"] is True


def test_create_template_without_name_is_rejected_locally(client, fake_api):
    r = client.post("/performance/templates", json={"name": ""})
    assert r.status_code == 400
    assert fake_api.writes() == []


def test_template_detail_and_edit_prefill(client, fake_api):
    fake_api.on("GET", "/performance/templates/tpl-1", 200, template())

    r = client.get("/performance/templates/tpl-1")
    assert r.status_code == 200
    assert r.json()["title"] == "Annual Review"

    r = client.get("/performance/templates/tpl-1/edit")
    values = r.json()["values"]
    assert [c["key"] for c in values["criteria"]] == ["quality", "teamwork"]
    assert values["criteria"][0]["required"] is True


def test_missing_template_is_404(client, fake_api):
    r = client.get("/performance/templates/nope")
    assert r.status_code == 404


def test_update_and_delete_template(client, fake_api):
    fake_api.on("PUT", "/performance/templates/tpl-1", 200, template())
    fake_api.on("DELETE", "/performance/templates/tpl-1", 200, {"deleted": True})

    r = client.put("/performance/templates/tpl-1", json={"name": "Annual Review", "is_active": False})
    assert r.status_code == 200
    assert fake_api.called("PUT", "/performance/templates/tpl-1")[0]["json"]["isActive"] is False

    r = client.delete("/performance/templates/tpl-1")
    assert r.json()["redirect_to"] == "/performance/templates"


def test_criterion_update_rejects_unknown_field(client):
    form = {"name": "T", "criteria": [{"key": "q", "title": "Quality"}]}

    r = client.post(
        "/performance/templates/form/criteria",
        json={"form": form, "edit": {"op": "update", "index": 0, "field": "titel", "value": "Output"}},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Unknown field: titel"


def test_create_template_requires_scale_type(client, fake_api):
    r = client.post("/performance/templates", json={"name": "T", "rating_scale": {"type": " "}})
    assert r.status_code == 400
    assert r.json()["detail"] == "Rating scale type is required"
    assert fake_api.writes() == []
