from fastapi.testclient import TestClient
from app.main import app


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint():
    """Test root endpoint"""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Performance Management"
    assert data["status"] == "ok"
    assert data["home"] == "/performance"
    assert "docs" in data
    assert "health" in data


def test_run_starts_uvicorn(monkeypatch):
    import app.main as main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    main.run()
    assert calls[0][0] == ("app.main:app",)
    assert calls[0][1]["port"] == main.settings.PORT
