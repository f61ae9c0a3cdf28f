import json
from typing import Any, Callable

import httpx

from app.core.api_client import PerformanceApi

USER_ID = "692b45fe751ce734f8f8f0c6"
USER_HEADERS = {"X-User-Id": USER_ID}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeApi:
    """
    In-memory stand-in for the remote performance API.

    Routes are keyed by (method, path) and answer with a (status, body) pair
    or a callable taking the request. Unknown routes answer 404.
    Every request is recorded in `calls`.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any] | Handler] = {}
        self.calls: list[dict] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None) -> "FakeApi":
        self.routes[(method.upper(), path)] = (status, body)
        return self

    def on_call(self, method: str, path: str, handler: Handler) -> "FakeApi":
        self.routes[(method.upper(), path)] = handler
        return self

    def fail(self, method: str, path: str, exc: Exception) -> "FakeApi":
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc
        return self.on_call(method, path, _raise)

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append(
            {
                "method": request.method,
                "path": request.url.path,
                "params": dict(request.url.params),
                "json": body,
                "headers": dict(request.headers),
            }
        )
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def client(self, **kwargs) -> PerformanceApi:
        http = httpx.AsyncClient(
            base_url="http://upstream.test",
            transport=httpx.MockTransport(self.handle),
            **kwargs,
        )
        return PerformanceApi(http)

    def called(self, method: str, path: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    def writes(self) -> list[dict]:
        return [c for c in self.calls if c["method"] != "GET"]


def person(pid: str, first: str, last: str, number: str | None = None) -> dict:
    return {"_id": pid, "firstName": first, "lastName": last, "employeeNumber": number}


def template(tid: str = "tpl-1", name: str = "Annual Review", active: bool = True) -> dict:
    return {
        "_id": tid,
        "name": name,
        "templateType": "ANNUAL",
        "isActive": active,
        "ratingScale": {"type": "FIVE_POINT", "min": 1, "max": 5, "step": 1, "labels": []},
        "criteria": [
            {"key": "quality", "title": "Quality of Work", "weight": 50, "maxScore": 5, "required": True},
            {"key": "teamwork", "title": "Teamwork", "weight": 50, "maxScore": 5},
        ],
    }


def cycle(cid: str = "cyc-1", name: str = "2025 Annual", **extra) -> dict:
    data = {
        "_id": cid,
        "name": name,
        "cycleType": "ANNUAL",
        "startDate": "2025-01-01T00:00:00.000Z",
        "endDate": "2025-12-31T00:00:00.000Z",
        "managerDueDate": "2025-12-15T00:00:00.000Z",
    }
    data.update(extra)
    return data


def assignment(aid: str, status: str = "NOT_STARTED", **extra) -> dict:
    data = {
        "_id": aid,
        "cycleId": {"_id": "cyc-1", "name": "2025 Annual"},
        "templateId": {"_id": "tpl-1", "name": "Annual Review"},
        "employeeProfileId": person(f"emp-{aid}", "Jane", "Doe", "E-100"),
        "managerProfileId": person("mgr-1", "Sam", "Boss"),
        "status": status,
        "createdAt": "2025-02-01T10:00:00.000Z",
    }
    data.update(extra)
    return data


def record(rid: str, status: str = "MANAGER_SUBMITTED", **extra) -> dict:
    data = {
        "_id": rid,
        "assignmentId": "asg-1",
        "ratings": [{"key": "quality", "ratingValue": 4, "comments": "Solid"}],
        "managerSummary": "Good year",
        "strengths": "Ownership\nMentoring",
        "improvementAreas": "",
        "totalScore": 4,
        "overallRatingLabel": "Exceeds Expectations",
        "status": status,
        "managerSubmittedAt": "2025-06-01T09:00:00.000Z",
    }
    data.update(extra)
    return data
