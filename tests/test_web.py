"""Tests for the HTTP API endpoints."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from starlette.testclient import TestClient

from plan_board.plans.store import PlanStorageError
from plan_board.web.app import build_app

from .helpers import plan_body


@pytest.fixture
def client(tmp_path: Path):
	"""Create a test client; entering it runs the lifespan that opens the store."""
	app = build_app(db_path=str(tmp_path / "test.db"))
	with TestClient(app) as c:
		yield c


def test_health(client: TestClient):
	resp = client.get("/api/health")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}


def test_create_plan_defaults(client: TestClient):
	resp = client.post("/api/plans", json=plan_body())
	assert resp.status_code == 200
	plan = resp.json()
	assert isinstance(plan["id"], int)
	assert plan["id"] > 0
	assert plan["completed"] is False
	assert plan["priority"] == "medium"
	assert plan["description"] == ""
	assert plan["deadline"] == "2024-06-01"
	assert plan["author"] == "alice"
	assert plan["created_at"]


def test_ship_release_lifecycle(client: TestClient):
	"""Create, toggle, delete, then the plan is gone."""
	plan = client.post("/api/plans", json=plan_body()).json()
	plan_id = plan["id"]

	resp = client.patch(f"/api/plans/{plan_id}/toggle")
	assert resp.status_code == 200
	assert resp.json() == {"completed": True, "changes": 1}

	resp = client.delete(f"/api/plans/{plan_id}")
	assert resp.status_code == 200
	body = resp.json()
	assert body["changes"] == 1
	assert body["message"]

	resp = client.get(f"/api/plans/{plan_id}")
	assert resp.status_code == 404
	assert "error" in resp.json()


def test_create_missing_author_inserts_nothing(client: TestClient):
	body = plan_body()
	del body["author"]

	resp = client.post("/api/plans", json=body)
	assert resp.status_code == 400
	assert "author" in resp.json()["error"]

	assert client.get("/api/plans").json() == []


def test_create_invalid_priority(client: TestClient):
	resp = client.post("/api/plans", json=plan_body(priority="urgent"))
	assert resp.status_code == 400
	assert "priority" in resp.json()["error"]
	assert client.get("/api/stats").json()["total"] == 0


def test_create_malformed_json(client: TestClient):
	resp = client.post(
		"/api/plans",
		content=b"{not json",
		headers={"content-type": "application/json"},
	)
	assert resp.status_code == 400
	assert "Invalid JSON" in resp.json()["error"]


def test_create_invalid_utf8_body(client: TestClient):
	resp = client.post(
		"/api/plans",
		content=b'{"title": "\xc3\x28", "deadline": "2024-06-01", "author": "a"}',
		headers={"content-type": "application/json"},
	)
	assert resp.status_code == 400
	assert "Invalid JSON" in resp.json()["error"]
	assert client.get("/api/plans").json() == []


def test_update_invalid_body_on_existing_plan_is_400(client: TestClient):
	created = client.post("/api/plans", json=plan_body()).json()
	resp = client.put(
		f"/api/plans/{created['id']}",
		content=b"{not json",
		headers={"content-type": "application/json"},
	)
	assert resp.status_code == 400


def test_create_non_object_body(client: TestClient):
	resp = client.post("/api/plans", json=["Ship release"])
	assert resp.status_code == 400


def test_list_plans_newest_first(client: TestClient):
	first = client.post("/api/plans", json=plan_body(title="First")).json()
	second = client.post("/api/plans", json=plan_body(title="Second")).json()

	resp = client.get("/api/plans")
	assert resp.status_code == 200
	assert [p["id"] for p in resp.json()] == [second["id"], first["id"]]


def test_get_plan(client: TestClient):
	created = client.post("/api/plans", json=plan_body(description="tag it", priority="high")).json()

	resp = client.get(f"/api/plans/{created['id']}")
	assert resp.status_code == 200
	assert resp.json() == created


def test_update_plan(client: TestClient):
	created = client.post("/api/plans", json=plan_body(priority="high")).json()

	resp = client.put(
		f"/api/plans/{created['id']}",
		json=plan_body(title="Ship 2.0", completed=True),
	)
	assert resp.status_code == 200
	assert resp.json()["changes"] == 1
	assert resp.json()["message"]

	updated = client.get(f"/api/plans/{created['id']}").json()
	assert updated["title"] == "Ship 2.0"
	assert updated["completed"] is True
	# Omitted priority is reset, not left untouched
	assert updated["priority"] == "medium"
	assert updated["created_at"] == created["created_at"]


def test_update_missing_required_field(client: TestClient):
	created = client.post("/api/plans", json=plan_body()).json()
	resp = client.put(f"/api/plans/{created['id']}", json={"title": "Only a title"})
	assert resp.status_code == 400


@pytest.mark.parametrize("method,path,body", [
	("GET", "/api/plans/999", None),
	("PUT", "/api/plans/999", plan_body()),
	("PUT", "/api/plans/999", {"title": "x"}),
	("PUT", "/api/plans/999", None),
	("DELETE", "/api/plans/999", None),
	("PATCH", "/api/plans/999/toggle", None),
])
def test_missing_plan_is_404(client: TestClient, method: str, path: str, body):
	kwargs = {"json": body} if body is not None else {}
	resp = client.request(method, path, **kwargs)
	assert resp.status_code == 404
	assert "999" in resp.json()["error"]


def test_non_integer_id_does_not_match(client: TestClient):
	resp = client.get("/api/plans/abc")
	assert resp.status_code == 404


def test_toggle_twice_restores(client: TestClient):
	plan_id = client.post("/api/plans", json=plan_body()).json()["id"]
	assert client.patch(f"/api/plans/{plan_id}/toggle").json()["completed"] is True
	assert client.patch(f"/api/plans/{plan_id}/toggle").json()["completed"] is False
	assert client.get(f"/api/plans/{plan_id}").json()["completed"] is False


def test_stats(client: TestClient):
	a = client.post("/api/plans", json=plan_body(priority="high")).json()
	client.post("/api/plans", json=plan_body(priority="low"))
	client.post("/api/plans", json=plan_body())
	client.patch(f"/api/plans/{a['id']}/toggle")

	resp = client.get("/api/stats")
	assert resp.status_code == 200
	assert resp.json() == {"total": 3, "completed": 1, "high_priority": 1}


def test_stats_empty(client: TestClient):
	assert client.get("/api/stats").json() == {"total": 0, "completed": 0, "high_priority": 0}


def test_storage_error_is_500(client: TestClient):
	client.app.state.store.list_plans = AsyncMock(side_effect=PlanStorageError("disk I/O error"))

	resp = client.get("/api/plans")
	assert resp.status_code == 500
	assert resp.json() == {"error": "disk I/O error"}


def test_routes_registered(client: TestClient):
	mount = next(r for r in client.app.routes if r.path == "/api")
	paths = {r.path for r in mount.routes}
	assert {"/plans", "/plans/{id:int}", "/plans/{id:int}/toggle", "/stats"} <= paths
