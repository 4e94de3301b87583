"""Tests for the API and view routes."""
import asyncio
import csv
import io

import pytest

from resource_tracker.errors import ServiceError
from tests.conftest import EMAIL, PASSWORD


def _owner(service):
    return service.users[EMAIL]["identity"]


# Views and the session guard

@pytest.mark.asyncio
async def test_view_shows_loading_before_session_check(client):
    response = await client.get("/resources", follow_redirects=False)

    assert response.status_code == 202
    assert response.json() == {"view": "loading"}


@pytest.mark.asyncio
async def test_view_redirects_to_login_with_next(app, client):
    await app.state.tracker.session.check_session()

    response = await client.get("/resources?category=Software", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/authentication?next=%2Fresources%3Fcategory%3DSoftware"


@pytest.mark.asyncio
async def test_authentication_view_is_unguarded(client):
    response = await client.get("/authentication", params={"next": "https://evil.example"})

    assert response.status_code == 200
    body = response.json()
    assert body["view"] == "authentication"
    assert body["next"] == "/"
    assert "navigation" not in body


@pytest.mark.asyncio
async def test_guarded_views_carry_navigation(signed_in_client):
    for path, view in [("/", "dashboard"), ("/resources", "resources"), ("/add-resource", "add-resource"), ("/settings", "settings")]:
        response = await signed_in_client.get(path)

        assert response.status_code == 200, path
        body = response.json()
        assert body["view"] == view
        assert [item["href"] for item in body["navigation"]] == ["/", "/resources", "/add-resource", "/settings"]
        assert body["initials"] == "AL"


@pytest.mark.asyncio
async def test_add_resource_view_edit_unknown_id(signed_in_client):
    response = await signed_in_client.get("/add-resource", params={"edit": "missing"})

    body = response.json()
    assert body["editing"] is True
    assert body["error"] == "Resource not found"


@pytest.mark.asyncio
async def test_resources_view_filters(service, signed_in_client, app):
    owner = _owner(service)
    service.add_row(owner, title="Drill", category="Equipment", status="Available")
    service.add_row(owner, title="Oak planks", category="Raw Materials", status="Low Stock")
    await app.state.tracker.resources.fetch_all()

    response = await signed_in_client.get("/resources", params={"category": "Equipment"})

    body = response.json()
    assert [r["title"] for r in body["resources"]] == ["Drill"]
    assert body["categories"] == ["All", "Raw Materials", "Equipment"]
    assert body["filters"]["status"] == "All"


# Auth API

@pytest.mark.asyncio
async def test_login_returns_redirect(app, client):
    await app.state.tracker.session.check_session()

    response = await client.post(
        "/api/auth/login",
        params={"next": "/settings"},
        json={"email": EMAIL, "password": PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["redirect_to"] == "/settings"


@pytest.mark.asyncio
async def test_login_rejects_wrong_password(client):
    response = await client.post("/api/auth/login", json={"email": EMAIL, "password": "nope"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Invalid login credentials"


@pytest.mark.asyncio
async def test_register_mismatched_passwords(client):
    response = await client.post(
        "/api/auth/register",
        json={"name": "Grace", "email": "grace@example.com", "password": "a", "confirm_password": "b"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"


@pytest.mark.asyncio
async def test_register_pending_confirmation(service, client):
    service.require_confirmation = True

    response = await client.post(
        "/api/auth/register",
        json={"name": "Grace", "email": "grace@example.com", "password": "pw", "confirm_password": "pw"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["pending_confirmation"] is True
    assert body["redirect_to"] is None
    assert body["message"]


@pytest.mark.asyncio
async def test_logout_clears_session(signed_in_client):
    response = await signed_in_client.post("/api/auth/logout")

    assert response.json()["authenticated"] is False
    session = await signed_in_client.get("/api/auth/session")
    assert session.json()["identity"] is None


@pytest.mark.asyncio
async def test_update_profile(signed_in_client):
    response = await signed_in_client.put("/api/auth/profile", json={"name": "Ada King", "bio": "Countess"})

    assert response.status_code == 200
    assert response.json()["name"] == "Ada King"
    assert response.json()["bio"] == "Countess"


# Resources API

@pytest.mark.asyncio
async def test_resources_require_sign_in(client):
    response = await client.get("/api/resources/")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_edit_delete(signed_in_client):
    created = await signed_in_client.post(
        "/api/resources/",
        json={"title": "Laser cutter", "category": "Equipment", "quantity": "1", "cost": "4999.90"},
    )
    assert created.status_code == 201
    resource_id = created.json()["id"]
    assert created.json()["cost"] == 4999.9

    updated = await signed_in_client.put(f"/api/resources/{resource_id}", json={"status": "On Order"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "On Order"
    assert updated.json()["title"] == "Laser cutter"

    unconfirmed = await signed_in_client.delete(f"/api/resources/{resource_id}")
    assert unconfirmed.status_code == 400

    deleted = await signed_in_client.delete(f"/api/resources/{resource_id}", params={"confirm": "true"})
    assert deleted.status_code == 204

    missing = await signed_in_client.get(f"/api/resources/{resource_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_create_requires_title(signed_in_client):
    response = await signed_in_client.post("/api/resources/", json={"title": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Title is required"


@pytest.mark.asyncio
async def test_create_rejects_negative_quantity(signed_in_client):
    response = await signed_in_client.post("/api/resources/", json={"title": "Rope", "quantity": "-2"})

    assert response.status_code == 400
    assert "Quantity" in response.json()["detail"]


@pytest.mark.asyncio
async def test_update_unknown_resource(signed_in_client):
    response = await signed_in_client.put("/api/resources/missing", json={"title": "x"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_while_loading_is_conflict(service, signed_in_client, app):
    row = service.add_row(_owner(service), title="Band saw", description="Shop floor", category="Software", status="Depleted", quantity=4.0)
    collection = app.state.tracker.resources
    gate = service.gates["select_resources"] = asyncio.Event()
    fetch = asyncio.create_task(collection.fetch_all())
    while not collection.loading:
        await asyncio.sleep(0)

    response = await signed_in_client.put(f"/api/resources/{row.id}", json={"title": "Band saw v2"})
    gate.set()
    await fetch

    assert response.status_code == 409
    assert service.rows[row.id] == row
    assert collection.get_by_id(row.id).description == "Shop floor"


@pytest.mark.asyncio
async def test_refresh_reports_service_failure(service, signed_in_client):
    service.failures["select_resources"] = ServiceError("connection reset")

    response = await signed_in_client.post("/api/resources/refresh")

    assert response.status_code == 502
    assert response.json()["detail"] == "connection reset"


@pytest.mark.asyncio
async def test_export_csv(service, signed_in_client, app):
    service.add_row(_owner(service), title="Paint", category="Raw Materials", quantity=3.0)
    await app.state.tracker.resources.fetch_all()

    response = await signed_in_client.get("/api/resources/export/csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert rows[0]["title"] == "Paint"
    assert rows[0]["cost"] == ""


@pytest.mark.asyncio
async def test_dashboard_stats(service, signed_in_client, app):
    owner = _owner(service)
    service.add_row(owner, title="Drill", category="Equipment", status="Available")
    service.add_row(owner, title="Saw", category="Equipment", status="Depleted")
    await app.state.tracker.resources.fetch_all()

    response = await signed_in_client.get("/api/dashboard/stats")

    body = response.json()
    assert body["total"] == 2
    assert body["by_category"]["Equipment"] == 2
    assert body["by_category"]["Software"] == 0
    assert body["by_status"]["Depleted"] == 1
    assert [r["title"] for r in body["recent_activity"]] == ["Saw", "Drill"]


# Settings API

@pytest.mark.asyncio
async def test_theme_endpoints(client):
    assert (await client.get("/api/settings/theme")).json() == {"theme": "system"}

    response = await client.put("/api/settings/theme", json={"theme": "light"})
    assert response.json() == {"theme": "light"}

    toggled = await client.post("/api/settings/theme/toggle")
    assert toggled.json() == {"theme": "dark"}


@pytest.mark.asyncio
async def test_theme_rejects_unknown_value(client):
    response = await client.put("/api/settings/theme", json={"theme": "sepia"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.json() == {"status": "healthy"}
