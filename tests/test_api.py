"""
WellBloom Backend: HTTP API Tests
==================================

What we test:
    ✅ Status codes and the shared error body
    ✅ Request validation → 400 with per-field errors
    ✅ Password byte limit and case-insensitive email uniqueness over HTTP
    ✅ Update bodies reject fields they do not own
    ✅ Bearer auth: 401 without token, 403 for the wrong role
    ✅ Pagination envelopes
    ✅ Request ID echo, health check, storage outage → 503
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from wellbloom.database import get_db_session


async def _create_user(client, email: str) -> dict:
    response = await client.post(
        "/api/users",
        json={"name": "Ana", "email": email, "password": "s3cure-password"},
    )
    assert response.status_code == 201
    return response.json()


async def _register_and_login(client, email: str, role: str) -> str:
    response = await client.post(
        "/api/admins/register",
        json={"name": "Admin", "email": email, "password": "admin-password", "role": role},
    )
    assert response.status_code == 201
    login = await client.post(
        "/api/admins/login", json={"email": email, "password": "admin-password"}
    )
    assert login.status_code == 200
    return login.json()["token"]


class TestEmotionEndpoints:

    @pytest.mark.asyncio
    async def test_create_duplicate_and_empty_phrases(self, client):
        """201, then 409 for the same name, then an empty phrase list."""
        body = {"name": "alegría", "description": "Felicidad", "score": 9}

        created = await client.post("/api/emotions", json=body)
        duplicate = await client.post("/api/emotions", json=body)

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert duplicate.json()["error"] == "conflict"

        phrases = await client.get(f"/api/emotions/{created.json()['id']}/phrases")
        assert phrases.status_code == 200
        assert phrases.json() == []

    @pytest.mark.asyncio
    async def test_score_out_of_range_is_400(self, client):
        response = await client.post("/api/emotions", json={"name": "ira", "score": 11})

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "score"

    @pytest.mark.asyncio
    async def test_numbered_pagination_envelope(self, client):
        for i in range(15):
            await client.post("/api/emotions", json={"name": f"emoción {i:02d}", "score": 5})

        response = await client.get("/api/emotions", params={"page": 2, "limit": 10})

        body = response.json()
        assert response.status_code == 200
        assert len(body["data"]) == 5
        assert body["pagination"] == {"total": 15, "page": 2, "limit": 10, "total_pages": 2}

    @pytest.mark.asyncio
    async def test_missing_emotion_is_404(self, client):
        response = await client.get("/api/emotions/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestValidationErrors:

    @pytest.mark.asyncio
    async def test_short_password_names_the_field(self, client):
        response = await client.post(
            "/api/users", json={"name": "Ana", "email": "ana@wellbloom.io", "password": "short"}
        )

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "validation_error"
        assert [e["field"] for e in body["details"]["errors"]] == ["password"]
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_multibyte_password_over_72_bytes_is_400(self, client):
        response = await client.post(
            "/api/users", json={"name": "Ana", "email": "ana@wellbloom.io", "password": "ñ" * 40}
        )

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["details"]["errors"]] == ["password"]

    @pytest.mark.asyncio
    async def test_long_admin_password_is_400(self, client):
        response = await client.post(
            "/api/admins/register",
            json={"name": "Admin", "email": "a@wellbloom.io", "password": "p" * 100, "role": "editor"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_email_case_variant_is_409(self, client):
        await _create_user(client, "ana@wellbloom.io")

        response = await client.post(
            "/api/users",
            json={"name": "Ana", "email": "ANA@WellBloom.io", "password": "s3cure-password"},
        )
        users = await client.get("/api/users")

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert len(users.json()) == 1

    @pytest.mark.asyncio
    async def test_completed_cannot_be_patched(self, client):
        """Completion is only reachable through the /complete endpoint."""
        activity = (await client.post("/api/activities", json={"name": "Yoga"})).json()
        exercise = (
            await client.post("/api/exercises", json={"activity_id": activity["id"]})
        ).json()

        response = await client.put(f"/api/exercises/{exercise['id']}", json={"completed": True})
        completed = await client.put(f"/api/exercises/{exercise['id']}/complete")

        assert response.status_code == 400
        assert completed.status_code == 200
        assert completed.json()["completed"] is True

    @pytest.mark.asyncio
    async def test_unknown_shift_is_400(self, client):
        response = await client.get("/api/exercises/shift/midnight")

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "shift"

    @pytest.mark.asyncio
    async def test_activity_with_exercise_cannot_be_deleted(self, client):
        activity = (await client.post("/api/activities", json={"name": "Yoga"})).json()
        await client.post("/api/exercises", json={"activity_id": activity["id"]})

        response = await client.delete(f"/api/activities/{activity['id']}")

        assert response.status_code == 400
        assert response.json()["error"] == "dependency_conflict"
        assert response.json()["details"]["dependents"] == ["exercises"]


class TestJournalEndpoints:

    @pytest.mark.asyncio
    async def test_foreign_record_is_403(self, client):
        owner = await _create_user(client, "owner@wellbloom.io")
        intruder = await _create_user(client, "intruder@wellbloom.io")
        emotion = (await client.post("/api/emotions", json={"name": "calma", "score": 7})).json()
        record = (
            await client.post(
                "/api/emotion-records", json={"user_id": owner["id"], "emotion_id": emotion["id"]}
            )
        ).json()

        response = await client.post(
            "/api/journal", json={"user_id": intruder["id"], "record_id": record["id"]}
        )
        listing = await client.get(f"/api/journal/user/{intruder['id']}")

        assert response.status_code == 403
        assert response.json()["error"] == "ownership_error"
        assert listing.json()["pagination"] == {"total": 0, "limit": 10, "offset": 0}

    @pytest.mark.asyncio
    async def test_summary_of_new_user_is_empty(self, client):
        user = await _create_user(client, "ana@wellbloom.io")

        response = await client.get(f"/api/journal/summary/user/{user['id']}")

        assert response.status_code == 200
        assert response.json()["emotions"] == []
        assert response.json()["days"] == 30


class TestAdminEndpoints:

    @pytest.mark.asyncio
    async def test_list_without_token_is_401(self, client):
        response = await client.get("/api/admins")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_list_with_malformed_token_is_401(self, client):
        response = await client.get("/api/admins", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_moderator_cannot_list(self, client):
        token = await _register_and_login(client, "mod@wellbloom.io", "moderator")

        response = await client.get("/api/admins", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_superadmin_lists_and_cannot_delete_self_when_alone(self, client):
        token = await _register_and_login(client, "boss@wellbloom.io", "superadmin")
        headers = {"Authorization": f"Bearer {token}"}

        admins = await client.get("/api/admins", headers=headers)
        boss_id = admins.json()[0]["id"]
        response = await client.delete(f"/api/admins/{boss_id}", headers=headers)

        assert admins.status_code == 200
        assert "password" not in admins.json()[0]
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete the only superadmin"

    @pytest.mark.asyncio
    async def test_bad_login_is_401(self, client):
        response = await client.post(
            "/api/admins/login", json={"email": "ghost@wellbloom.io", "password": "whatever"}
        )

        assert response.status_code == 401


class TestOperationalEndpoints:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
        assert response.json()["database_latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_health_without_database_is_503(self, client, monkeypatch):
        from wellbloom.routes import health

        async def unreachable():
            return None

        monkeypatch.setattr(health, "check_database", unreachable)

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database_latency_ms"] is None

    @pytest.mark.asyncio
    async def test_unsafe_request_id_is_replaced(self, client):
        response = await client.get("/api/users", headers={"X-Request-ID": "bad id\twith spaces"})

        assert response.headers["X-Request-ID"] != "bad id\twith spaces"
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/users", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/api/emotions/404")

        assert len(response.headers["X-Request-ID"]) == 8
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_storage_outage_is_503(self, client):
        from wellbloom.main import app

        broken = AsyncMock()
        broken.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        async def override_get_db_session():
            yield broken

        app.dependency_overrides[get_db_session] = override_get_db_session

        response = await client.get("/api/users")

        assert response.status_code == 503
        assert response.json()["error"] == "storage_unavailable"
        assert "down" not in response.json()["message"]
