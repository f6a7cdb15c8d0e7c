"""
Tests for routing endpoints.
"""

from datetime import timedelta

import pytest

from qa_routing.models import utcnow


def test_health(test_app_client):
    client, _ = test_app_client

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["database"] is True


def test_request_id_echoed(test_app_client):
    client, _ = test_app_client

    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["x-request-id"] == "req-123"


class TestAutoAssign:
    def test_assigns_pending_question(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        mod = make_moderator(["python"], name="Ada")
        question_id = make_question(["python"])

        response = client.post(f"/api/v1/routing/auto-assign/{question_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["moderator_id"] == mod
        assert body["moderator_name"] == "Ada"
        assert body["message"] == "Question auto-assigned successfully"

    def test_non_pending_is_soft_failure(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        mod = make_moderator()
        question_id = make_question(status="answered", assigned_to_id=mod)

        response = client.post(f"/api/v1/routing/auto-assign/{question_id}")

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["error"] == "invalid_state"

    def test_unassign_and_reassign(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        first = make_moderator()
        second = make_moderator()
        make_question(status="assigned", assigned_to_id=first)
        question_id = make_question(status="assigned", assigned_to_id=first)

        reassigned = client.post(f"/api/v1/routing/reassign/{question_id}")
        assert reassigned.json()["moderator_id"] == second

        released = client.post(f"/api/v1/routing/unassign/{question_id}")
        assert released.json()["success"] is True

        detail = client.get(f"/api/v1/questions/{question_id}").json()
        assert detail["status"] == "pending"
        assert detail["assigned_to"] is None


class TestOperatorActions:
    def test_assign_to_named_moderator(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        make_moderator(["python"])
        chosen = make_moderator(name="Grace")
        question_id = make_question(["python"])

        response = client.post(f"/api/v1/routing/assign/{question_id}", json={"moderator_id": chosen})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["moderator_id"] == chosen
        assert body["moderator_name"] == "Grace"
        assert client.get(f"/api/v1/questions/{question_id}").json()["status"] == "assigned"

    def test_assign_rejects_unapproved(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        pending_mod = make_moderator(approved=False)
        question_id = make_question()

        body = client.post(
            f"/api/v1/routing/assign/{question_id}", json={"moderator_id": pending_mod}
        ).json()

        assert body["success"] is False
        assert body["error"] == "invalid_moderator"

    def test_assign_requires_moderator_id(self, test_app_client, make_question):
        client, _ = test_app_client

        response = client.post(f"/api/v1/routing/assign/{make_question()}", json={})

        assert response.status_code == 422

    def test_close_updates_stats(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        mod = make_moderator()
        question_id = make_question(status="in-progress", assigned_to_id=mod)

        response = client.post(f"/api/v1/routing/close/{question_id}")

        assert response.json()["success"] is True
        stats = client.get("/api/v1/routing/stats").json()["stats"]
        assert stats["closed"] == 1
        assert stats["assigned"] == 0
        assert stats["moderators"][0]["active_questions"] == 0

    def test_close_missing_is_soft(self, test_app_client):
        client, _ = test_app_client

        body = client.post("/api/v1/routing/close/999").json()

        assert body["success"] is False
        assert body["error"] == "not_found"


def test_process_pending(test_app_client, make_moderator, make_question):
    client, _ = test_app_client
    for _ in range(3):
        make_moderator()
    for _ in range(3):
        make_question()

    response = client.post("/api/v1/routing/process-pending")

    body = response.json()
    assert body["success"] is True
    assert body["processed"] == 3
    assert len({r["moderator_id"] for r in body["results"]}) == 3
    assert all("title" in r for r in body["results"])


class TestStale:
    def test_default_threshold(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        mod = make_moderator()
        old = make_question(status="assigned", assigned_to_id=mod, updated_at=utcnow() - timedelta(hours=30))
        make_question(status="assigned", assigned_to_id=mod, updated_at=utcnow() - timedelta(hours=1))

        body = client.get("/api/v1/routing/stale").json()

        assert body["hours_threshold"] == 24
        assert body["count"] == 1
        assert body["questions"][0]["id"] == old
        assert body["questions"][0]["hours_since_update"] == 30

    def test_custom_threshold(self, test_app_client, make_moderator, make_question):
        client, _ = test_app_client
        mod = make_moderator()
        make_question(status="in-progress", assigned_to_id=mod, updated_at=utcnow() - timedelta(hours=3))

        assert client.get("/api/v1/routing/stale?hours_threshold=2").json()["count"] == 1
        assert client.get("/api/v1/routing/stale?hours_threshold=5").json()["count"] == 0

    def test_negative_threshold(self, test_app_client):
        client, _ = test_app_client

        response = client.get("/api/v1/routing/stale?hours_threshold=-1")

        assert response.status_code == 422

    @pytest.mark.parametrize("hours", ["inf", "nan", "1e20"])
    def test_unbounded_threshold(self, test_app_client, hours):
        client, _ = test_app_client

        response = client.get("/api/v1/routing/stale", params={"hours_threshold": hours})

        assert response.status_code == 422


def test_stats(test_app_client, make_moderator, make_question):
    client, _ = test_app_client
    mod = make_moderator(["python"])
    make_question()
    make_question(status="in-progress", assigned_to_id=mod)
    make_question(status="closed")

    body = client.get("/api/v1/routing/stats").json()

    assert body["success"] is True
    stats = body["stats"]
    assert (stats["total"], stats["pending"], stats["assigned"], stats["answered"], stats["closed"]) == (
        3,
        1,
        1,
        0,
        1,
    )
    assert stats["moderators"][0]["active_questions"] == 1


def test_jobs_disabled(test_app_client):
    client, _ = test_app_client

    response = client.get("/api/v1/jobs")

    assert response.status_code == 503
