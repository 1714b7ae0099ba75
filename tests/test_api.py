"""
HTTP tests for the profile, sessions and schedule routes.
"""

from datetime import timedelta

import pytest
from dateutil.parser import isoparse

NOW = "2024-07-02T09:00:00+00:00"


def create_profile(client, birth_date="2024-01-01"):
    response = client.put("/profile/", json={"name": "Ada", "birth_date": birth_date})
    assert response.status_code == 200
    return response.json()


def log_session(client, start, end, source="manual"):
    return client.post("/sessions/", json={"start_at": start, "end_at": end, "source": source})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestProfile:

    def test_missing_profile(self, client):
        assert client.get("/profile/").status_code == 404

    def test_upsert_keeps_single_profile(self, client):
        first = create_profile(client)
        second = create_profile(client, birth_date="2024-02-01")
        assert first["id"] == second["id"]
        assert second["birth_date"] == "2024-02-01"
        assert client.get("/profile/").json()["name"] == "Ada"


class TestSessions:

    def test_create_and_get(self, client):
        response = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z", source="timer")
        assert response.status_code == 201
        body = response.json()
        assert body["source"] == "timer"
        assert body["deleted"] is False

        fetched = client.get(f"/sessions/{body['id']}").json()
        assert isoparse(fetched["start_at"]) == isoparse("2024-07-02T07:30:00Z")

    def test_end_must_follow_start(self, client):
        response = log_session(client, "2024-07-02T09:00:00Z", "2024-07-02T09:00:00Z")
        assert response.status_code == 400

    def test_quality_range_validated(self, client):
        response = client.post("/sessions/", json={
            "start_at": "2024-07-02T07:30:00Z", "end_at": "2024-07-02T09:00:00Z", "quality": 9,
        })
        assert response.status_code == 422

    def test_edit_in_place(self, client):
        session_id = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z").json()["id"]
        response = client.patch(f"/sessions/{session_id}", json={"end_at": "2024-07-02T09:30:00Z", "quality": 4})
        assert response.status_code == 200
        assert response.json()["quality"] == 4
        assert isoparse(response.json()["end_at"]) == isoparse("2024-07-02T09:30:00Z")

    def test_edit_rejects_inverted_interval(self, client):
        session_id = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z").json()["id"]
        response = client.patch(f"/sessions/{session_id}", json={"start_at": "2024-07-02T10:00:00Z"})
        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["start_at", "end_at", "source"])
    def test_null_for_required_field_keeps_stored_value(self, client, field):
        created = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z", source="timer").json()
        response = client.patch(f"/sessions/{created['id']}", json={field: None})
        assert response.status_code == 200
        assert response.json()[field] == created[field]

    def test_null_clears_notes(self, client):
        created = client.post("/sessions/", json={
            "start_at": "2024-07-02T07:30:00Z", "end_at": "2024-07-02T09:00:00Z", "notes": "fussy",
        }).json()
        response = client.patch(f"/sessions/{created['id']}", json={"notes": None})
        assert response.status_code == 200
        assert response.json()["notes"] is None

    def test_soft_delete(self, client):
        session_id = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z").json()["id"]
        response = client.delete(f"/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["deleted"] is True

        assert client.get(f"/sessions/{session_id}").status_code == 404
        assert client.get("/sessions/").json() == []

    def test_list_by_day(self, client):
        log_session(client, "2024-07-01T13:00:00Z", "2024-07-01T14:00:00Z")
        log_session(client, "2024-07-01T22:00:00Z", "2024-07-02T06:00:00Z")
        log_session(client, "2024-07-02T09:00:00Z", "2024-07-02T10:00:00Z")

        day = client.get("/sessions/", params={"date": "2024-07-02"}).json()
        assert len(day) == 2
        assert len(client.get("/sessions/").json()) == 3

    def test_unknown_session(self, client):
        assert client.get("/sessions/nope").status_code == 404
        assert client.delete("/sessions/nope").status_code == 404


class TestSchedule:

    def test_requires_profile(self, client):
        assert client.get("/schedule/", params={"now": NOW}).status_code == 400
        assert client.get("/schedule/learner", params={"now": NOW}).status_code == 400

    def test_full_pipeline(self, client):
        create_profile(client)
        log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z")

        response = client.get("/schedule/", params={"now": NOW})
        assert response.status_code == 200
        body = response.json()

        learner = body["learner_state"]
        assert learner["ewma_nap_length_min"] == 90
        assert learner["ewma_wake_window_min"] == 135
        assert learner["confidence"] == 0.05

        kinds = {b["kind"] for b in body["blocks"]}
        assert {"nap", "bedtime", "windDown"} <= kinds
        first_nap = next(b for b in body["blocks"] if b["kind"] == "nap")
        assert isoparse(first_nap["start_at"]) == isoparse("2024-07-02T11:15:00Z")

        assert [i["id"] for i in body["insights"]] == ["coach_all_good"]
        assert body["notifications"]
        assert all(n["id"].startswith("notif_") for n in body["notifications"])

    def test_wake_offset_preview(self, client):
        create_profile(client)
        log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z")

        def first_nap(offset):
            blocks = client.get("/schedule/", params={"now": NOW, "wake_offset_min": offset}).json()["blocks"]
            return isoparse(next(b for b in blocks if b["kind"] == "nap")["start_at"])

        assert first_nap(30) - first_nap(0) == timedelta(minutes=30)

    def test_learner_state_is_cached(self, client):
        create_profile(client)
        assert client.get("/schedule/learner/cached").status_code == 404

        computed = client.get("/schedule/learner", params={"now": NOW}).json()
        cached = client.get("/schedule/learner/cached").json()
        assert cached["ewma_wake_window_min"] == computed["ewma_wake_window_min"]
        assert isoparse(cached["last_updated_at"]) == isoparse(NOW)

    def test_deleted_sessions_do_not_anchor(self, client):
        create_profile(client)
        log_session(client, "2024-07-02T06:30:00Z", "2024-07-02T07:30:00Z")
        late = log_session(client, "2024-07-02T07:30:00Z", "2024-07-02T09:00:00Z").json()
        client.delete(f"/sessions/{late['id']}")

        blocks = client.get("/schedule/", params={"now": NOW}).json()["blocks"]
        first_nap = next(b for b in blocks if b["kind"] == "nap")
        assert isoparse(first_nap["start_at"]) == isoparse("2024-07-02T09:45:00Z")
