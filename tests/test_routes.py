"""
Tests for the HTTP API.

Auth guards are replaced through dependency_overrides and the database layer is
stubbed, so these exercise request handling, status codes and response shapes.
"""
from unittest.mock import AsyncMock

import pytest

from src.models.assessment import QUESTIONNAIRE_ITEMS
from src.services.prediction_service import PredictionService
from src.services.profile_service import ProfileService

from conftest import ADMIN_ID, USER_ID

VALID = {"age": 5, "gender": "M", "responses": ["often"] * 6 + ["never"] * 4}


def _history_entry(n):
    return {
        "id": f"old-{n}",
        "timestamp": "2025-11-01T10:00:00+00:00",
        "age": 4,
        "gender": "F",
        "totalScore": 10,
        "result": {"riskLevel": "Low"},
    }


# ── Public endpoints ──────────────────────────────────────────────────


def test_healthcheck(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["scoring"] == "ok"
    assert body["database"] in ("ok", "not_configured")


def test_get_questionnaire(client):
    body = client.get("/getQuestionnaire").json()

    assert [q["text"] for q in body["questions"]] == list(QUESTIONNAIRE_ITEMS)
    assert body["questions"][0]["id"] == "q1"
    assert body["responses"][-1] == {"value": "always", "score": 4}
    assert body["age_range"] == {"min": 2, "max": 14}
    assert body["genders"] == ["M", "F"]


def test_score_assessment(client):
    response = client.post("/scoreAssessment", json=VALID)

    assert response.status_code == 200
    body = response.json()
    assert body["result"]["totalScore"] == 18
    assert body["result"]["riskLevel"] == "Medium"
    assert len(body["result"]["scoreBreakdown"]) == 10
    assert body["history"][0]["id"] == body["session_id"]
    assert body["history"][0]["totalScore"] == 18


def test_score_assessment_pushes_onto_capped_history(client):
    payload = dict(VALID, history=[_history_entry(n) for n in range(10)])
    body = client.post("/scoreAssessment", json=payload).json()

    assert len(body["history"]) == 10
    assert body["history"][0]["id"] == body["session_id"]
    assert body["history"][1]["id"] == "old-0"
    assert body["history"][-1]["id"] == "old-8"


@pytest.mark.parametrize("payload", [
    dict(VALID, responses=["often"] * 9),
    dict(VALID, responses=["often"] * 9 + ["maybe"]),
    dict(VALID, age=15),
    dict(VALID, gender="X"),
    dict(VALID, responses=[3] * 10),
    dict(VALID, age="5"),
    dict(VALID, age=5.0),
    dict(VALID, age=True),
    dict(VALID, gender=1),
])
def test_score_assessment_invalid_input(client, payload):
    response = client.post("/scoreAssessment", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"]


def test_score_assessment_missing_fields(client):
    response = client.post("/scoreAssessment", json={"age": 5})
    assert response.status_code == 422


def test_update_history_deletes_one_session(client):
    history = [_history_entry(n) for n in range(3)]

    response = client.post("/updateHistory", json={"history": history, "session_id": "old-1"})

    assert response.status_code == 200
    assert [entry["id"] for entry in response.json()["history"]] == ["old-0", "old-2"]
    assert response.json()["history"][0] == history[0]


def test_update_history_unknown_id_keeps_everything(client):
    history = [_history_entry(n) for n in range(2)]
    body = client.post("/updateHistory", json={"history": history, "session_id": "nope"}).json()
    assert [entry["id"] for entry in body["history"]] == ["old-0", "old-1"]


def test_update_history_clears(client):
    history = [_history_entry(n) for n in range(4)]
    body = client.post("/updateHistory", json={"history": history, "clear": True}).json()
    assert body["history"] == []


def test_update_history_needs_an_action(client):
    response = client.post("/updateHistory", json={"history": [_history_entry(0)]})
    assert response.status_code == 400


# ── Authenticated endpoints ───────────────────────────────────────────


def test_send_assessment_requires_token(client):
    response = client.post("/sendAssessment", json=VALID)
    assert response.status_code == 401


def test_send_assessment_stores_result(client, as_user, db_available, monkeypatch):
    save = AsyncMock(return_value="2c1d0e9f-1111-4a2b-9c3d-444455556666")
    monkeypatch.setattr(PredictionService, "save_prediction", save)

    response = client.post("/sendAssessment", json=VALID)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "2c1d0e9f-1111-4a2b-9c3d-444455556666"
    assert body["history"][0]["id"] == body["id"]
    assert body["result"]["riskLevel"] == "Medium"

    _, user_id, assessment, result = save.await_args.args
    assert user_id == USER_ID
    assert assessment.age == 5
    assert result.total_score == 18


def test_send_assessment_invalid_input_is_not_stored(client, as_user, db_available, monkeypatch):
    save = AsyncMock()
    monkeypatch.setattr(PredictionService, "save_prediction", save)

    response = client.post("/sendAssessment", json=dict(VALID, age=1))

    assert response.status_code == 400
    save.assert_not_awaited()


def test_send_assessment_storage_failure(client, as_user, db_available, monkeypatch):
    monkeypatch.setattr(PredictionService, "save_prediction", AsyncMock(side_effect=RuntimeError("boom")))

    response = client.post("/sendAssessment", json=VALID)

    assert response.status_code == 500
    assert response.json() == {"status": "error", "detail": "boom", "error_type": "RuntimeError"}


def test_send_assessment_without_database(client, as_user, db_missing):
    response = client.post("/sendAssessment", json=VALID)
    assert response.status_code == 503


def test_prediction_history(client, as_user, db_available, monkeypatch):
    rows = [{
        "id": "row-1", "created_at": "2025-11-20T09:00:00+00:00", "age": 6, "gender": "F",
        "total_score": 14, "risk_level": "Low", "confidence": 0.8, "risk_percentage": 30.0,
        "recommendation": "text", "prediction_result": {"totalScore": 14, "riskLevel": "Low"},
    }]
    list_for_user = AsyncMock(return_value=rows)
    monkeypatch.setattr(PredictionService, "list_for_user", list_for_user)

    response = client.get("/getPredictionHistory", params={"limit": 5})

    assert response.status_code == 200
    assert response.json()["history"] == [{
        "id": "row-1",
        "timestamp": "2025-11-20T09:00:00+00:00",
        "age": 6,
        "gender": "F",
        "totalScore": 14,
        "result": {"totalScore": 14, "riskLevel": "Low"},
    }]
    assert list_for_user.await_args.args[1:] == (USER_ID, 5)


def test_prediction_history_rejects_bad_limit(client, as_user, db_available):
    assert client.get("/getPredictionHistory", params={"limit": 0}).status_code == 400


def test_my_profile(client, as_user, db_available, monkeypatch):
    profile = {"id": USER_ID, "email": "parent@example.com", "approval_status": "approved"}
    monkeypatch.setattr(ProfileService, "get_profile", AsyncMock(return_value=profile))
    monkeypatch.setattr(ProfileService, "is_admin", AsyncMock(return_value=False))

    body = client.get("/profiles/me").json()

    assert body["profile"] == profile
    assert body["is_admin"] is False
    assert body["is_approved"] is True


# ── Admin endpoints ───────────────────────────────────────────────────


def test_admin_endpoints_require_token(client):
    assert client.get("/admin/profiles").status_code == 401


def test_admin_list_profiles(client, as_admin, db_available, monkeypatch):
    list_profiles = AsyncMock(return_value=[{"id": USER_ID, "approval_status": "pending"}])
    monkeypatch.setattr(ProfileService, "list_profiles", list_profiles)

    response = client.get("/admin/profiles", params={"status": "Pending"})

    assert response.status_code == 200
    assert response.json()["filter"] == "pending"
    assert list_profiles.await_args.args[1] == "pending"


def test_admin_list_profiles_bad_filter(client, as_admin, db_available):
    assert client.get("/admin/profiles", params={"status": "banned"}).status_code == 400


def test_admin_approve_user(client, as_admin, db_available, monkeypatch):
    updated = {"id": USER_ID, "approval_status": "approved", "approved_by": ADMIN_ID}
    set_status = AsyncMock(return_value=updated)
    monkeypatch.setattr(ProfileService, "set_approval_status", set_status)

    response = client.post(f"/admin/profiles/{USER_ID}/approval", json={"status": "approved"})

    assert response.status_code == 200
    assert response.json()["profile"] == updated
    assert set_status.await_args.args[1:] == (USER_ID, "approved", ADMIN_ID)


def test_admin_reject_unknown_user(client, as_admin, db_available, monkeypatch):
    monkeypatch.setattr(ProfileService, "set_approval_status", AsyncMock(return_value=None))

    response = client.post(f"/admin/profiles/{USER_ID}/approval", json={"status": "rejected"})
    assert response.status_code == 404


def test_admin_approval_status_must_be_decision(client, as_admin, db_available):
    response = client.post(f"/admin/profiles/{USER_ID}/approval", json={"status": "pending"})
    assert response.status_code == 422


def test_admin_list_predictions(client, as_admin, db_available, monkeypatch):
    predictions = [{"id": "p1", "profiles": {"email": "Unknown", "full_name": None}}]
    monkeypatch.setattr(PredictionService, "list_all", AsyncMock(return_value=predictions))

    body = client.get("/admin/predictions").json()
    assert body["predictions"] == predictions
