from fastapi.testclient import TestClient
from fitflow.db import SessionLocal
from fitflow.main import app
from fitflow.repositories.user_repo import UserRepository
import uuid

client = TestClient(app)
def email(): return f"{uuid.uuid4().hex[:10]}@ex.com"

def admin_headers():
    with SessionLocal() as db:
        admin = UserRepository(db).create(email=email(), name="Admin", role="admin")
        return {"X-User-ID": str(admin.id)}

def user_headers(role="user"):
    granted_by = admin_headers() if role != "user" else None
    u = client.post("/users", json={"email": email(), "name": "U", "role": role}, headers=granted_by).json()
    return {"X-User-ID": str(u["id"])}, u

def test_requires_identity():
    # no header / unknown user -> 401
    assert client.get("/sessions").status_code == 401
    assert client.post("/sessions", json={}).status_code == 401
    assert client.get("/sessions", headers={"X-User-ID": "999999"}).status_code == 401

def test_missing_rows_404():
    h, _ = user_headers()
    assert client.get("/sessions/999999", headers=h).status_code == 404
    assert client.post("/blocks/999999/complete", headers=h).status_code == 404
    assert client.post("/session-exercises/999999/skip", headers=h).status_code == 404
    assert client.patch("/sets/999999", headers=h, json={"actual_reps": 1}).status_code == 404
    r = client.post("/blocks", headers=h, json={"session_id": 999999})
    assert r.status_code == 404
    assert r.json()["detail"] == "Workout session not found"

def test_start_with_unknown_workout_404():
    h, _ = user_headers()
    r = client.post("/sessions", headers=h, json={"workout_id": 999999})
    assert r.status_code == 404
    assert r.json()["detail"] == "Workout not found"

def test_other_users_session_403():
    owner_h, _ = user_headers()
    stranger_h, _ = user_headers()
    sid = client.post("/sessions", headers=owner_h, json={}).json()["id"]
    assert client.get(f"/sessions/{sid}", headers=stranger_h).status_code == 403
    assert client.post("/blocks", headers=stranger_h, json={"session_id": sid}).status_code == 403
    block_id = client.post("/blocks", headers=owner_h, json={"session_id": sid}).json()["id"]
    assert client.post(f"/blocks/{block_id}/skip", headers=stranger_h).status_code == 403

def test_admin_can_read_any_session():
    owner_h, _ = user_headers()
    admin_h, _ = user_headers(role="admin")
    sid = client.post("/sessions", headers=owner_h, json={}).json()["id"]
    assert client.get(f"/sessions/{sid}", headers=admin_h).status_code == 200

def test_plain_user_cannot_log_for_someone_else():
    h, _ = user_headers()
    _, other = user_headers()
    r = client.post("/sessions", headers=h, json={"user_id": other["id"]})
    assert r.status_code == 403

def test_trainer_logging_for_unknown_user_404():
    h, _ = user_headers(role="trainer")
    assert client.post("/sessions", headers=h, json={"user_id": 999999}).status_code == 404

def test_cannot_start_from_someone_elses_workout():
    owner_h, _ = user_headers()
    stranger_h, _ = user_headers()
    wid = client.post("/workouts", headers=owner_h, json={"title": "Private"}).json()["id"]
    assert client.post("/sessions", headers=stranger_h, json={"workout_id": wid}).status_code == 403

def test_negative_weight_422():
    h, _ = user_headers()
    admin_h, _ = user_headers(role="admin")
    ex = client.post("/exercises", headers=admin_h, json={"name": f"Curl {uuid.uuid4().hex[:6]}"}).json()
    sid = client.post("/sessions", headers=h, json={}).json()["id"]
    bid = client.post("/blocks", headers=h, json={"session_id": sid}).json()["id"]
    seid = client.post("/session-exercises", headers=h,
                       json={"session_block_id": bid, "exercise_id": ex["id"]}).json()["id"]
    r = client.post("/sets", headers=h, json={"session_exercise_id": seid,
                                              "actual_weight": {"value": -5, "unit": "kg"}})
    assert r.status_code == 422

def test_intensity_out_of_range_422():
    h, _ = user_headers()
    sid = client.post("/sessions", headers=h, json={}).json()["id"]
    assert client.post(f"/sessions/{sid}/end", headers=h, json={"perceived_intensity": 11}).status_code == 422

def test_deleted_session_hides_children():
    h, _ = user_headers()
    sid = client.post("/sessions", headers=h, json={}).json()["id"]
    bid = client.post("/blocks", headers=h, json={"session_id": sid}).json()["id"]
    assert client.delete(f"/sessions/{sid}", headers=h).status_code == 204
    assert client.get(f"/blocks/{bid}", headers=h).status_code == 404
    assert client.delete(f"/sessions/{sid}", headers=h).status_code == 404

def test_foreign_prescription_cannot_be_attached():
    owner_h, _ = user_headers()
    other_h, _ = user_headers()
    admin_h, _ = user_headers(role="admin")
    ex = [client.post("/exercises", headers=admin_h, json={"name": f"{n} {uuid.uuid4().hex[:6]}"}).json()
          for n in ("Press", "Row")]
    wid = client.post("/workouts", headers=owner_h, json={"title": "Owner plan"}).json()["id"]
    g = client.post(f"/workouts/{wid}/prescriptions", headers=owner_h, json={
        "type": "superset", "group_order": 1, "group_name": "owner plan",
        "exercises": [
            {"exercise_id": ex[0]["id"], "exercise_order": 1, "reps": 5, "target_weight": {"value": 140, "unit": "kg"}},
            {"exercise_id": ex[1]["id"], "exercise_order": 2, "reps": 8},
        ],
    }).json()
    assert client.get(f"/workouts/{wid}/prescriptions", headers=other_h).status_code == 403

    sid = client.post("/sessions", headers=other_h, json={}).json()["id"]
    bid = client.post("/blocks", headers=other_h, json={"session_id": sid}).json()["id"]
    r = client.post("/session-exercises", headers=other_h, json={
        "session_block_id": bid, "exercise_id": ex[0]["id"], "prescription_id": g["exercises"][0]["id"],
    })
    assert r.status_code == 404
    assert r.json()["detail"] == "Prescription not found"
    block = client.get(f"/blocks/{bid}", headers=other_h).json()
    assert block["exercises"] == [] and block["group_name"] is None

    r = client.post("/blocks", headers=other_h, json={"session_id": sid, "group_id": g["group_id"]})
    assert r.status_code == 404
    assert r.json()["detail"] == "Prescription group not found in this workout"

def test_end_before_start_422():
    h, _ = user_headers()
    sid = client.post("/sessions", headers=h, json={"started_at": "2026-05-04T18:00:00Z"}).json()["id"]
    r = client.post(f"/sessions/{sid}/end", headers=h, json={"ended_at": "2026-05-04T17:00:00Z"})
    assert r.status_code == 422
    assert r.json()["field"] == "ended_at"
    assert client.get(f"/sessions/{sid}", headers=h).json()["duration_minutes"] is None
