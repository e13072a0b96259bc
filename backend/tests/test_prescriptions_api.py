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

def coach_with_workout():
    u = client.post("/users", json={"email": email(), "name": "Coach", "role": "trainer"},
                    headers=admin_headers()).json()
    h = {"X-User-ID": str(u["id"])}
    ex = [client.post("/exercises", headers=h, json={"name": f"{n} {uuid.uuid4().hex[:6]}"}).json()
          for n in ("Press", "Hold", "Pull")]
    w = client.post("/workouts", headers=h, json={"title": "Plan"}).json()
    return h, w["id"], ex

def group(exercise_id, order, **kw):
    body = {"type": "straight", "group_order": order,
            "exercises": [{"exercise_id": exercise_id, "exercise_order": 1, "reps": 5}]}
    body.update(kw)
    return body

def test_superset_and_ambiguous_exercise():
    h, wid, ex = coach_with_workout()
    r = client.post(f"/workouts/{wid}/prescriptions", headers=h, json={
        "type": "superset", "group_order": 1,
        "exercises": [
            {"exercise_id": ex[0]["id"], "exercise_order": 1, "reps": 10},
            {"exercise_id": ex[1]["id"], "exercise_order": 2, "hold_seconds": 30},
        ],
    })
    assert r.status_code == 201
    g = r.json()
    assert [e["exercise_order"] for e in g["exercises"]] == [1, 2]
    assert g["exercises"][1]["exercise"]["id"] == ex[1]["id"]

    r = client.post(f"/workouts/{wid}/prescriptions/{g['group_id']}/exercises", headers=h,
                    json={"exercise_id": ex[2]["id"], "reps": 10, "hold_seconds": 5})
    assert r.status_code == 422
    assert r.json()["field"] == "prescription"

    r = client.post(f"/workouts/{wid}/prescriptions/{g['group_id']}/exercises", headers=h,
                    json={"exercise_id": ex[2]["id"], "reps": 10})
    assert r.status_code == 201
    assert [e["exercise_order"] for e in r.json()["exercises"]] == [1, 2, 3]

def test_domain_validation_maps_to_422():
    h, wid, ex = coach_with_workout()
    r = client.post(f"/workouts/{wid}/prescriptions", headers=h, json=group(ex[0]["id"], 1, type="yoga"))
    assert r.status_code == 422 and r.json()["field"] == "type"
    r = client.post(f"/workouts/{wid}/prescriptions", headers=h, json=group(ex[0]["id"], 0))
    assert r.status_code == 422
    r = client.post(f"/workouts/{wid}/prescriptions", headers=h, json=group(ex[0]["id"], 1, exercises=[]))
    assert r.status_code == 422 and r.json()["field"] == "exercises"
    assert client.get(f"/workouts/{wid}/prescriptions", headers=h).json() == []

def test_continuity_conflict_then_reorder():
    h, wid, ex = coach_with_workout()
    ids = [client.post(f"/workouts/{wid}/prescriptions", headers=h, json=group(ex[0]["id"], n)).json()["group_id"]
           for n in (1, 2, 4)]
    r = client.get(f"/workouts/{wid}/prescriptions/continuity", headers=h)
    assert r.status_code == 409
    assert r.json()["problems"]

    r = client.put(f"/workouts/{wid}/prescriptions/order", headers=h, json={"group_ids": [ids[2], ids[0], ids[1]]})
    assert r.status_code == 200
    assert [g["group_id"] for g in r.json()] == [ids[2], ids[0], ids[1]]
    assert [g["group_order"] for g in r.json()] == [1, 2, 3]
    assert client.get(f"/workouts/{wid}/prescriptions/continuity", headers=h).json() == {"ok": True}

    r = client.put(f"/workouts/{wid}/prescriptions/order", headers=h, json={"group_ids": [str(uuid.uuid4())]})
    assert r.status_code == 404

def test_update_delete_and_remove_exercise():
    h, wid, ex = coach_with_workout()
    g = client.post(f"/workouts/{wid}/prescriptions", headers=h, json={
        "type": "circuit", "group_order": 1,
        "exercises": [{"exercise_id": e["id"], "exercise_order": n, "reps": 10} for n, e in enumerate(ex, start=1)],
    }).json()
    gid = g["group_id"]

    r = client.patch(f"/workouts/{wid}/prescriptions/{gid}", headers=h, json={"group_rounds": 4, "group_name": "Finisher"})
    assert r.status_code == 200
    assert r.json()["group_rounds"] == 4 and r.json()["group_name"] == "Finisher"
    assert r.json()["type"] == "circuit"

    middle = g["exercises"][1]["id"]
    assert client.delete(f"/workouts/{wid}/prescriptions/exercises/{middle}", headers=h).status_code == 204
    r = client.get(f"/workouts/{wid}/prescriptions/{gid}", headers=h)
    assert [e["exercise_order"] for e in r.json()["exercises"]] == [1, 2]

    assert client.delete(f"/workouts/{wid}/prescriptions/{gid}", headers=h).status_code == 204
    assert client.get(f"/workouts/{wid}/prescriptions/{gid}", headers=h).status_code == 404

def test_target_weight_in_callers_unit():
    h, wid, ex = coach_with_workout()
    body = group(ex[0]["id"], 1)
    body["exercises"][0]["target_weight"] = {"value": 135, "unit": "lbs"}
    client.post(f"/workouts/{wid}/prescriptions", headers=h, json=body)
    groups = client.get(f"/workouts/{wid}/prescriptions", headers=h, params={"unit": "kg"}).json()
    assert groups[0]["exercises"][0]["target_weight"] == {"value": 61.23, "unit": "kg"}

def test_only_owner_sees_prescriptions():
    h, wid, ex = coach_with_workout()
    other = client.post("/users", json={"email": email(), "name": "Other"}).json()
    r = client.get(f"/workouts/{wid}/prescriptions", headers={"X-User-ID": str(other["id"])})
    assert r.status_code == 403
    assert client.get("/workouts/999999/prescriptions", headers=h).status_code == 404

def test_plain_user_cannot_add_catalog_exercise():
    u = client.post("/users", json={"email": email(), "name": "U"}).json()
    r = client.post("/exercises", headers={"X-User-ID": str(u["id"])}, json={"name": "Anything"})
    assert r.status_code == 403
