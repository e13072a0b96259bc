from fastapi.testclient import TestClient
from fitflow.db import SessionLocal
from fitflow.main import app
from fitflow.repositories.user_repo import UserRepository
import uuid

client = TestClient(app)
def uniq(): return f"{uuid.uuid4().hex[:8]}@ex.com"

def make_admin():
    with SessionLocal() as db:
        admin = UserRepository(db).create(email=uniq(), name="A", role="admin")
        return {"id": admin.id}

def test_create_duplicate_email_400():
    e = uniq()
    assert client.post("/users", json={"email": e, "name": "A"}).status_code == 201
    assert client.post("/users", json={"email": e, "name": "B"}).status_code == 400

def test_me_and_preferences():
    u = client.post("/users", json={"email": uniq(), "name": "Me"}).json()
    h = {"X-User-ID": str(u["id"])}
    assert client.get("/users/me", headers=h).json()["preferred_weight_unit"] == "kg"
    r = client.patch("/users/me/preferences", headers=h, json={"preferred_weight_unit": "lb"})
    assert r.status_code == 200 and r.json()["preferred_weight_unit"] == "lb"
    assert client.patch("/users/me/preferences", headers=h, json={"preferred_weight_unit": "stone"}).status_code == 422

def test_owner_or_admin_access():
    owner = client.post("/users", json={"email": uniq(), "name": "O"}).json()
    other = client.post("/users", json={"email": uniq(), "name": "X"}).json()
    admin = make_admin()

    assert client.get(f"/users/{owner['id']}", headers={"X-User-ID": str(owner["id"])}).status_code == 200
    assert client.get(f"/users/{owner['id']}", headers={"X-User-ID": str(other["id"])}).status_code == 403
    assert client.get(f"/users/{owner['id']}", headers={"X-User-ID": str(admin["id"])}).status_code == 200

    assert client.get("/users", headers={"X-User-ID": str(owner["id"])}).status_code == 403
    assert client.get("/users", headers={"X-User-ID": str(admin["id"])}).status_code == 200

def test_self_signup_cannot_pick_a_role():
    assert client.post("/users", json={"email": uniq(), "name": "Eve", "role": "admin"}).status_code == 403
    assert client.post("/users", json={"email": uniq(), "name": "Eve", "role": "trainer"}).status_code == 403
    r = client.post("/users", json={"email": uniq(), "name": "Eve", "role": "user"})
    assert r.status_code == 201 and r.json()["role"] == "user"

def test_only_admin_grants_roles():
    admin_h = {"X-User-ID": str(make_admin()["id"])}
    coach = client.post("/users", headers=admin_h, json={"email": uniq(), "name": "C", "role": "trainer"}).json()
    assert coach["role"] == "trainer"
    r = client.post("/users", headers={"X-User-ID": str(coach["id"])},
                    json={"email": uniq(), "name": "D", "role": "admin"})
    assert r.status_code == 403
