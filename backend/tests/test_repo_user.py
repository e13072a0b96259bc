from fitflow.db import SessionLocal
from fitflow.errors import UserNotFound
from fitflow.repositories.user_repo import EmailAlreadyExists, UserRepository
import uuid, pytest

def test_user_repo_create_and_get():
    db = SessionLocal()
    repo = UserRepository(db)
    email = f"{uuid.uuid4().hex[:8]}@ex.com"
    u = repo.create(email=email, name="Repo", preferred_weight_unit="lbs")
    assert u.id and u.email == email
    assert u.preferred_weight_unit == "lb"
    assert repo.get(u.id).email == email
    assert repo.get_by_email(email.upper()).id == u.id
    db.close()

def test_user_repo_unique_email_violation():
    db = SessionLocal()
    repo = UserRepository(db)
    email = f"{uuid.uuid4().hex[:8]}@ex.com"
    repo.create(email=email, name="A")
    with pytest.raises(EmailAlreadyExists):
        repo.create(email=email, name="B")
    db.close()

def test_set_weight_unit():
    db = SessionLocal()
    repo = UserRepository(db)
    u = repo.create(email=f"{uuid.uuid4().hex[:8]}@ex.com", name="Unit")
    assert u.preferred_weight_unit == "kg"
    assert repo.set_weight_unit(u.id, unit="LB").preferred_weight_unit == "lb"
    with pytest.raises(UserNotFound):
        repo.set_weight_unit(999999, unit="kg")
    db.close()
