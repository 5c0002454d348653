from datetime import timedelta

from auditforms.services.access import can_manage_form, can_view_submission, submission_filter
from auditforms.utils.auth import create_access_token

OWNER = {"sub": "u1", "role": "USER"}
OTHER = {"sub": "u2", "role": "USER"}
ADMIN = {"sub": "u3", "role": "ADMIN"}
FORM = {"_id": "f1", "createdById": "u1"}


def test_form_management():
    assert can_manage_form(OWNER, FORM)
    assert can_manage_form(ADMIN, FORM)
    assert not can_manage_form(OTHER, FORM)
    assert not can_manage_form(OTHER, {"_id": "f2"})


def test_submission_visibility():
    submission = {"form_id": "f1", "user_id": "u2"}
    assert can_view_submission(OTHER, submission, FORM)
    assert can_view_submission(OWNER, submission, FORM)
    assert can_view_submission(ADMIN, submission, None)
    assert not can_view_submission({"sub": "u4"}, submission, FORM)
    assert not can_view_submission(OWNER, {"form_id": "f1", "user_id": None}, None)


def test_submission_filters():
    assert submission_filter(ADMIN, None, []) == {}
    assert submission_filter(ADMIN, "f9", []) == {"form_id": "f9"}
    assert submission_filter(OWNER, "f1", ["f1"]) == {"form_id": "f1"}
    assert submission_filter(OTHER, "f1", []) == {"form_id": "f1", "user_id": "u2"}
    assert submission_filter(OWNER, None, ["f1"]) == {
        "$or": [{"user_id": "u1"}, {"form_id": {"$in": ["f1"]}}]
    }


def test_me(client):
    token = create_access_token({"sub": "u1", "email": "a@b.c", "name": "A", "role": "ADMIN"})
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "u1"
    assert body["role"] == "ADMIN"
    assert body["iat"] < body["exp"]


def test_default_role_is_user(client):
    token = create_access_token({"sub": "u1"})
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["role"] == "USER"


def test_bad_tokens(client):
    expired = create_access_token({"sub": "u1"}, expires_delta=timedelta(minutes=-5))
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    no_subject = create_access_token({"email": "a@b.c"})
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {no_subject}"}).status_code == 401
    assert client.get("/api/auth/me").status_code in (401, 403)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "running"
