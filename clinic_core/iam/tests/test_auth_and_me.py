# backend/clinic_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient

from clinic_core.conftest import audit_actions
from clinic_core.iam.models import SessionToken

pytestmark = pytest.mark.django_db


def _login(email, password="pass12345"):
    return APIClient().post("/api/login/", {"email": email, "password": password}, format="json")


def _bearer(token):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return c


def test_login_returns_token_and_actor(specialist_user):
    res = _login(specialist_user.email)

    assert res.status_code == 200, res.data
    body = res.json()
    assert body["token_type"] == "Bearer"
    assert body["access_token"]
    assert body["user"]["id"] == specialist_user.id
    assert body["user"]["role"] == "specialist"
    assert body["user"]["roles"] == ["specialist"]

    assert SessionToken.objects.filter(user=specialist_user).count() == 1
    assert audit_actions(actor_user=specialist_user) == ["login"]


def test_login_wrong_password_is_401_and_audited_anonymously(patient_user):
    res = _login(patient_user.email, password="wrong-password")

    assert res.status_code == 401
    assert res.json() == {"message": "Invalid credentials"}
    assert audit_actions(actor_user__isnull=True) == ["login_failed"]
    assert not SessionToken.objects.exists()


def test_login_missing_fields_is_422_without_audit():
    res = APIClient().post("/api/login/", {"email": "x@clinic.test"}, format="json")

    assert res.status_code == 422
    assert "password" in res.json()["error"]["details"]
    assert audit_actions() == []


def test_login_rejects_soft_deleted_user(api_client, admin_user, patient_user):
    api_client(admin_user).delete(f"/api/users/{patient_user.id}/")

    res = _login(patient_user.email)
    assert res.status_code == 401


def test_me_with_bearer_token(patient_user):
    token = _login(patient_user.email).json()["access_token"]

    res = _bearer(token).get("/api/me/")
    assert res.status_code == 200, res.data
    assert res.json()["user"]["email"] == patient_user.email
    assert audit_actions(actor_user=patient_user) == ["login", "view_me"]

    assert SessionToken.objects.get(user=patient_user).last_used_at is not None


def test_user_without_groups_is_plain_user(make_user):
    u = make_user()
    token = _login(u.email).json()["access_token"]

    res = _bearer(token).get("/api/me/")
    assert res.json()["user"]["role"] == "user"


def test_logout_revokes_every_token(patient_user):
    first = _login(patient_user.email).json()["access_token"]
    second = _login(patient_user.email).json()["access_token"]
    assert SessionToken.objects.filter(user=patient_user).count() == 2

    res = _bearer(first).post("/api/logout/")
    assert res.status_code == 200
    assert res.json()["message"] == "Logged out successfully"
    assert not SessionToken.objects.filter(user=patient_user).exists()

    for token in (first, second):
        assert _bearer(token).get("/api/me/").status_code == 401

    assert audit_actions(actor_user=patient_user) == ["login", "login", "logout"]


def test_logout_requires_authentication():
    res = APIClient().post("/api/logout/")
    assert res.status_code == 401
    assert audit_actions() == ["unauthenticated_access"]


def test_login_ignores_stale_authorization_header(patient_user):
    c = _bearer("stale.token.value")
    res = c.post("/api/login/", {"email": patient_user.email, "password": "pass12345"}, format="json")
    assert res.status_code == 200
