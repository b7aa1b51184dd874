# backend/clinic_core/audit/tests/test_logs_api.py
import pytest

from clinic_core.audit.services import AuditService

pytestmark = pytest.mark.django_db


@pytest.fixture
def entries(admin_user, patient_user):
    AuditService.record(actor_id=patient_user.id, action="login")
    AuditService.record(actor_id=patient_user.id, action="create_appointment", affected_table="appointments_appointment")
    AuditService.record(actor_id=admin_user.id, action="update_user", affected_table="iam_user")
    AuditService.record(actor_id=None, action="login_failed")


def test_logs_list_is_paginated_newest_first(api_client, admin_user, entries):
    res = api_client(admin_user).get("/api/logs/")

    assert res.status_code == 200, res.data
    assert res.data["count"] == 4
    assert [r["action"] for r in res.data["results"]] == [
        "login_failed",
        "update_user",
        "create_appointment",
        "login",
    ]


def test_logs_list_filters(api_client, admin_user, patient_user, entries):
    res = api_client(admin_user).get("/api/logs/", {"actor_id": patient_user.id})
    assert res.status_code == 200, res.data
    assert {r["action"] for r in res.data["results"]} == {"login", "create_appointment"}

    res = api_client(admin_user).get("/api/logs/", {"affected_table": "iam_user"})
    assert [r["action"] for r in res.data["results"]] == ["update_user"]


def test_logs_by_user(api_client, admin_user, patient_user, entries):
    res = api_client(admin_user).get(f"/api/logs/user/{patient_user.id}/")

    assert res.status_code == 200, res.data
    assert res.data["count"] == 2
    assert all(r["actor_user_id"] == patient_user.id for r in res.data["results"])
    assert res.data["results"][0]["actor_email"] == patient_user.email


def test_logs_by_user_rejects_non_numeric_id(api_client, admin_user):
    res = api_client(admin_user).get("/api/logs/user/abc/")
    assert res.status_code == 400


def test_logs_by_action_allow_list(api_client, admin_user, entries):
    res = api_client(admin_user).get("/api/logs/action/login/")
    assert res.status_code == 200, res.data
    assert [r["action"] for r in res.data["results"]] == ["login"]

    res = api_client(admin_user).get("/api/logs/action/login_failed/")
    assert res.status_code == 400
    assert "Allowed values" in res.json()["message"]


def test_logs_by_action_respects_setting(api_client, admin_user, entries, settings):
    settings.AUDIT_FILTERABLE_ACTIONS = ["login_failed"]

    res = api_client(admin_user).get("/api/logs/action/login_failed/")
    assert res.status_code == 200
    assert res.data["count"] == 1


def test_logs_are_admin_only(api_client, specialist_user):
    res = api_client(specialist_user).get("/api/logs/")
    assert res.status_code == 403
