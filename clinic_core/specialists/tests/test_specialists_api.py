# backend/clinic_core/specialists/tests/test_specialists_api.py
import pytest
from django.db import DatabaseError

from clinic_core.conftest import audit_actions
from clinic_core.iam.models import User
from clinic_core.specialists.models import Specialist

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "name": "Marta",
    "surnames": "López",
    "email": "marta@clinic.test",
    "password": "secret12",
    "password_confirmation": "secret12",
    "specialty": "Nutrition",
    "phone": "600111222",
}


def test_create_specialist(api_client, admin_user):
    res = api_client(admin_user).post("/api/specialists/", PAYLOAD, format="json")

    assert res.status_code == 201, res.data
    assert res.data["specialist"]["specialty"] == "Nutrition"

    user = User.objects.get(email="marta@clinic.test")
    assert user.groups.filter(name="specialist").exists()
    assert user.specialist_profile.phone == "600111222"
    assert audit_actions(actor_user=admin_user) == ["create_specialist"]


def test_password_confirmation_must_match(api_client, admin_user):
    res = api_client(admin_user).post(
        "/api/specialists/",
        {**PAYLOAD, "password_confirmation": "other123"},
        format="json",
    )

    assert res.status_code == 422
    assert "password" in res.json()["error"]["details"]
    assert not User.objects.filter(email="marta@clinic.test").exists()


def test_create_specialist_rolls_back_user(api_client, admin_user, monkeypatch):
    def boom(*args, **kwargs):
        raise DatabaseError("insert failed")

    monkeypatch.setattr(Specialist.objects, "create", boom)

    res = api_client(admin_user).post("/api/specialists/", PAYLOAD, format="json")

    assert res.status_code == 500
    assert not User.objects.filter(email="marta@clinic.test").exists()
    assert audit_actions(actor_user=admin_user) == ["create_specialist_error"]


def test_list_search(api_client, admin_user, specialist, other_specialist):
    res = api_client(admin_user).get("/api/specialists/", {"q": "derma"})

    assert res.status_code == 200
    assert [s["id"] for s in res.data["specialists"]] == [other_specialist.id]


def test_update_specialist_and_user_fields(api_client, admin_user, specialist):
    res = api_client(admin_user).patch(
        f"/api/specialists/{specialist.id}/",
        {"name": "Dr. House", "specialty": "Diagnostics"},
        format="json",
    )

    assert res.status_code == 200, res.data
    specialist.refresh_from_db()
    assert specialist.specialty == "Diagnostics"
    assert specialist.user.name == "Dr. House"
    assert audit_actions(actor_user=admin_user) == ["update_specialist"]


def test_delete_specialist(api_client, admin_user, specialist):
    res = api_client(admin_user).delete(f"/api/specialists/{specialist.id}/")

    assert res.status_code == 200
    assert Specialist.all_objects.get(id=specialist.id).deleted_at is not None
    assert api_client(admin_user).get(f"/api/specialists/{specialist.id}/").status_code == 404
    assert audit_actions(actor_user=admin_user) == ["delete_specialist", "view_specialist_failed"]


def test_specialists_are_admin_only(api_client, patient_user):
    res = api_client(patient_user).post("/api/specialists/", PAYLOAD, format="json")
    assert res.status_code == 403
    assert not User.objects.filter(email="marta@clinic.test").exists()
