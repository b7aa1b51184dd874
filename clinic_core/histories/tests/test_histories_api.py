# backend/clinic_core/histories/tests/test_histories_api.py
import pytest

from clinic_core.conftest import audit_actions
from clinic_core.histories.models import MedicalHistory

pytestmark = pytest.mark.django_db


@pytest.fixture
def history(patient, specialist):
    return MedicalHistory.objects.create(
        patient=patient,
        specialist=specialist,
        patient_comments="Headaches in the morning",
        diet="Low sodium",
    )


def test_specialist_creates_history_for_self_by_default(api_client, specialist_user, specialist, patient):
    res = api_client(specialist_user).post(
        "/api/histories/",
        {"patient_id": patient.id, "recommendations": "Walk daily"},
        format="json",
    )

    assert res.status_code == 201, res.data
    assert res.data["history"]["specialist_id"] == specialist.id
    assert res.data["history"]["recommendations"] == "Walk daily"
    assert res.data["history"]["diet"] == ""
    assert audit_actions(actor_user=specialist_user) == ["create_history"]


def test_create_without_specialist_profile_is_422(api_client, make_user, roles, patient):
    # Holds the role but has no specialist profile yet.
    bare = make_user("specialist")

    res = api_client(bare).post("/api/histories/", {"patient_id": patient.id}, format="json")

    assert res.status_code == 422
    assert "specialist_id" in res.json()["error"]["details"]
    assert not MedicalHistory.objects.exists()


def test_create_is_specialist_only(api_client, admin_user, patient):
    res = api_client(admin_user).post("/api/histories/", {"patient_id": patient.id}, format="json")

    assert res.status_code == 403
    assert audit_actions(actor_user=admin_user) == ["access_denied"]


def test_list_is_admin_only(api_client, admin_user, specialist_user, history):
    assert api_client(specialist_user).get("/api/histories/").status_code == 403

    res = api_client(admin_user).get("/api/histories/", {"patient_id": history.patient_id})
    assert res.status_code == 200
    assert [h["id"] for h in res.data["histories"]] == [history.id]

    bad = api_client(admin_user).get("/api/histories/", {"patient_id": "x"})
    assert bad.status_code == 400


def test_linked_patient_reads_own_history(api_client, patient_user, history):
    res = api_client(patient_user).get(f"/api/histories/{history.id}/")

    assert res.status_code == 200, res.data
    assert res.data["history"]["patient_comments"] == "Headaches in the morning"
    assert audit_actions(actor_user=patient_user) == ["view_history"]


def test_other_patient_cannot_read(api_client, other_patient_user, other_patient, history):
    res = api_client(other_patient_user).get(f"/api/histories/{history.id}/")

    assert res.status_code == 403
    assert audit_actions(actor_user=other_patient_user) == ["view_history_unauthorized"]


def test_specialist_with_care_relationship_reads(
    api_client, other_specialist_user, other_specialist, patient, history, make_appointment
):
    client = api_client(other_specialist_user)
    assert client.get(f"/api/histories/{history.id}/").status_code == 403

    make_appointment(patient=patient, specialist=other_specialist)
    assert client.get(f"/api/histories/{history.id}/").status_code == 200


def test_unscoped_read_when_strict_mode_is_off(api_client, other_patient_user, other_patient, history, settings):
    settings.HISTORY_STRICT_READ_ACCESS = False

    res = api_client(other_patient_user).get(f"/api/histories/{history.id}/")
    assert res.status_code == 200


def test_missing_history_is_404(api_client, admin_user):
    res = api_client(admin_user).get("/api/histories/321/")
    assert res.status_code == 404
    assert audit_actions(actor_user=admin_user) == ["view_history_failed"]


def test_update_history(api_client, specialist_user, history):
    res = api_client(specialist_user).patch(
        f"/api/histories/{history.id}/",
        {"diet": "Mediterranean", "shopping_list": "Olive oil"},
        format="json",
    )

    assert res.status_code == 200, res.data
    history.refresh_from_db()
    assert history.diet == "Mediterranean"
    assert history.shopping_list == "Olive oil"
    assert audit_actions(actor_user=specialist_user) == ["update_history"]


def test_update_missing_history(api_client, specialist_user):
    res = api_client(specialist_user).patch("/api/histories/999/", {"diet": "x"}, format="json")
    assert res.status_code == 404
    assert audit_actions(actor_user=specialist_user) == ["update_history_failed"]


def test_admin_soft_deletes_history(api_client, admin_user, history):
    res = api_client(admin_user).delete(f"/api/histories/{history.id}/")

    assert res.status_code == 200
    assert MedicalHistory.all_objects.get(id=history.id).deleted_at is not None
    assert api_client(admin_user).get(f"/api/histories/{history.id}/").status_code == 404
    assert audit_actions(actor_user=admin_user) == ["delete_history", "view_history_failed"]


def test_plain_user_is_blocked_at_the_route(api_client, make_user, history):
    u = make_user()
    assert api_client(u).get(f"/api/histories/{history.id}/").status_code == 403
