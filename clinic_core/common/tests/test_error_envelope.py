# backend/clinic_core/common/tests/test_error_envelope.py
import pytest

from clinic_core.common.api.exceptions import BadRequest
from clinic_core.common.api.params import parse_positive_int
from clinic_core.conftest import audit_actions

pytestmark = pytest.mark.django_db


def test_anonymous_request_is_401_with_envelope_and_audited(api_client):
    res = api_client().get("/api/appointments/")

    assert res.status_code == 401
    body = res.json()
    assert body["error"]["code"] == "not_authenticated"
    assert body["message"] == body["error"]["message"]
    assert body["error"]["request_id"]
    assert audit_actions(actor_user__isnull=True) == ["unauthenticated_access"]


def test_garbage_bearer_token_is_401(api_client):
    c = api_client()
    c.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

    res = c.get("/api/me/")
    assert res.status_code == 401
    assert audit_actions() == ["unauthenticated_access"]


def test_route_gate_denial_is_403_and_audited(api_client, patient_user):
    res = api_client(patient_user).get("/api/users/")

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"
    assert audit_actions(actor_user=patient_user) == ["access_denied"]


def test_validation_error_is_422_with_field_details(api_client, admin_user):
    res = api_client(admin_user).post("/api/users/", {"email": "nope"}, format="json")

    assert res.status_code == 422
    body = res.json()
    assert body["error"]["code"] == "validation_error"
    assert "email" in body["error"]["details"]
    assert "name" in body["error"]["details"]
    # Body validation leaves no trace in the audit log.
    assert audit_actions() == []


def test_malformed_path_id_is_400(api_client, admin_user):
    res = api_client(admin_user).get("/api/v1/users/abc/")

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "bad_request"


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5", "", None, "²"])
def test_parse_positive_int_rejects(raw):
    with pytest.raises(BadRequest):
        parse_positive_int(raw)


def test_parse_positive_int_accepts():
    assert parse_positive_int(" 42 ") == 42
