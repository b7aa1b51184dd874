# backend/clinic_core/common/tests/test_policy.py
import pytest

from clinic_core.common.permissions import ROLE_ADMIN, ROLE_PATIENT, ROLE_SPECIALIST, ROLE_USER
from clinic_core.common.policy import (
    RESOURCE_APPOINTMENT,
    RESOURCE_AUDIT_LOG,
    RESOURCE_DOCUMENT,
    RESOURCE_HISTORY,
    RESOURCE_PATIENT,
    RESOURCE_SPECIALIST,
    RESOURCE_USER,
    Ownership,
    evaluate,
)

ADMIN = {ROLE_ADMIN}
SPECIALIST = {ROLE_SPECIALIST}
PATIENT = {ROLE_PATIENT}
USER = {ROLE_USER}


@pytest.mark.parametrize("resource", [RESOURCE_PATIENT, RESOURCE_SPECIALIST, RESOURCE_USER, RESOURCE_AUDIT_LOG])
@pytest.mark.parametrize("action", ["list", "read", "create", "update", "delete"])
def test_administration_resources_are_admin_only(resource, action):
    assert evaluate(ADMIN, resource, action)
    for roles in (SPECIALIST, PATIENT, USER, set()):
        assert not evaluate(roles, resource, action)


def test_unknown_rule_denies_with_reason():
    decision = evaluate(ADMIN, RESOURCE_APPOINTMENT, "archive")
    assert not decision
    assert "no rule" in decision.reason


def test_appointment_cancel_requires_linked_party():
    assert not evaluate(ADMIN, RESOURCE_APPOINTMENT, "cancel")
    assert not evaluate(SPECIALIST, RESOURCE_APPOINTMENT, "cancel", Ownership())
    assert evaluate(SPECIALIST, RESOURCE_APPOINTMENT, "cancel", Ownership(is_linked_specialist=True))
    assert evaluate(PATIENT, RESOURCE_APPOINTMENT, "cancel", Ownership(is_linked_patient=True))


def test_appointment_delete_is_admin_only():
    assert evaluate(ADMIN, RESOURCE_APPOINTMENT, "delete")
    assert not evaluate(SPECIALIST, RESOURCE_APPOINTMENT, "delete", Ownership(is_linked_specialist=True))


def test_appointment_reads_need_authentication():
    assert evaluate(USER, RESOURCE_APPOINTMENT, "list")
    assert not evaluate(set(), RESOURCE_APPOINTMENT, "list")


def test_document_read_visibility():
    assert evaluate(ADMIN, RESOURCE_DOCUMENT, "read")
    assert evaluate(PATIENT, RESOURCE_DOCUMENT, "read", Ownership(is_owner=True))
    assert not evaluate(PATIENT, RESOURCE_DOCUMENT, "read", Ownership())
    assert evaluate(SPECIALIST, RESOURCE_DOCUMENT, "read", Ownership(has_care_relationship=True))
    assert not evaluate(SPECIALIST, RESOURCE_DOCUMENT, "read", Ownership())
    # A patient with a "care relationship" fact is still not a specialist.
    assert not evaluate(PATIENT, RESOURCE_DOCUMENT, "read", Ownership(has_care_relationship=True))


def test_document_download_needs_active_care_or_ownership():
    assert evaluate(PATIENT, RESOURCE_DOCUMENT, "download", Ownership(is_owner=True))
    assert evaluate(SPECIALIST, RESOURCE_DOCUMENT, "download", Ownership(has_active_care_relationship=True))
    assert not evaluate(SPECIALIST, RESOURCE_DOCUMENT, "download", Ownership(has_care_relationship=True))
    assert not evaluate(ADMIN, RESOURCE_DOCUMENT, "download")


def test_document_delete_admin_or_owner():
    assert evaluate(ADMIN, RESOURCE_DOCUMENT, "delete")
    assert evaluate(USER, RESOURCE_DOCUMENT, "delete", Ownership(is_owner=True))
    assert not evaluate(SPECIALIST, RESOURCE_DOCUMENT, "delete", Ownership(has_active_care_relationship=True))


def test_history_rules():
    assert evaluate(ADMIN, RESOURCE_HISTORY, "list")
    assert not evaluate(SPECIALIST, RESOURCE_HISTORY, "list")

    assert evaluate(SPECIALIST, RESOURCE_HISTORY, "create")
    assert not evaluate(ADMIN, RESOURCE_HISTORY, "create")
    assert evaluate(SPECIALIST, RESOURCE_HISTORY, "update")
    assert evaluate(ADMIN, RESOURCE_HISTORY, "delete")
    assert not evaluate(SPECIALIST, RESOURCE_HISTORY, "delete")


def test_history_read_scoped_by_ownership():
    assert evaluate(ADMIN, RESOURCE_HISTORY, "read")
    assert evaluate(PATIENT, RESOURCE_HISTORY, "read", Ownership(is_linked_patient=True))
    assert not evaluate(PATIENT, RESOURCE_HISTORY, "read", Ownership())
    assert evaluate(SPECIALIST, RESOURCE_HISTORY, "read", Ownership(is_linked_specialist=True))
    assert evaluate(SPECIALIST, RESOURCE_HISTORY, "read", Ownership(has_care_relationship=True))
    assert not evaluate(SPECIALIST, RESOURCE_HISTORY, "read", Ownership())
    assert not evaluate(USER, RESOURCE_HISTORY, "read", Ownership(is_linked_patient=True))


def test_history_read_unscoped_is_role_only():
    for roles in (ADMIN, SPECIALIST, PATIENT):
        assert evaluate(roles, RESOURCE_HISTORY, "read_unscoped")
    assert not evaluate(USER, RESOURCE_HISTORY, "read_unscoped")


def test_multiple_roles_union():
    roles = {ROLE_PATIENT, ROLE_SPECIALIST}
    assert evaluate(roles, RESOURCE_DOCUMENT, "read", Ownership(has_care_relationship=True))
    assert evaluate(roles, RESOURCE_HISTORY, "create")
