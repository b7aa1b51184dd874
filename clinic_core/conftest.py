# backend/clinic_core/conftest.py
from datetime import date, timedelta

import pytest
from django.contrib.auth.models import Group
from django.utils import timezone
from rest_framework.test import APIClient

from clinic_core.appointments.models import Appointment, AppointmentStatus, AppointmentType
from clinic_core.audit.models import AuditEntry
from clinic_core.common.permissions import ROLE_ADMIN, ROLE_PATIENT, ROLE_PRECEDENCE, ROLE_SPECIALIST
from clinic_core.iam.models import User
from clinic_core.patients.models import Patient
from clinic_core.specialists.models import Specialist


def audit_actions(**filters) -> list[str]:
    """Action codes written so far, oldest first."""
    return list(AuditEntry.objects.filter(**filters).order_by("id").values_list("action", flat=True))


@pytest.fixture
def roles(db):
    return {name: Group.objects.get_or_create(name=name)[0] for name in ROLE_PRECEDENCE}


@pytest.fixture
def make_user(roles):
    counter = {"n": 0}

    def _make(role: str | None = None, *, email: str | None = None, password: str = "pass12345", **extra):
        counter["n"] += 1
        user = User.objects.create_user(
            email=email or f"user{counter['n']}@clinic.test",
            password=password,
            name=extra.pop("name", f"User {counter['n']}"),
            surnames=extra.pop("surnames", "Tester"),
            **extra,
        )
        if role:
            user.groups.add(roles[role])
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(ROLE_ADMIN, email="admin@clinic.test")


@pytest.fixture
def specialist_user(make_user):
    return make_user(ROLE_SPECIALIST, email="doctor@clinic.test")


@pytest.fixture
def other_specialist_user(make_user):
    return make_user(ROLE_SPECIALIST, email="doctor2@clinic.test")


@pytest.fixture
def patient_user(make_user):
    return make_user(ROLE_PATIENT, email="patient@clinic.test")


@pytest.fixture
def other_patient_user(make_user):
    return make_user(ROLE_PATIENT, email="patient2@clinic.test")


@pytest.fixture
def specialist(specialist_user):
    return Specialist.objects.create(user=specialist_user, specialty="Cardiology", phone="600000001")


@pytest.fixture
def other_specialist(other_specialist_user):
    return Specialist.objects.create(user=other_specialist_user, specialty="Dermatology")


@pytest.fixture
def patient(patient_user):
    return Patient.objects.create(
        user=patient_user,
        medical_record_number="MRN-0001",
        admission_date=date.today() - timedelta(days=30),
    )


@pytest.fixture
def other_patient(other_patient_user):
    return Patient.objects.create(
        user=other_patient_user,
        medical_record_number="MRN-0002",
        admission_date=date.today() - timedelta(days=10),
    )


@pytest.fixture
def make_appointment(patient, specialist):
    def _make(*, patient=patient, specialist=specialist, status=AppointmentStatus.PENDING, days_ahead=7):
        return Appointment.objects.create(
            patient=patient,
            specialist=specialist,
            scheduled_at=timezone.now() + timedelta(days=days_ahead),
            type=AppointmentType.IN_PERSON,
            status=status,
        )

    return _make


@pytest.fixture
def appointment(make_appointment):
    return make_appointment()


@pytest.fixture
def api_client():
    """
    api_client(user) -> APIClient authenticated as `user`;
    api_client() -> anonymous client.
    """
    def _client(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c

    return _client


@pytest.fixture
def document_storage(settings, tmp_path):
    """Points the "documents" storage at a per-test directory."""
    storages = dict(settings.STORAGES)
    storages["documents"] = {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
        "OPTIONS": {"location": str(tmp_path / "private")},
    }
    settings.STORAGES = storages
    return tmp_path / "private"
