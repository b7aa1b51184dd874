# backend/clinic_core/patients/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from clinic_core.patients.models import Patient


def list_patients() -> QuerySet[Patient]:
    return Patient.objects.select_related("user").order_by("id")


def get_patient(patient_id: int) -> Patient | None:
    return Patient.objects.select_related("user").filter(id=patient_id).first()


def patient_id_for_user(user_id: int) -> int | None:
    """Profile id of a user, deleted profiles included (history joins)."""
    return Patient.all_objects.filter(user_id=user_id).values_list("id", flat=True).first()
