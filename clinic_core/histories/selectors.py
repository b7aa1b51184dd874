# backend/clinic_core/histories/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from clinic_core.appointments.selectors import AppointmentSelectors
from clinic_core.common.policy import Ownership
from clinic_core.histories.models import MedicalHistory


def list_histories(*, patient_id: int | None = None) -> QuerySet[MedicalHistory]:
    qs = MedicalHistory.objects.select_related("patient", "specialist")
    if patient_id is not None:
        qs = qs.filter(patient_id=patient_id)
    return qs.order_by("-created_at", "-id")


def get_history(history_id: int) -> MedicalHistory | None:
    return MedicalHistory.objects.select_related("patient", "specialist").filter(id=history_id).first()


def history_ownership(*, actor, history: MedicalHistory) -> Ownership:
    return Ownership(
        is_linked_patient=history.patient.user_id == actor.id,
        is_linked_specialist=history.specialist.user_id == actor.id,
        has_care_relationship=AppointmentSelectors.has_care_relationship(
            specialist_user_id=actor.id,
            patient_id=history.patient_id,
        ),
    )
