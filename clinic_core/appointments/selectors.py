# backend/clinic_core/appointments/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from clinic_core.appointments.constants import CARE_STATUSES
from clinic_core.appointments.models import Appointment
from clinic_core.common.policy import Ownership


class AppointmentSelectors:
    @staticmethod
    def list_appointments(*, status: str | None = None) -> QuerySet[Appointment]:
        qs = Appointment.objects.all()
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("scheduled_at", "id")

    @staticmethod
    def get_appointment(appointment_id: int) -> Appointment | None:
        return Appointment.objects.select_related("patient", "specialist").filter(id=appointment_id).first()

    @staticmethod
    def ownership(*, actor, appointment: Appointment) -> Ownership:
        return Ownership(
            is_linked_patient=appointment.patient.user_id == actor.id,
            is_linked_specialist=appointment.specialist.user_id == actor.id,
        )

    @staticmethod
    def has_care_relationship(*, specialist_user_id: int, patient_id: int | None, active_only: bool = False) -> bool:
        """
        Whether the specialist (by user id) has an appointment with the patient.
        active_only restricts to pending/confirmed/completed.
        """
        if patient_id is None:
            return False
        qs = Appointment.objects.filter(patient_id=patient_id, specialist__user_id=specialist_user_id)
        if active_only:
            qs = qs.filter(status__in=CARE_STATUSES)
        return qs.exists()
