# backend/clinic_core/appointments/models.py
from __future__ import annotations

from django.db import models

from clinic_core.common.models import TimeStampedModel


class AppointmentType(models.TextChoices):
    IN_PERSON = "in-person", "In person"
    REMOTE = "remote", "Remote"


class AppointmentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


class Appointment(TimeStampedModel):
    """
    Hard-deleted (administrators only). Status moves through
    clinic_core.appointments.constants.ALLOWED_TRANSITIONS.
    """
    patient = models.ForeignKey(
        "patients.Patient",
        on_delete=models.PROTECT,
        related_name="appointments",
    )
    specialist = models.ForeignKey(
        "specialists.Specialist",
        on_delete=models.PROTECT,
        related_name="appointments",
    )

    scheduled_at = models.DateTimeField(db_index=True)
    type = models.CharField(max_length=16, choices=AppointmentType.choices)
    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.PENDING,
        db_index=True,
    )
    is_first_visit = models.BooleanField(default=False)
    comment = models.TextField(blank=True, default="")

    class Meta:
        db_table = "appointments_appointment"
        ordering = ["scheduled_at", "id"]
        indexes = [
            models.Index(fields=["specialist", "status"], name="appt_specialist_status_idx"),
            models.Index(fields=["patient", "status"], name="appt_patient_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.id} ({self.status})"
