# backend/clinic_core/histories/models.py
from __future__ import annotations

from django.db import models

from clinic_core.common.models import SoftDeleteModel


class MedicalHistory(SoftDeleteModel):
    patient = models.ForeignKey(
        "patients.Patient",
        on_delete=models.PROTECT,
        related_name="histories",
    )
    specialist = models.ForeignKey(
        "specialists.Specialist",
        on_delete=models.PROTECT,
        related_name="histories",
    )

    patient_comments = models.TextField(blank=True, default="")
    specialist_observations = models.TextField(blank=True, default="")
    recommendations = models.TextField(blank=True, default="")
    diet = models.TextField(blank=True, default="")
    shopping_list = models.TextField(blank=True, default="")

    class Meta:
        db_table = "histories_medical_history"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"History {self.id} (patient {self.patient_id})"
