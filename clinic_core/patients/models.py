# backend/clinic_core/patients/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from clinic_core.common.models import SoftDeleteModel


class Patient(SoftDeleteModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="patient_profile",
    )
    medical_record_number = models.CharField(max_length=64, unique=True)
    admission_date = models.DateField()
    discharge_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = "patients_patient"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.medical_record_number} - {self.user}"
