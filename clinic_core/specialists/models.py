# backend/clinic_core/specialists/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from clinic_core.common.models import SoftDeleteModel


class Specialist(SoftDeleteModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="specialist_profile",
    )
    specialty = models.CharField(max_length=255, db_index=True)
    phone = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        db_table = "specialists_specialist"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.user} ({self.specialty})"
