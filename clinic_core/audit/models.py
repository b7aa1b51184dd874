# backend/clinic_core/audit/models.py
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class AuditEntry(models.Model):
    """
    Immutable audit record: one row per attempted action.
    actor_user is NULL for anonymous or failed-login attempts.
    """
    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_entries",
        null=True,
        blank=True,
    )

    action = models.CharField(max_length=128, db_index=True)  # e.g. "cancel_appointment_unauthorized"
    description = models.TextField(blank=True, default="")
    affected_table = models.CharField(max_length=64, blank=True, default="")  # e.g. "appointments"
    record_id = models.CharField(max_length=64, blank=True, default="")

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_entry"
        ordering = ["-occurred_at", "-id"]
        indexes = [
            models.Index(fields=["actor_user", "occurred_at"], name="audit_actor_occurred_idx"),
            models.Index(fields=["affected_table", "record_id"], name="audit_table_record_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} by {self.actor_user_id or 'anonymous'}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("AuditEntry is immutable and cannot be modified.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("AuditEntry is immutable and cannot be deleted.")
