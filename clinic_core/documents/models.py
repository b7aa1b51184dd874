# backend/clinic_core/documents/models.py
from __future__ import annotations

from pathlib import PurePosixPath

from django.conf import settings
from django.db import models

from clinic_core.common.models import SoftDeleteModel


class Document(SoftDeleteModel):
    """
    Metadata for one stored binary. `path` is the key inside the
    "documents" storage, never a public URL.
    """
    history = models.ForeignKey(
        "histories.MedicalHistory",
        on_delete=models.PROTECT,
        related_name="documents",
        null=True,
        blank=True,
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="documents",
    )

    name = models.CharField(max_length=255)
    path = models.CharField(max_length=512, unique=True)
    mime_type = models.CharField(max_length=100, blank=True, default="")
    size = models.PositiveBigIntegerField(default=0)
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "documents_document"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["owner", "deleted_at"], name="doc_owner_deleted_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"

    @property
    def download_name(self) -> str:
        """Display name with the stored file's extension appended when missing."""
        suffix = PurePosixPath(self.path).suffix
        if suffix and not self.name.lower().endswith(suffix.lower()):
            return f"{self.name}{suffix}"
        return self.name
