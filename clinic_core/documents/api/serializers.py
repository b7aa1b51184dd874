# backend/clinic_core/documents/api/serializers.py
from __future__ import annotations

from pathlib import PurePosixPath

from django.conf import settings
from rest_framework import serializers

from clinic_core.documents.models import Document
from clinic_core.histories.models import MedicalHistory

# leading bytes of each accepted content type
FILE_SIGNATURES = {
    "application/pdf": (b"%PDF-",),
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
}


def _has_signature(uploaded_file, content_type: str) -> bool:
    signatures = FILE_SIGNATURES.get(content_type)
    if not signatures:
        return True
    uploaded_file.seek(0)
    head = uploaded_file.read(16)
    uploaded_file.seek(0)
    return head.startswith(signatures)


class DocumentUploadSerializer(serializers.Serializer):
    """
    multipart/form-data. Type and size are checked here, before anything
    reaches storage.
    """
    file = serializers.FileField(allow_empty_file=False)
    history_id = serializers.PrimaryKeyRelatedField(
        source="history",
        queryset=MedicalHistory.objects.all(),
        required=False,
        allow_null=True,
    )
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_file(self, value):
        allowed = [e.lower() for e in settings.DOCUMENT_ALLOWED_EXTENSIONS]
        ext = PurePosixPath(value.name or "").suffix.lower().lstrip(".")
        if ext not in allowed:
            raise serializers.ValidationError(f"Invalid file type. Allowed: {', '.join(allowed)}.")

        mime_types = settings.DOCUMENT_ALLOWED_MIME_TYPES.get(ext, [])
        content_type = (getattr(value, "content_type", "") or "").split(";")[0].strip().lower()
        if content_type not in mime_types:
            raise serializers.ValidationError(
                f"Invalid MIME type for .{ext} files. Allowed: {', '.join(mime_types)}."
            )

        limit = int(settings.DOCUMENT_MAX_UPLOAD_BYTES)
        if value.size > limit:
            raise serializers.ValidationError(f"File exceeds the maximum size of {limit} bytes.")

        if not _has_signature(value, content_type):
            raise serializers.ValidationError("File content does not match its declared type.")
        return value


class DocumentSerializer(serializers.ModelSerializer):
    history_id = serializers.IntegerField(read_only=True, allow_null=True)
    owner_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Document
        fields = [
            "id",
            "history_id",
            "owner_id",
            "name",
            "mime_type",
            "size",
            "description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
