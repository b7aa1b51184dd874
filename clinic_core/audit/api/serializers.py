# backend/clinic_core/audit/api/serializers.py
from rest_framework import serializers

from clinic_core.audit.models import AuditEntry


class AuditEntrySerializer(serializers.ModelSerializer):
    actor_user_id = serializers.IntegerField(read_only=True)
    actor_email = serializers.EmailField(source="actor_user.email", read_only=True, default=None)
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)

    class Meta:
        model = AuditEntry
        fields = [
            "id",
            "actor_user_id",
            "actor_email",
            "action",
            "description",
            "affected_table",
            "record_id",
            "timestamp",
        ]
        read_only_fields = fields
