# backend/clinic_core/histories/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.histories.models import MedicalHistory
from clinic_core.patients.models import Patient
from clinic_core.specialists.models import Specialist


class _ClinicalFieldsMixin(serializers.Serializer):
    patient_comments = serializers.CharField(required=False, allow_blank=True)
    specialist_observations = serializers.CharField(required=False, allow_blank=True)
    recommendations = serializers.CharField(required=False, allow_blank=True)
    diet = serializers.CharField(required=False, allow_blank=True)
    shopping_list = serializers.CharField(required=False, allow_blank=True)


class HistoryCreateSerializer(_ClinicalFieldsMixin):
    """
    specialist_id may be omitted when the caller is a specialist;
    the service falls back to the caller's own profile.
    """
    patient_id = serializers.PrimaryKeyRelatedField(source="patient", queryset=Patient.objects.all())
    specialist_id = serializers.PrimaryKeyRelatedField(
        source="specialist",
        queryset=Specialist.objects.all(),
        required=False,
        allow_null=True,
    )


class HistoryUpdateSerializer(_ClinicalFieldsMixin):
    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class HistorySerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(read_only=True)
    specialist_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = MedicalHistory
        fields = [
            "id",
            "patient_id",
            "specialist_id",
            "patient_comments",
            "specialist_observations",
            "recommendations",
            "diet",
            "shopping_list",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
