# backend/clinic_core/appointments/api/serializers.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from clinic_core.appointments.models import Appointment, AppointmentStatus, AppointmentType
from clinic_core.patients.models import Patient
from clinic_core.specialists.models import Specialist


def _future(value):
    if value <= timezone.now():
        raise serializers.ValidationError("The appointment date must be in the future.")
    return value


class AppointmentSerializer(serializers.ModelSerializer):
    """
    Wire names follow the public contract (cita / fecha_hora / estado ...).
    """
    paciente_id = serializers.IntegerField(source="patient_id", read_only=True)
    especialista_id = serializers.IntegerField(source="specialist_id", read_only=True)
    fecha_hora = serializers.DateTimeField(source="scheduled_at", read_only=True)
    tipo = serializers.CharField(source="type", read_only=True)
    estado = serializers.CharField(source="status", read_only=True)
    es_primera = serializers.BooleanField(source="is_first_visit", read_only=True)
    comentario = serializers.CharField(source="comment", read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "paciente_id",
            "especialista_id",
            "fecha_hora",
            "tipo",
            "estado",
            "es_primera",
            "comentario",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    # Default managers only see active (not soft-deleted) profiles.
    paciente_id = serializers.PrimaryKeyRelatedField(source="patient", queryset=Patient.objects.all())
    especialista_id = serializers.PrimaryKeyRelatedField(source="specialist", queryset=Specialist.objects.all())
    fecha_hora = serializers.DateTimeField(source="scheduled_at")
    tipo = serializers.ChoiceField(source="type", choices=AppointmentType.choices)
    es_primera = serializers.BooleanField(source="is_first_visit", required=False, default=False)
    comentario = serializers.CharField(source="comment", required=False, allow_blank=True, default="")

    def validate_fecha_hora(self, value):
        return _future(value)


class AppointmentUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PUT/PATCH).
    """
    fecha_hora = serializers.DateTimeField(source="scheduled_at", required=False)
    tipo = serializers.ChoiceField(source="type", choices=AppointmentType.choices, required=False)
    estado = serializers.ChoiceField(source="status", choices=AppointmentStatus.choices, required=False)
    es_primera = serializers.BooleanField(source="is_first_visit", required=False)
    comentario = serializers.CharField(source="comment", required=False, allow_blank=True)

    def validate_fecha_hora(self, value):
        return _future(value)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
