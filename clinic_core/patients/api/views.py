# backend/clinic_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_PATIENT
from clinic_core.common.views import AuditedViewSet
from clinic_core.patients.api.serializers import (
    PatientCreateSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from clinic_core.patients.models import Patient
from clinic_core.patients.services import PatientService


class PatientViewSet(AuditedViewSet):
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_PATIENT
    audit_table = "patients_patient"

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer(many=True)})
    def list(self, request):
        patients = PatientService.list_patients(actor=request.user)
        return Response({"patients": PatientSerializer(patients, many=True).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        patient = PatientService.get_patient(actor=request.user, patient_id=parse_positive_int(pk))
        return Response({"patient": PatientSerializer(patient).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], request=PatientCreateSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(actor=request.user, **ser.to_service_kwargs())
        return Response(
            {"message": "Patient created successfully", "patient": PatientSerializer(patient).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Patients"], request=PatientUpdateSerializer, responses={200: PatientSerializer})
    def update(self, request, pk=None):
        patient_id = parse_positive_int(pk)
        ser = PatientUpdateSerializer(data=request.data, context={"patient_id": patient_id})
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(actor=request.user, patient_id=patient_id, data=ser.validated_data)
        return Response(
            {"message": "Patient updated successfully", "patient": PatientSerializer(patient).data},
            status=status.HTTP_200_OK,
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Patients"], responses={200: None})
    def destroy(self, request, pk=None):
        PatientService.delete_patient(actor=request.user, patient_id=parse_positive_int(pk))
        return Response({"message": "Patient deleted successfully"}, status=status.HTTP_200_OK)
