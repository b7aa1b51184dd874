# backend/clinic_core/appointments/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from clinic_core.appointments.api.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
)
from clinic_core.appointments.models import Appointment, AppointmentStatus
from clinic_core.appointments.services import AppointmentService
from clinic_core.common.api.exceptions import BadRequest
from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_APPOINTMENT
from clinic_core.common.views import AuditedViewSet


class AppointmentViewSet(AuditedViewSet):
    """
    Responses keep the {message?, cita?/citas?} contract.
    """
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_APPOINTMENT
    # cancel and destroy depend on the appointment; AppointmentService decides
    policy_actions = {
        "list": "list",
        "retrieve": "read",
        "create": "create",
        "update": "update",
        "partial_update": "update",
        "destroy": None,
        "cancel": None,
    }
    audit_table = "appointments_appointment"

    serializer_class = AppointmentSerializer
    queryset = Appointment.objects.none()

    @extend_schema(
        tags=["Appointments"],
        responses={200: AppointmentSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="estado",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=AppointmentStatus.values,
            ),
        ],
    )
    def list(self, request):
        status_q = request.query_params.get("estado") or None
        if status_q and status_q not in AppointmentStatus.values:
            raise BadRequest(f"Invalid estado: {status_q}.")

        qs = AppointmentService.list_appointments(actor=request.user, status=status_q)
        return Response({"citas": AppointmentSerializer(qs, many=True).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Appointments"], responses={200: AppointmentSerializer})
    def retrieve(self, request, pk=None):
        appointment = AppointmentService.get_appointment(actor=request.user, appointment_id=parse_positive_int(pk))
        return Response({"cita": AppointmentSerializer(appointment).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Appointments"], request=AppointmentCreateSerializer, responses={201: AppointmentSerializer})
    def create(self, request):
        ser = AppointmentCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        appointment = AppointmentService.create_appointment(actor=request.user, **ser.validated_data)
        return Response(
            {"message": "Appointment created successfully", "cita": AppointmentSerializer(appointment).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Appointments"], request=AppointmentUpdateSerializer, responses={200: AppointmentSerializer})
    def update(self, request, pk=None):
        appointment_id = parse_positive_int(pk)
        ser = AppointmentUpdateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        appointment = AppointmentService.update_appointment(
            actor=request.user,
            appointment_id=appointment_id,
            data=ser.validated_data,
        )
        return Response(
            {"message": "Appointment updated successfully", "cita": AppointmentSerializer(appointment).data},
            status=status.HTTP_200_OK,
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Appointments"], responses={200: None})
    def destroy(self, request, pk=None):
        # Malformed ids are rejected before existence or role checks.
        appointment_id = parse_positive_int(pk)
        AppointmentService.delete_appointment(actor=request.user, appointment_id=appointment_id)
        return Response({"message": "Appointment deleted successfully"}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Appointments"], request=None, responses={200: AppointmentSerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        result = AppointmentService.cancel_appointment(actor=request.user, appointment_id=parse_positive_int(pk))
        message = "Appointment cancelled successfully" if result.changed else "Appointment was already cancelled"
        return Response(
            {"message": message, "cita": AppointmentSerializer(result.appointment).data},
            status=status.HTTP_200_OK,
        )
