# backend/clinic_core/histories/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.response import Response

from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_HISTORY
from clinic_core.common.views import AuditedViewSet
from clinic_core.histories.api.serializers import (
    HistoryCreateSerializer,
    HistorySerializer,
    HistoryUpdateSerializer,
)
from clinic_core.histories.models import MedicalHistory
from clinic_core.histories.services import HistoryService


class HistoryViewSet(AuditedViewSet):
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_HISTORY
    policy_actions = {
        "list": "list",
        # ownership is checked by HistoryService.get_history
        "retrieve": "read_unscoped",
        "create": "create",
        "update": "update",
        "partial_update": "update",
        "destroy": "delete",
    }
    audit_table = "histories_medical_history"

    serializer_class = HistorySerializer
    queryset = MedicalHistory.objects.none()

    @extend_schema(
        tags=["Histories"],
        responses={200: HistorySerializer(many=True)},
        parameters=[
            OpenApiParameter(name="patient_id", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        raw = request.query_params.get("patient_id")
        patient_id = parse_positive_int(raw, field_name="patient_id") if raw else None

        histories = HistoryService.list_histories(actor=request.user, patient_id=patient_id)
        return Response({"histories": HistorySerializer(histories, many=True).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Histories"], responses={200: HistorySerializer})
    def retrieve(self, request, pk=None):
        history = HistoryService.get_history(actor=request.user, history_id=parse_positive_int(pk))
        return Response({"history": HistorySerializer(history).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Histories"], request=HistoryCreateSerializer, responses={201: HistorySerializer})
    def create(self, request):
        ser = HistoryCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        history = HistoryService.create_history(actor=request.user, **ser.validated_data)
        return Response(
            {"message": "Medical history created successfully", "history": HistorySerializer(history).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Histories"], request=HistoryUpdateSerializer, responses={200: HistorySerializer})
    def update(self, request, pk=None):
        history_id = parse_positive_int(pk)
        ser = HistoryUpdateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        history = HistoryService.update_history(actor=request.user, history_id=history_id, data=ser.validated_data)
        return Response(
            {"message": "Medical history updated successfully", "history": HistorySerializer(history).data},
            status=status.HTTP_200_OK,
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Histories"], responses={200: None})
    def destroy(self, request, pk=None):
        HistoryService.delete_history(actor=request.user, history_id=parse_positive_int(pk))
        return Response({"message": "Medical history deleted successfully"}, status=status.HTTP_200_OK)
