# backend/clinic_core/specialists/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.response import Response

from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_SPECIALIST
from clinic_core.common.views import AuditedViewSet
from clinic_core.specialists.api.serializers import (
    SpecialistCreateSerializer,
    SpecialistSerializer,
    SpecialistUpdateSerializer,
)
from clinic_core.specialists.models import Specialist
from clinic_core.specialists.services import SpecialistService


class SpecialistViewSet(AuditedViewSet):
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_SPECIALIST
    audit_table = "specialists_specialist"

    serializer_class = SpecialistSerializer
    queryset = Specialist.objects.none()

    @extend_schema(
        tags=["Specialists"],
        responses={200: SpecialistSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="q",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search by specialty, name or surnames.",
            ),
        ],
    )
    def list(self, request):
        specialists = SpecialistService.list_specialists(actor=request.user, q=request.query_params.get("q"))
        return Response(
            {"specialists": SpecialistSerializer(specialists, many=True).data},
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["Specialists"], responses={200: SpecialistSerializer})
    def retrieve(self, request, pk=None):
        specialist = SpecialistService.get_specialist(actor=request.user, specialist_id=parse_positive_int(pk))
        return Response({"specialist": SpecialistSerializer(specialist).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Specialists"], request=SpecialistCreateSerializer, responses={201: SpecialistSerializer})
    def create(self, request):
        ser = SpecialistCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        specialist = SpecialistService.create_specialist(actor=request.user, **ser.validated_data)
        return Response(
            {"message": "Specialist created successfully", "specialist": SpecialistSerializer(specialist).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Specialists"], request=SpecialistUpdateSerializer, responses={200: SpecialistSerializer})
    def update(self, request, pk=None):
        specialist_id = parse_positive_int(pk)
        ser = SpecialistUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        specialist = SpecialistService.update_specialist(
            actor=request.user,
            specialist_id=specialist_id,
            data=ser.validated_data,
        )
        return Response(
            {"message": "Specialist updated successfully", "specialist": SpecialistSerializer(specialist).data},
            status=status.HTTP_200_OK,
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Specialists"], responses={200: None})
    def destroy(self, request, pk=None):
        SpecialistService.delete_specialist(actor=request.user, specialist_id=parse_positive_int(pk))
        return Response({"message": "Specialist deleted successfully"}, status=status.HTTP_200_OK)
