# backend/clinic_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from clinic_core.audit.services import AuditService
from clinic_core.common.views import AccessDenialAuditMixin
from clinic_core.iam.api.serializers import ActorSerializer


class MeResponseSerializer(serializers.Serializer):
    user = ActorSerializer()


class MeView(AccessDenialAuditMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        AuditService.record(
            actor_id=request.user.id,
            action="view_me",
            description="Viewed own profile",
            affected_table="iam_user",
            record_id=request.user.id,
        )
        return Response({"user": ActorSerializer(request.user).data}, status=status.HTTP_200_OK)
