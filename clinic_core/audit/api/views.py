# backend/clinic_core/audit/api/views.py
from __future__ import annotations

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from clinic_core.audit.api.serializers import AuditEntrySerializer
from clinic_core.audit.filters import AuditEntryFilter
from clinic_core.audit.models import AuditEntry
from clinic_core.audit.selectors import list_audit_entries
from clinic_core.common.api.exceptions import BadRequest
from clinic_core.common.api.pagination import paginate
from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_AUDIT_LOG
from clinic_core.common.views import AccessDenialAuditMixin


class AuditLogViewSet(AccessDenialAuditMixin, viewsets.GenericViewSet):
    """
    Administrator-only audit log reads.
    """
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_AUDIT_LOG
    policy_actions = {"list": "list", "by_user": "list", "by_action": "list"}
    audit_table = "audit_entry"

    serializer_class = AuditEntrySerializer
    queryset = AuditEntry.objects.none()
    filterset_class = AuditEntryFilter
    ordering_fields = ["occurred_at", "action"]

    def get_queryset(self):
        return list_audit_entries()

    @extend_schema(tags=["Audit"], responses={200: AuditEntrySerializer(many=True)})
    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return paginate(request, qs, AuditEntrySerializer)

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEntrySerializer(many=True)},
        parameters=[
            OpenApiParameter(name="user_id", type=OpenApiTypes.INT, location=OpenApiParameter.PATH),
        ],
    )
    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[^/.]+)")
    def by_user(self, request, user_id=None):
        actor_user_id = parse_positive_int(user_id, field_name="user id")
        qs = list_audit_entries(actor_user_id=actor_user_id)
        return paginate(request, qs, AuditEntrySerializer)

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEntrySerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="action_code",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.PATH,
                description="One of AUDIT_FILTERABLE_ACTIONS.",
            ),
        ],
    )
    @action(detail=False, methods=["get"], url_path=r"action/(?P<action_code>[^/.]+)")
    def by_action(self, request, action_code=None):
        allowed = list(getattr(settings, "AUDIT_FILTERABLE_ACTIONS", []))
        if action_code not in allowed:
            raise BadRequest(f"Invalid action. Allowed values: {', '.join(allowed)}.")
        qs = list_audit_entries(action=action_code)
        return paginate(request, qs, AuditEntrySerializer)
