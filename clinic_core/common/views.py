# backend/clinic_core/common/views.py
from __future__ import annotations

from rest_framework import viewsets

from clinic_core.audit.services import AuditService


class AccessDenialAuditMixin:
    """
    Records route-gate denials (403 from permission classes).

    Unauthenticated requests are left to the exception handler, which
    writes the anonymous entry for every 401.
    """
    audit_table: str | None = None

    def permission_denied(self, request, message=None, code=None):
        user = getattr(request, "user", None)
        if user is not None and getattr(user, "is_authenticated", False):
            AuditService.record(
                actor_id=user.id,
                action="access_denied",
                description=f"{request.method} {request.path}",
                affected_table=self.audit_table,
            )
        super().permission_denied(request, message=message, code=code)


class AuditedViewSet(AccessDenialAuditMixin, viewsets.ViewSet):
    """
    Base ViewSet for resource endpoints. Views stay thin: validate input,
    call the service with the explicit actor, render the response.
    """
