# backend/clinic_core/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from clinic_core.audit.models import AuditEntry


def list_audit_entries(
    *,
    actor_user_id: int | None = None,
    action: str | None = None,
) -> QuerySet[AuditEntry]:
    qs = AuditEntry.objects.select_related("actor_user")

    if actor_user_id is not None:
        qs = qs.filter(actor_user_id=actor_user_id)
    if action:
        qs = qs.filter(action=action)

    return qs.order_by("-occurred_at", "-id")
