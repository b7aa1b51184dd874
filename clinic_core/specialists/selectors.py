# backend/clinic_core/specialists/selectors.py
from __future__ import annotations

from django.db.models import Q, QuerySet

from clinic_core.specialists.models import Specialist


def list_specialists(*, q: str | None = None) -> QuerySet[Specialist]:
    qs = Specialist.objects.select_related("user")

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(
            Q(specialty__icontains=qv)
            | Q(user__name__icontains=qv)
            | Q(user__surnames__icontains=qv)
        )

    return qs.order_by("id")


def get_specialist(specialist_id: int) -> Specialist | None:
    return Specialist.objects.select_related("user").filter(id=specialist_id).first()


def specialist_for_user(user_id: int) -> Specialist | None:
    return Specialist.objects.filter(user_id=user_id).first()
