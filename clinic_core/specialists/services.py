# backend/clinic_core/specialists/services.py
from __future__ import annotations

import logging

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import ROLE_SPECIALIST
from clinic_core.iam.services.users import create_user_row
from clinic_core.specialists.models import Specialist
from clinic_core.specialists.selectors import get_specialist, list_specialists

logger = logging.getLogger(__name__)

TABLE = "specialists_specialist"


def _not_found(actor, action: str, specialist_id: int) -> NotFound:
    AuditService.record(
        actor_id=actor.id,
        action=action,
        description="Specialist not found",
        affected_table=TABLE,
        record_id=specialist_id,
    )
    return NotFound("Specialist not found.")


class SpecialistService:
    @staticmethod
    def list_specialists(*, actor, q: str | None = None) -> QuerySet[Specialist]:
        qs = list_specialists(q=q)
        AuditService.record(actor_id=actor.id, action="list_specialists", affected_table=TABLE)
        return qs

    @staticmethod
    def get_specialist(*, actor, specialist_id: int) -> Specialist:
        specialist = get_specialist(specialist_id)
        if specialist is None:
            raise _not_found(actor, "view_specialist_failed", specialist_id)

        AuditService.record(actor_id=actor.id, action="view_specialist", affected_table=TABLE, record_id=specialist.id)
        return specialist

    @staticmethod
    def create_specialist(
        *,
        actor,
        name: str,
        surnames: str,
        email: str,
        password: str,
        specialty: str,
        phone: str = "",
    ) -> Specialist:
        """
        User + specialist profile in one transaction: no user is left
        behind without its profile.
        """
        try:
            with transaction.atomic():
                user = create_user_row(
                    name=name,
                    surnames=surnames,
                    email=email,
                    password=password,
                    role=ROLE_SPECIALIST,
                )
                specialist = Specialist.objects.create(user=user, specialty=specialty, phone=phone or "")
        except DatabaseError as exc:
            logger.exception("Specialist creation failed for %s", email)
            AuditService.record(
                actor_id=actor.id,
                action="create_specialist_error",
                description=str(exc),
                affected_table=TABLE,
            )
            raise InternalError("Error creating the specialist.")

        AuditService.record(
            actor_id=actor.id,
            action="create_specialist",
            description=f"Specialist {email} ({specialty})",
            affected_table=TABLE,
            record_id=specialist.id,
        )
        return specialist

    @staticmethod
    def update_specialist(*, actor, specialist_id: int, data: dict) -> Specialist:
        specialist = get_specialist(specialist_id)
        if specialist is None:
            raise _not_found(actor, "update_specialist_failed", specialist_id)

        profile_updates = {k: v for k, v in data.items() if k in {"specialty", "phone"}}
        user_updates = {k: v for k, v in data.items() if k in {"name", "surnames"}}

        try:
            with transaction.atomic():
                for k, v in profile_updates.items():
                    setattr(specialist, k, v)
                specialist.save()

                if user_updates:
                    for k, v in user_updates.items():
                        setattr(specialist.user, k, v)
                    specialist.user.save(update_fields=[*user_updates.keys(), "updated_at"])
        except DatabaseError as exc:
            logger.exception("Specialist update failed (id=%s)", specialist_id)
            AuditService.record(
                actor_id=actor.id,
                action="update_specialist_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=specialist_id,
            )
            raise InternalError("Error updating the specialist.")

        changed = sorted([*profile_updates.keys(), *user_updates.keys()])
        AuditService.record(
            actor_id=actor.id,
            action="update_specialist",
            description=f"Updated fields: {', '.join(changed) or 'none'}",
            affected_table=TABLE,
            record_id=specialist.id,
        )
        return specialist

    @staticmethod
    def delete_specialist(*, actor, specialist_id: int) -> None:
        specialist = get_specialist(specialist_id)
        if specialist is None:
            raise _not_found(actor, "delete_specialist_failed", specialist_id)

        try:
            specialist.soft_delete()
        except DatabaseError as exc:
            logger.exception("Specialist deletion failed (id=%s)", specialist_id)
            AuditService.record(
                actor_id=actor.id,
                action="delete_specialist_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=specialist_id,
            )
            raise InternalError("Error deleting the specialist.")

        AuditService.record(
            actor_id=actor.id,
            action="delete_specialist",
            affected_table=TABLE,
            record_id=specialist_id,
        )
