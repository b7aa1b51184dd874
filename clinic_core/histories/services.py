# backend/clinic_core/histories/services.py
from __future__ import annotations

import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import user_roles
from clinic_core.common.policy import RESOURCE_HISTORY, evaluate
from clinic_core.histories.models import MedicalHistory
from clinic_core.histories.selectors import get_history, history_ownership, list_histories
from clinic_core.specialists.selectors import specialist_for_user

logger = logging.getLogger(__name__)

TABLE = "histories_medical_history"

CLINICAL_FIELDS = (
    "patient_comments",
    "specialist_observations",
    "recommendations",
    "diet",
    "shopping_list",
)


def _audit(actor, action: str, *, record_id=None, description: str | None = None) -> None:
    AuditService.record(
        actor_id=actor.id,
        action=action,
        description=description,
        affected_table=TABLE,
        record_id=record_id,
    )


class HistoryService:
    @staticmethod
    def list_histories(*, actor, patient_id: int | None = None) -> QuerySet[MedicalHistory]:
        qs = list_histories(patient_id=patient_id)
        _audit(actor, "list_histories")
        return qs

    @staticmethod
    def get_history(*, actor, history_id: int) -> MedicalHistory:
        history = get_history(history_id)
        if history is None:
            _audit(actor, "view_history_failed", record_id=history_id, description="History not found")
            raise NotFound("Medical history not found.")

        if getattr(settings, "HISTORY_STRICT_READ_ACCESS", True):
            decision = evaluate(
                user_roles(actor),
                RESOURCE_HISTORY,
                "read",
                history_ownership(actor=actor, history=history),
            )
        else:
            decision = evaluate(user_roles(actor), RESOURCE_HISTORY, "read_unscoped")

        if not decision:
            _audit(actor, "view_history_unauthorized", record_id=history_id, description=decision.reason)
            raise PermissionDenied("You are not allowed to view this medical history.")

        _audit(actor, "view_history", record_id=history.id)
        return history

    @staticmethod
    def create_history(*, actor, patient, specialist=None, **fields) -> MedicalHistory:
        """
        specialist defaults to the acting specialist's own profile.
        """
        if specialist is None:
            specialist = specialist_for_user(actor.id)
            if specialist is None:
                raise ValidationError({"specialist_id": ["This field is required."]})

        values = {k: fields.get(k) or "" for k in CLINICAL_FIELDS}

        try:
            with transaction.atomic():
                history = MedicalHistory.objects.create(patient=patient, specialist=specialist, **values)
        except DatabaseError as exc:
            logger.exception("History creation failed (patient=%s)", patient.id)
            _audit(actor, "create_history_error", description=str(exc))
            raise InternalError("Error creating the medical history.")

        _audit(
            actor,
            "create_history",
            record_id=history.id,
            description=f"History for patient {patient.id} by specialist {specialist.id}",
        )
        return history

    @staticmethod
    def update_history(*, actor, history_id: int, data: dict) -> MedicalHistory:
        history = get_history(history_id)
        if history is None:
            _audit(actor, "update_history_failed", record_id=history_id, description="History not found")
            raise NotFound("Medical history not found.")

        updates = {k: (v or "") for k, v in (data or {}).items() if k in CLINICAL_FIELDS}

        try:
            with transaction.atomic():
                for k, v in updates.items():
                    setattr(history, k, v)
                history.save()
        except DatabaseError as exc:
            logger.exception("History update failed (id=%s)", history_id)
            _audit(actor, "update_history_error", record_id=history_id, description=str(exc))
            raise InternalError("Error updating the medical history.")

        _audit(
            actor,
            "update_history",
            record_id=history.id,
            description=f"Updated fields: {', '.join(sorted(updates)) or 'none'}",
        )
        return history

    @staticmethod
    def delete_history(*, actor, history_id: int) -> None:
        history = get_history(history_id)
        if history is None:
            _audit(actor, "delete_history_failed", record_id=history_id, description="History not found")
            raise NotFound("Medical history not found.")

        try:
            history.soft_delete()
        except DatabaseError as exc:
            logger.exception("History deletion failed (id=%s)", history_id)
            _audit(actor, "delete_history_error", record_id=history_id, description=str(exc))
            raise InternalError("Error deleting the medical history.")

        _audit(actor, "delete_history", record_id=history_id)
