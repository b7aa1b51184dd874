# backend/clinic_core/appointments/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from clinic_core.appointments.constants import can_transition
from clinic_core.appointments.models import Appointment, AppointmentStatus
from clinic_core.appointments.selectors import AppointmentSelectors
from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import user_roles
from clinic_core.common.policy import RESOURCE_APPOINTMENT, evaluate

logger = logging.getLogger(__name__)

TABLE = "appointments_appointment"


@dataclass(frozen=True)
class CancelResult:
    appointment: Appointment
    changed: bool


def _audit(actor, action: str, *, record_id=None, description: str | None = None) -> None:
    AuditService.record(
        actor_id=actor.id,
        action=action,
        description=description,
        affected_table=TABLE,
        record_id=record_id,
    )


class AppointmentService:
    """
    Every public method writes exactly one audit entry per call, after the
    domain transaction has finished (so a rollback never takes the entry
    with it). Input shape is validated by the serializers beforehand.
    """

    @staticmethod
    def list_appointments(*, actor, status: str | None = None) -> QuerySet[Appointment]:
        qs = AppointmentSelectors.list_appointments(status=status)
        _audit(actor, "list_appointments")
        return qs

    @staticmethod
    def get_appointment(*, actor, appointment_id: int) -> Appointment:
        appointment = AppointmentSelectors.get_appointment(appointment_id)
        if appointment is None:
            _audit(actor, "view_appointment_failed", record_id=appointment_id, description="Appointment not found")
            raise NotFound("Appointment not found.")

        _audit(actor, "view_appointment", record_id=appointment.id)
        return appointment

    @staticmethod
    def create_appointment(
        *,
        actor,
        patient,
        specialist,
        scheduled_at,
        type: str,
        is_first_visit: bool = False,
        comment: str = "",
    ) -> Appointment:
        try:
            with transaction.atomic():
                appointment = Appointment.objects.create(
                    patient=patient,
                    specialist=specialist,
                    scheduled_at=scheduled_at,
                    type=type,
                    status=AppointmentStatus.PENDING,
                    is_first_visit=is_first_visit,
                    comment=comment or "",
                )
        except DatabaseError as exc:
            logger.exception("Appointment creation failed (patient=%s specialist=%s)", patient.id, specialist.id)
            _audit(actor, "create_appointment_error", description=str(exc))
            raise InternalError("Error creating the appointment.")

        _audit(
            actor,
            "create_appointment",
            record_id=appointment.id,
            description=f"Appointment for patient {patient.id} with specialist {specialist.id}",
        )
        return appointment

    @staticmethod
    def update_appointment(*, actor, appointment_id: int, data: dict) -> Appointment:
        """
        Partial update. A status change must follow ALLOWED_TRANSITIONS,
        the same table cancel() uses.
        """
        allowed = {"scheduled_at", "type", "status", "comment", "is_first_visit"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        outcome = "updated"
        error: Exception | None = None
        appointment = None

        try:
            with transaction.atomic():
                appointment = Appointment.objects.select_for_update().filter(id=appointment_id).first()
                if appointment is None:
                    outcome = "missing"
                elif "status" in updates and not can_transition(appointment.status, updates["status"]):
                    outcome = "invalid_transition"
                else:
                    for k, v in updates.items():
                        setattr(appointment, k, v)
                    appointment.save()
        except DatabaseError as exc:
            logger.exception("Appointment update failed (id=%s)", appointment_id)
            outcome, error = "error", exc

        if outcome == "missing":
            _audit(actor, "update_appointment_failed", record_id=appointment_id, description="Appointment not found")
            raise NotFound("Appointment not found.")
        if outcome == "invalid_transition":
            _audit(
                actor,
                "update_appointment_invalid_transition",
                record_id=appointment_id,
                description=f"{appointment.status} -> {updates['status']}",
            )
            raise ValidationError(
                {"estado": [f"Cannot change status from '{appointment.status}' to '{updates['status']}'."]}
            )
        if outcome == "error":
            _audit(actor, "update_appointment_error", record_id=appointment_id, description=str(error))
            raise InternalError("Error updating the appointment.")

        _audit(
            actor,
            "update_appointment",
            record_id=appointment.id,
            description=f"Updated fields: {', '.join(sorted(updates)) or 'none'}",
        )
        return appointment

    @staticmethod
    def cancel_appointment(*, actor, appointment_id: int) -> CancelResult:
        """
        Existence first, then ownership (linked patient or specialist).
        The row lock makes two concurrent cancels serialize: the second one
        sees 'cancelled' and returns as a no-op.
        """
        roles = user_roles(actor)
        outcome = "cancelled"
        error: Exception | None = None
        appointment = None

        try:
            with transaction.atomic():
                appointment = Appointment.objects.select_for_update().filter(id=appointment_id).first()
                if appointment is None:
                    outcome = "missing"
                else:
                    ownership = AppointmentSelectors.ownership(actor=actor, appointment=appointment)
                    decision = evaluate(roles, RESOURCE_APPOINTMENT, "cancel", ownership)
                    if not decision:
                        outcome = "denied"
                    elif appointment.status == AppointmentStatus.CANCELLED:
                        outcome = "noop"
                    elif not can_transition(appointment.status, AppointmentStatus.CANCELLED):
                        outcome = "invalid_transition"
                    else:
                        appointment.status = AppointmentStatus.CANCELLED
                        appointment.save(update_fields=["status", "updated_at"])
        except DatabaseError as exc:
            logger.exception("Appointment cancel failed (id=%s)", appointment_id)
            outcome, error = "error", exc

        if outcome == "missing":
            _audit(actor, "cancel_appointment_failed", record_id=appointment_id, description="Appointment not found")
            raise NotFound("Appointment not found.")
        if outcome == "denied":
            _audit(
                actor,
                "cancel_appointment_unauthorized",
                record_id=appointment_id,
                description="Actor is neither the patient nor the specialist of this appointment",
            )
            raise PermissionDenied("You are not allowed to cancel this appointment.")
        if outcome == "invalid_transition":
            _audit(
                actor,
                "cancel_appointment_invalid_transition",
                record_id=appointment_id,
                description=f"{appointment.status} -> cancelled",
            )
            raise ValidationError({"estado": [f"A '{appointment.status}' appointment cannot be cancelled."]})
        if outcome == "error":
            _audit(actor, "cancel_appointment_error", record_id=appointment_id, description=str(error))
            raise InternalError("Error cancelling the appointment.")

        if outcome == "noop":
            _audit(actor, "cancel_appointment_noop", record_id=appointment_id, description="Already cancelled")
            return CancelResult(appointment=appointment, changed=False)

        _audit(actor, "cancel_appointment", record_id=appointment_id)
        return CancelResult(appointment=appointment, changed=True)

    @staticmethod
    def delete_appointment(*, actor, appointment_id: int) -> None:
        """
        Hard delete. The id is already a validated positive integer;
        existence is checked before the administrator rule.
        """
        appointment = AppointmentSelectors.get_appointment(appointment_id)
        if appointment is None:
            _audit(actor, "delete_appointment_failed", record_id=appointment_id, description="Appointment not found")
            raise NotFound("Appointment not found.")

        decision = evaluate(user_roles(actor), RESOURCE_APPOINTMENT, "delete")
        if not decision:
            _audit(actor, "delete_appointment_unauthorized", record_id=appointment_id, description=decision.reason)
            raise PermissionDenied("Only administrators can delete appointments.")

        try:
            with transaction.atomic():
                appointment.delete()
        except DatabaseError as exc:
            logger.exception("Appointment deletion failed (id=%s)", appointment_id)
            _audit(actor, "delete_appointment_error", record_id=appointment_id, description=str(exc))
            raise InternalError("Error deleting the appointment.")

        _audit(actor, "delete_appointment", record_id=appointment_id)
