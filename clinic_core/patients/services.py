# backend/clinic_core/patients/services.py
from __future__ import annotations

import logging

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import ROLE_PATIENT
from clinic_core.iam.services.users import assign_role, create_user_row
from clinic_core.patients.models import Patient
from clinic_core.patients.selectors import get_patient, list_patients

logger = logging.getLogger(__name__)

TABLE = "patients_patient"


class PatientService:
    @staticmethod
    def list_patients(*, actor) -> QuerySet[Patient]:
        qs = list_patients()
        AuditService.record(actor_id=actor.id, action="list_patients", affected_table=TABLE)
        return qs

    @staticmethod
    def get_patient(*, actor, patient_id: int) -> Patient:
        patient = get_patient(patient_id)
        if patient is None:
            AuditService.record(
                actor_id=actor.id,
                action="view_patient_failed",
                description="Patient not found",
                affected_table=TABLE,
                record_id=patient_id,
            )
            raise NotFound("Patient not found.")

        AuditService.record(actor_id=actor.id, action="view_patient", affected_table=TABLE, record_id=patient.id)
        return patient

    @staticmethod
    def create_patient(
        *,
        actor,
        medical_record_number: str,
        admission_date,
        discharge_date=None,
        user=None,
        new_user: dict | None = None,
    ) -> Patient:
        """
        Either wraps an existing user or creates the user and the profile
        together. Both rows commit or neither does.
        """
        try:
            with transaction.atomic():
                if user is None:
                    user = create_user_row(role=ROLE_PATIENT, **(new_user or {}))
                else:
                    assign_role(user, ROLE_PATIENT)

                patient = Patient.objects.create(
                    user=user,
                    medical_record_number=medical_record_number,
                    admission_date=admission_date,
                    discharge_date=discharge_date,
                )
        except DatabaseError as exc:
            logger.exception("Patient creation failed (mrn=%s)", medical_record_number)
            AuditService.record(
                actor_id=actor.id,
                action="create_patient_error",
                description=str(exc),
                affected_table=TABLE,
            )
            raise InternalError("Error creating the patient.")

        AuditService.record(
            actor_id=actor.id,
            action="create_patient",
            description=f"Patient {medical_record_number} for user {user.id}",
            affected_table=TABLE,
            record_id=patient.id,
        )
        return patient

    @staticmethod
    def update_patient(*, actor, patient_id: int, data: dict) -> Patient:
        patient = get_patient(patient_id)
        if patient is None:
            AuditService.record(
                actor_id=actor.id,
                action="update_patient_failed",
                description="Patient not found",
                affected_table=TABLE,
                record_id=patient_id,
            )
            raise NotFound("Patient not found.")

        allowed = {"medical_record_number", "admission_date", "discharge_date"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        try:
            with transaction.atomic():
                for k, v in updates.items():
                    setattr(patient, k, v)
                patient.save()
        except DatabaseError as exc:
            logger.exception("Patient update failed (id=%s)", patient_id)
            AuditService.record(
                actor_id=actor.id,
                action="update_patient_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=patient_id,
            )
            raise InternalError("Error updating the patient.")

        AuditService.record(
            actor_id=actor.id,
            action="update_patient",
            description=f"Updated fields: {', '.join(sorted(updates)) or 'none'}",
            affected_table=TABLE,
            record_id=patient.id,
        )
        return patient

    @staticmethod
    def delete_patient(*, actor, patient_id: int) -> None:
        patient = get_patient(patient_id)
        if patient is None:
            AuditService.record(
                actor_id=actor.id,
                action="delete_patient_failed",
                description="Patient not found",
                affected_table=TABLE,
                record_id=patient_id,
            )
            raise NotFound("Patient not found.")

        try:
            patient.soft_delete()
        except DatabaseError as exc:
            logger.exception("Patient deletion failed (id=%s)", patient_id)
            AuditService.record(
                actor_id=actor.id,
                action="delete_patient_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=patient_id,
            )
            raise InternalError("Error deleting the patient.")

        AuditService.record(actor_id=actor.id, action="delete_patient", affected_table=TABLE, record_id=patient_id)
