# backend/clinic_core/documents/selectors.py
from __future__ import annotations

from django.db.models import Q, QuerySet

from clinic_core.appointments.models import Appointment
from clinic_core.appointments.selectors import AppointmentSelectors
from clinic_core.common.permissions import ROLE_ADMIN, ROLE_SPECIALIST
from clinic_core.common.policy import Ownership
from clinic_core.documents.models import Document
from clinic_core.patients.selectors import patient_id_for_user


def _base() -> QuerySet[Document]:
    return Document.objects.select_related("history", "owner")


def get_document(document_id: int) -> Document | None:
    return _base().filter(id=document_id).first()


def visible_documents(*, actor, roles) -> QuerySet[Document]:
    """
    Queryset form of the document "list" rule: administrators see all,
    everyone sees their own uploads, specialists also see documents of
    patients they have appointments with.
    """
    qs = _base()
    if ROLE_ADMIN in roles:
        return qs.order_by("-created_at", "-id")

    cond = Q(owner_id=actor.id)
    if ROLE_SPECIALIST in roles:
        cared_for = Appointment.objects.filter(specialist__user_id=actor.id).values("patient_id")
        cond |= Q(history__patient_id__in=cared_for)
        cond |= Q(history__isnull=True, owner__patient_profile__id__in=cared_for)

    return qs.filter(cond).order_by("-created_at", "-id")


def document_patient_id(document: Document) -> int | None:
    """
    The patient a document belongs to: its history's patient, or the
    uploader's own patient profile for documents outside any history.
    """
    if document.history_id is not None:
        return document.history.patient_id
    return patient_id_for_user(document.owner_id)


def document_ownership(*, actor, document: Document) -> Ownership:
    patient_id = document_patient_id(document)
    return Ownership(
        is_owner=document.owner_id == actor.id,
        has_care_relationship=AppointmentSelectors.has_care_relationship(
            specialist_user_id=actor.id,
            patient_id=patient_id,
        ),
        has_active_care_relationship=AppointmentSelectors.has_care_relationship(
            specialist_user_id=actor.id,
            patient_id=patient_id,
            active_only=True,
        ),
    )
