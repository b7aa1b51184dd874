# backend/clinic_core/appointments/constants.py
from __future__ import annotations

from clinic_core.appointments.models import AppointmentStatus

ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}
    ),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
}

# Appointments that keep a specialist entitled to a patient's documents.
CARE_STATUSES = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.COMPLETED,
)


def can_transition(current: str, target: str) -> bool:
    # Keeping the same status is not a transition.
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
