# backend/clinic_core/appointments/tests/test_transitions.py
import pytest

from clinic_core.appointments.constants import ALLOWED_TRANSITIONS, can_transition
from clinic_core.appointments.models import AppointmentStatus as S


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (S.PENDING, S.CONFIRMED, True),
        (S.PENDING, S.CANCELLED, True),
        (S.PENDING, S.COMPLETED, True),
        (S.CONFIRMED, S.CANCELLED, True),
        (S.CONFIRMED, S.COMPLETED, True),
        (S.CONFIRMED, S.PENDING, False),
        (S.CANCELLED, S.CONFIRMED, False),
        (S.COMPLETED, S.CANCELLED, False),
        (S.COMPLETED, S.COMPLETED, True),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_terminal_states_have_no_exits():
    assert ALLOWED_TRANSITIONS[S.CANCELLED] == frozenset()
    assert ALLOWED_TRANSITIONS[S.COMPLETED] == frozenset()
