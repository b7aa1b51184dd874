# backend/clinic_core/common/roles.py
from __future__ import annotations

from typing import FrozenSet

# Group/role names (Django auth Group names)
ROLE_ADMIN = "administrator"
ROLE_SPECIALIST = "specialist"
ROLE_PATIENT = "patient"
ROLE_USER = "user"

ALL_ROLES = frozenset({ROLE_ADMIN, ROLE_SPECIALIST, ROLE_PATIENT, ROLE_USER})

# Highest first; used when a single role has to be reported (login payload).
ROLE_PRECEDENCE = (ROLE_ADMIN, ROLE_SPECIALIST, ROLE_PATIENT, ROLE_USER)


def user_roles(user) -> FrozenSet[str]:
    """
    Resolve roles from:
    1) Django groups: user.groups
    2) Superuser flag (treated as administrator)

    Authenticated users without any known group are plain "user".
    Anonymous users have no roles.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return frozenset()

    roles = set()

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)

    if hasattr(user, "groups"):
        roles.update(user.groups.filter(name__in=ALL_ROLES).values_list("name", flat=True))

    if not roles:
        roles.add(ROLE_USER)

    return frozenset(roles)


def primary_role(roles) -> str:
    for role in ROLE_PRECEDENCE:
        if role in roles:
            return role
    return ROLE_USER
