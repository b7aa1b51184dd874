# backend/clinic_core/common/policy.py
"""
Record-level access decisions.

`evaluate()` is a pure lookup over (roles, ownership facts). It never touches
the database: services compute the `Ownership` facts with read-only selectors
and pass them in together with the actor's role set.

Role-only rows are also what `PolicyPermission` checks at the route, so this
table is the only place that grants or refuses an action. Document listing is
open to any authenticated actor; the rows it returns are narrowed by
`documents.selectors.visible_documents`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, Tuple

from clinic_core.common.roles import ROLE_ADMIN, ROLE_PATIENT, ROLE_SPECIALIST

RESOURCE_APPOINTMENT = "appointment"
RESOURCE_DOCUMENT = "document"
RESOURCE_HISTORY = "history"
RESOURCE_PATIENT = "patient"
RESOURCE_SPECIALIST = "specialist"
RESOURCE_USER = "user"
RESOURCE_AUDIT_LOG = "audit_log"


@dataclass(frozen=True)
class Ownership:
    """
    Facts linking the actor to one record.

    is_owner: actor uploaded/owns the record.
    is_linked_patient / is_linked_specialist: actor is the record's patient or specialist.
    has_care_relationship: actor (as specialist) has any appointment with the record's patient.
    has_active_care_relationship: same, restricted to pending/confirmed/completed appointments.
    """
    is_owner: bool = False
    is_linked_patient: bool = False
    is_linked_specialist: bool = False
    has_care_relationship: bool = False
    has_active_care_relationship: bool = False


NO_OWNERSHIP = Ownership()


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


Rule = Callable[[FrozenSet[str], Ownership], bool]


def _any_role(*required: str) -> Rule:
    wanted = frozenset(required)

    def rule(roles: FrozenSet[str], ownership: Ownership) -> bool:
        return bool(roles & wanted)

    return rule


def _authenticated(roles: FrozenSet[str], ownership: Ownership) -> bool:
    return bool(roles)


def _appointment_party(roles: FrozenSet[str], ownership: Ownership) -> bool:
    return ownership.is_linked_patient or ownership.is_linked_specialist


def _document_visible(roles: FrozenSet[str], ownership: Ownership) -> bool:
    if ROLE_ADMIN in roles or ownership.is_owner:
        return True
    return ROLE_SPECIALIST in roles and ownership.has_care_relationship


def _document_deletable(roles: FrozenSet[str], ownership: Ownership) -> bool:
    return ROLE_ADMIN in roles or ownership.is_owner


def _document_downloadable(roles: FrozenSet[str], ownership: Ownership) -> bool:
    if ownership.is_owner:
        return True
    return ROLE_SPECIALIST in roles and ownership.has_active_care_relationship


def _history_readable(roles: FrozenSet[str], ownership: Ownership) -> bool:
    if ROLE_ADMIN in roles:
        return True
    if ROLE_PATIENT in roles and ownership.is_linked_patient:
        return True
    if ROLE_SPECIALIST in roles and (ownership.is_linked_specialist or ownership.has_care_relationship):
        return True
    return False


_admin = _any_role(ROLE_ADMIN)
_specialist = _any_role(ROLE_SPECIALIST)

RULES: Dict[Tuple[str, str], Rule] = {
    (RESOURCE_APPOINTMENT, "list"): _authenticated,
    (RESOURCE_APPOINTMENT, "read"): _authenticated,
    (RESOURCE_APPOINTMENT, "create"): _authenticated,
    (RESOURCE_APPOINTMENT, "update"): _authenticated,
    (RESOURCE_APPOINTMENT, "cancel"): _appointment_party,
    (RESOURCE_APPOINTMENT, "delete"): _admin,

    (RESOURCE_DOCUMENT, "list"): _authenticated,
    (RESOURCE_DOCUMENT, "read"): _document_visible,
    (RESOURCE_DOCUMENT, "upload"): _authenticated,
    (RESOURCE_DOCUMENT, "delete"): _document_deletable,
    (RESOURCE_DOCUMENT, "download"): _document_downloadable,

    (RESOURCE_HISTORY, "list"): _admin,
    (RESOURCE_HISTORY, "read"): _history_readable,
    (RESOURCE_HISTORY, "read_unscoped"): _any_role(ROLE_ADMIN, ROLE_SPECIALIST, ROLE_PATIENT),
    (RESOURCE_HISTORY, "create"): _specialist,
    (RESOURCE_HISTORY, "update"): _specialist,
    (RESOURCE_HISTORY, "delete"): _admin,
}

# Administration resources: every action is administrator-only.
ADMIN_RESOURCES = frozenset({RESOURCE_PATIENT, RESOURCE_SPECIALIST, RESOURCE_USER, RESOURCE_AUDIT_LOG})


def evaluate(
    roles: Iterable[str],
    resource: str,
    action: str,
    ownership: Ownership = NO_OWNERSHIP,
) -> Decision:
    role_set = frozenset(roles)

    if resource in ADMIN_RESOURCES:
        rule = _admin
    else:
        rule = RULES.get((resource, action))

    if rule is None:
        return Decision(False, f"no rule for {resource}.{action}")

    if rule(role_set, ownership):
        return Decision(True)

    return Decision(False, f"{resource}.{action} denied for roles {sorted(role_set) or ['anonymous']}")
