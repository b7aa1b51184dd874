# backend/clinic_core/common/permissions.py

from __future__ import annotations

from typing import Dict, Optional

from rest_framework.permissions import BasePermission, SAFE_METHODS

from clinic_core.common.policy import evaluate
from clinic_core.common.roles import (  # noqa: F401
    ALL_ROLES,
    ROLE_ADMIN,
    ROLE_PATIENT,
    ROLE_PRECEDENCE,
    ROLE_SPECIALIST,
    ROLE_USER,
    primary_role,
    user_roles,
)

# viewset action -> policy action
DEFAULT_POLICY_ACTIONS: Dict[str, Optional[str]] = {
    "list": "list",
    "retrieve": "read",
    "create": "create",
    "update": "update",
    "partial_update": "update",
    "destroy": "delete",
}


class PolicyPermission(BasePermission):
    """
    Route-level gate backed by clinic_core.common.policy.

    The view declares:
      policy_resource: the policy resource name
      policy_actions:  viewset action -> policy action

    A policy action of None means the rule depends on the record, so the
    gate only requires authentication and the service evaluates the rule
    with the ownership facts once the record is loaded.

    If the action is unknown and the request is SAFE, fall back to
    list/retrieve instead of denying.
    """
    message = "You do not have permission to perform this action."

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        actions = getattr(view, "policy_actions", None) or DEFAULT_POLICY_ACTIONS
        action = self._infer_action(request, view)

        if action not in actions and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            action = "retrieve" if "pk" in kwargs else "list"

        # Unknown action => deny
        if action not in actions:
            return False

        policy_action = actions[action]
        if policy_action is None:
            return True

        return bool(evaluate(user_roles(user), view.policy_resource, policy_action))
