# backend/clinic_core/common/spectacular_hooks.py
from __future__ import annotations

VERSIONED_PREFIX = "/api/v1/"


def preprocess_exclude_legacy_api(endpoints):
    """
    The router is reachable under /api/v1/ and under the bare /api/ alias.
    Only the versioned routes are published in the schema.
    """
    return [
        endpoint
        for endpoint in endpoints
        if endpoint[0].startswith(VERSIONED_PREFIX) or not endpoint[0].startswith("/api/")
    ]
