# backend/clinic_core/common/api/params.py
from __future__ import annotations

from clinic_core.common.api.exceptions import BadRequest


def parse_positive_int(value, *, field_name: str = "id") -> int:
    """
    Path ids must be positive integers. Anything else is a 400 raised
    before the record is looked up or any role is checked.
    """
    raw = str(value).strip() if value is not None else ""
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise BadRequest(f"Invalid {field_name}: a positive integer is required.")
    return int(raw)
