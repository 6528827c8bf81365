"""Field validation helpers.

Predicates are pure. ``ValidationErrors`` collects every violation so a
caller gets the full list in one response instead of fixing fields one
round trip at a time.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Any

from skipjobs.services.errors import ValidationError
from skipjobs.services.job_states import SKIP_SIZES, SKIP_ACTIONS, TRUCK_TYPES, JOB_STATUSES

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PHONE_RE = re.compile(r"^\+?[\d\s()-]{7,20}$")


def is_valid_uuid(val: Any) -> bool:
    return isinstance(val, str) and bool(_UUID_RE.match(val))


def is_valid_date(val: Any) -> bool:
    if not isinstance(val, str) or not _DATE_RE.match(val):
        return False
    try:
        date.fromisoformat(val)
    except ValueError:
        return False
    return True


def is_non_empty_string(val: Any) -> bool:
    return isinstance(val, str) and len(val.strip()) > 0


def is_valid_phone(val: Any) -> bool:
    return isinstance(val, str) and bool(_PHONE_RE.match(val))


def is_valid_skip_size(val: Any) -> bool:
    return isinstance(val, str) and val in SKIP_SIZES


def is_valid_action(val: Any) -> bool:
    return isinstance(val, str) and val in SKIP_ACTIONS


def is_valid_truck_type(val: Any) -> bool:
    return isinstance(val, str) and val in TRUCK_TYPES


def is_valid_status(val: Any) -> bool:
    return isinstance(val, str) and val in JOB_STATUSES


def is_number(val: Any) -> bool:
    # bool is an int subclass; a JSON true is not a weight.
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return False
    return math.isfinite(val)


def _present(val: Any) -> bool:
    return val is not None


class ValidationErrors:
    """Accumulate validation failures via chained calls."""

    def __init__(self) -> None:
        self.errors: list[str] = []

    def add(self, message: str) -> "ValidationErrors":
        self.errors.append(message)
        return self

    def require_uuid(self, field: str, val: Any) -> "ValidationErrors":
        if not is_valid_uuid(val):
            self.errors.append(f"{field} must be a valid UUID")
        return self

    def require_date(self, field: str, val: Any) -> "ValidationErrors":
        if not is_valid_date(val):
            self.errors.append(f"{field} must be a valid date (YYYY-MM-DD)")
        return self

    def require_non_empty(self, field: str, val: Any) -> "ValidationErrors":
        if not is_non_empty_string(val):
            self.errors.append(f"{field} is required")
        return self

    def require_action(self, field: str, val: Any) -> "ValidationErrors":
        if not _present(val):
            self.errors.append(f"{field} is required")
        elif not is_valid_action(val):
            self.errors.append(f"{field} must be drop, pick, or pick_drop")
        return self

    def optional_uuid(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not is_valid_uuid(val):
            self.errors.append(f"{field} must be a valid UUID if provided")
        return self

    def optional_skip_size(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not is_valid_skip_size(val):
            self.errors.append(f"{field} must be a valid skip size")
        return self

    def optional_action(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not is_valid_action(val):
            self.errors.append(f"{field} must be drop, pick, or pick_drop")
        return self

    def optional_truck_type(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not is_valid_truck_type(val):
            self.errors.append(f"{field} must be chain_lift or hook_loader")
        return self

    def optional_status(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not is_valid_status(val):
            self.errors.append(f"{field} must be a valid status")
        return self

    def optional_string(self, field: str, val: Any) -> "ValidationErrors":
        if _present(val) and not isinstance(val, str):
            self.errors.append(f"{field} must be a string")
        return self

    def optional_number(
        self, field: str, val: Any, minimum: float | None = None, maximum: float | None = None,
    ) -> "ValidationErrors":
        if not _present(val):
            return self
        if not is_number(val):
            self.errors.append(f"{field} must be a number")
        elif minimum is not None and val < minimum:
            self.errors.append(f"{field} must be at least {minimum}")
        elif maximum is not None and val > maximum:
            self.errors.append(f"{field} must be at most {maximum}")
        return self

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def to_response(self) -> dict:
        return {"error": "Validation failed", "details": list(self.errors)}

    def raise_if_errors(self) -> None:
        if self.has_errors():
            raise ValidationError(self.errors)
