"""Skip job status machine and display vocabularies.

Edges: created -> sent -> in_progress -> completed, plus created -> in_progress
(start without sending), completion from any open status, and deletion
(open -> cancelled, after which the row is removed). ``completed`` and
``cancelled`` are terminal.
"""

from __future__ import annotations

from skipjobs.services.errors import ConflictError

CREATED = "created"
SENT = "sent"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

JOB_STATUSES = (CREATED, SENT, IN_PROGRESS, COMPLETED, CANCELLED)
TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED})
OPEN_STATUSES = frozenset({CREATED, SENT, IN_PROGRESS})

# operation -> (statuses it may run from, resulting status or None if unchanged)
TRANSITIONS: dict[str, tuple[frozenset[str], str | None]] = {
    "send": (frozenset({CREATED, SENT}), SENT),
    "start": (frozenset({CREATED, SENT}), IN_PROGRESS),
    "complete": (OPEN_STATUSES, COMPLETED),
    "update": (OPEN_STATUSES, None),
    "delete": (OPEN_STATUSES, CANCELLED),
}

_CONFLICT_MESSAGES = {
    ("send", COMPLETED): "Job already completed",
    ("complete", COMPLETED): "Job already completed",
    ("update", COMPLETED): "Cannot edit completed jobs",
    ("delete", COMPLETED): "Cannot delete completed jobs",
}

STATUS_LABELS = {
    CREATED: "Created",
    SENT: "Sent",
    IN_PROGRESS: "In Progress",
    COMPLETED: "Completed",
    CANCELLED: "Cancelled",
}

SKIP_SIZES = {
    "8": "8y",
    "12": "12y",
    "14": "14y",
    "16": "16y",
    "20": "20y",
    "35": "35y",
    "40": "40y",
}

SKIP_ACTIONS = {
    "drop": "Drop",
    "pick": "Pick",
    "pick_drop": "Pick & Drop",
}

TRUCK_TYPES = {
    "chain_lift": "Chain Lift",
    "hook_loader": "Hook Loader",
}


def can_apply(operation: str, status: str) -> bool:
    allowed, _ = TRANSITIONS[operation]
    return status in allowed


def next_status(operation: str, status: str) -> str:
    """Return the status ``operation`` leads to from ``status``.

    Raises ConflictError when the edge is not in the table.
    """
    allowed, target = TRANSITIONS[operation]
    if status not in allowed:
        message = _CONFLICT_MESSAGES.get(
            (operation, status), f"Cannot {operation} job with status: {status}",
        )
        raise ConflictError(message)
    return target or status


def skip_size_label(value: str | None) -> str:
    if not value:
        return ""
    return SKIP_SIZES.get(value, value)


def action_label(value: str | None) -> str:
    if not value:
        return ""
    return SKIP_ACTIONS.get(value, value)


def truck_type_label(value: str | None) -> str:
    if not value:
        return ""
    return TRUCK_TYPES.get(value, value)
