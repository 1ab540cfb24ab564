"""
Vacation status machine.

    pending  --approve--> approved --(time)--> in_progress --(time)--> completed
    pending  --reject-->  rejected
    pending  --cancel-->  cancelled
    approved --cancel-->  cancelled

in_progress and completed are never written by the API; they are derived from
the calendar at read time by derive_effective_status.
"""

from datetime import date
from typing import Dict, FrozenSet

from app.core.enums import VacationStatus
from app.core.exceptions import InvalidTransition

PENDING = VacationStatus.PENDING
APPROVED = VacationStatus.APPROVED
REJECTED = VacationStatus.REJECTED
CANCELLED = VacationStatus.CANCELLED
IN_PROGRESS = VacationStatus.IN_PROGRESS
COMPLETED = VacationStatus.COMPLETED

TRANSITIONS: Dict[VacationStatus, FrozenSet[VacationStatus]] = {
    PENDING: frozenset({APPROVED, REJECTED, CANCELLED}),
    APPROVED: frozenset({CANCELLED}),
}

TERMINAL_STATUSES = frozenset({REJECTED, CANCELLED, COMPLETED})

# Records in these states block overlapping requests for the same employee
BLOCKING_STATUSES = frozenset({PENDING, APPROVED, IN_PROGRESS})

# Records in these states consume vacation balance
CONSUMING_STATUSES = frozenset({APPROVED, IN_PROGRESS, COMPLETED})

EDITABLE_STATUSES = frozenset({PENDING})


def can_transition(current: VacationStatus, target: VacationStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: VacationStatus, target: VacationStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Cannot change a request from '{current.value}' to '{target.value}'"
        )


def sources_for(target: VacationStatus) -> FrozenSet[VacationStatus]:
    """Statuses from which ``target`` is reachable; the store uses them as a compare-and-swap guard."""
    return frozenset(s for s, targets in TRANSITIONS.items() if target in targets)


def derive_effective_status(record, today: date) -> VacationStatus:
    """Status of ``record`` as of ``today``. Pure; the stored status is not touched."""
    stored = VacationStatus(record.status)
    if stored in (APPROVED, IN_PROGRESS):
        if today > record.end_date:
            return COMPLETED
        if record.start_date <= today:
            return IN_PROGRESS
    return stored


def is_current(record, today: date) -> bool:
    """Approved leave whose interval contains ``today``."""
    return derive_effective_status(record, today) == IN_PROGRESS


def stored_statuses_for(effective: VacationStatus) -> FrozenSet[VacationStatus]:
    """Stored statuses whose records can derive to ``effective``."""
    if effective in (APPROVED, IN_PROGRESS, COMPLETED):
        return frozenset({APPROVED, IN_PROGRESS, COMPLETED})
    return frozenset({effective})
