"""Vacation request lifecycle: create, edit, approve, reject, cancel and balance.

Every operation receives ``now`` explicitly; nothing here reads the wall clock.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from app.auth.schemas import AuthContext
from app.core.dates import business_day_span, total_day_span
from app.core.enums import AuditAction, LeaveType, VacationStatus
from app.core.exceptions import (
    EmployeeNotFound,
    Forbidden,
    ImmutableState,
    InvalidDateRange,
    NotFound,
    OverlappingRequest,
    ReplacementNotFound,
)
from app.core.models import Vacation, VacationAuditLog

from . import lifecycle
from .directory import EmployeeDirectory
from .schemas import (
    EmployeeSummary,
    SupportDocument,
    VacationBalanceResponse,
    VacationCreate,
    VacationResponse,
    VacationUpdate,
)
from .store import VacationStore
from .validation import validate_derived_days, validate_rejection_reason

logger = logging.getLogger(__name__)

# Columns that an explicit null in an edit must not clear
_REQUIRED_FIELDS = frozenset({
    "start_date", "end_date", "leave_type", "reason",
    "urgent", "requested_days", "business_days", "affects_salary",
})


def _support_document_columns(doc: Optional[Mapping[str, Any]], now: datetime) -> Dict[str, Any]:
    if doc is None:
        return dict.fromkeys(
            ("support_document_name", "support_document_url", "support_document_type", "support_document_uploaded_at")
        )
    return {
        "support_document_name": doc["name"],
        "support_document_url": doc["url"],
        "support_document_type": doc.get("content_type"),
        "support_document_uploaded_at": doc.get("uploaded_at") or now,
    }


def _support_document(v: Vacation) -> Optional[SupportDocument]:
    if v.support_document_url is None:
        return None
    return SupportDocument(
        name=v.support_document_name,
        url=v.support_document_url,
        content_type=v.support_document_type,
        uploaded_at=v.support_document_uploaded_at,
    )


def vacation_to_response(v: Vacation, today: date) -> VacationResponse:
    return VacationResponse(
        id=v.id,
        employee_id=v.employee_id,
        start_date=v.start_date,
        end_date=v.end_date,
        leave_type=v.leave_type,
        status=v.status,
        effective_status=lifecycle.derive_effective_status(v, today),
        reason=v.reason,
        notes=v.notes,
        replacement_employee_id=v.replacement_employee_id,
        replacement_instructions=v.replacement_instructions,
        urgent=v.urgent,
        requested_days=v.requested_days,
        business_days=v.business_days,
        total_days=total_day_span(v.start_date, v.end_date),
        vacation_year=v.vacation_year,
        approved_by=v.approved_by,
        decision_date=v.decision_date,
        rejection_reason=v.rejection_reason,
        affects_salary=v.affects_salary,
        support_document=_support_document(v),
        is_current=lifecycle.is_current(v, today),
        created_by=v.created_by,
        updated_by=v.updated_by,
        created_at=v.created_at,
        updated_at=v.updated_at,
    )


def _audit_entry(
    action: AuditAction,
    actor: AuthContext,
    now: datetime,
    from_status: Optional[VacationStatus] = None,
    to_status: Optional[VacationStatus] = None,
    remarks: Optional[str] = None,
) -> VacationAuditLog:
    return VacationAuditLog(
        id=uuid.uuid4(),
        action=action.value,
        from_status=from_status.value if from_status else None,
        to_status=to_status.value if to_status else None,
        performed_by=actor.requester_id,
        performed_by_role=actor.role.value,
        remarks=remarks,
        created_at=now,
    )


async def _get_or_404(store: VacationStore, vacation_id: UUID) -> Vacation:
    record = await store.find_by_id(vacation_id)
    if record is None:
        raise NotFound()
    return record


async def create_vacation(
    store: VacationStore,
    employees: EmployeeDirectory,
    requester: AuthContext,
    payload: VacationCreate,
    now: datetime,
    reject_past_start: bool = False,
) -> Vacation:
    """Create a pending request after date, identity and overlap checks."""
    # Employees always request for themselves; admin/HR may name someone else.
    employee_id = payload.employee_id if requester.is_elevated and payload.employee_id else requester.requester_id

    if payload.end_date <= payload.start_date:
        raise InvalidDateRange()
    if reject_past_start and payload.start_date < now.date():
        raise InvalidDateRange("Start date cannot be in the past")

    if not await employees.exists(employee_id):
        raise EmployeeNotFound()
    if payload.replacement_employee_id and not await employees.exists(payload.replacement_employee_id):
        raise ReplacementNotFound()

    requested_days = payload.requested_days
    if requested_days is None:
        requested_days = total_day_span(payload.start_date, payload.end_date)
        validate_derived_days(requested_days)
    business_days = payload.business_days
    if business_days is None:
        business_days = business_day_span(payload.start_date, payload.end_date)

    existing = await store.find_conflicting(
        employee_id, payload.start_date, payload.end_date, lifecycle.BLOCKING_STATUSES
    )
    if existing is not None:
        logger.warning("Overlapping request for employee %s (conflicts with %s)", employee_id, existing.id)
        raise OverlappingRequest()

    record = Vacation(
        id=uuid.uuid4(),
        employee_id=employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        leave_type=payload.leave_type.value,
        status=VacationStatus.PENDING.value,
        reason=payload.reason,
        notes=payload.notes,
        replacement_employee_id=payload.replacement_employee_id,
        replacement_instructions=payload.replacement_instructions,
        urgent=payload.urgent,
        requested_days=requested_days,
        business_days=business_days,
        vacation_year=payload.vacation_year or payload.start_date.year,
        affects_salary=payload.affects_salary,
        **_support_document_columns(
            payload.support_document.model_dump() if payload.support_document else None, now
        ),
        created_by=requester.requester_id,
        created_at=now,
        updated_at=now,
    )
    record = await store.insert(
        record,
        conflict_statuses=lifecycle.BLOCKING_STATUSES,
        audit=_audit_entry(AuditAction.CREATED, requester, now, to_status=VacationStatus.PENDING),
    )
    logger.info("Vacation %s created for employee %s (%s to %s)", record.id, employee_id, record.start_date, record.end_date)
    return record


async def update_vacation(
    store: VacationStore,
    employees: EmployeeDirectory,
    requester: AuthContext,
    vacation_id: UUID,
    payload: VacationUpdate,
    now: datetime,
    recompute_days: bool = False,
) -> Vacation:
    """Edit a pending request. Day counts stay frozen unless ``recompute_days`` is set."""
    record = await _get_or_404(store, vacation_id)
    if VacationStatus(record.status) not in lifecycle.EDITABLE_STATUSES:
        raise ImmutableState()
    if not requester.can_act_for(record.employee_id):
        raise Forbidden("Cannot modify another employee's request")

    patch: Dict[str, Any] = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k not in _REQUIRED_FIELDS
    }
    if "leave_type" in patch:
        patch["leave_type"] = patch["leave_type"].value
    if "support_document" in patch:
        # An explicit null removes the attachment
        patch.update(_support_document_columns(patch.pop("support_document"), now))

    replacement_id = patch.get("replacement_employee_id")
    if replacement_id and replacement_id != record.replacement_employee_id:
        if not await employees.exists(replacement_id):
            raise ReplacementNotFound()

    start = patch.get("start_date", record.start_date)
    end = patch.get("end_date", record.end_date)
    if end <= start:
        raise InvalidDateRange()
    dates_changed = (start, end) != (record.start_date, record.end_date)

    if dates_changed and recompute_days:
        if "requested_days" not in patch:
            patch["requested_days"] = total_day_span(start, end)
            validate_derived_days(patch["requested_days"])
        if "business_days" not in patch:
            patch["business_days"] = business_day_span(start, end)

    patch["updated_by"] = requester.requester_id
    patch["updated_at"] = now
    record = await store.update(
        vacation_id,
        patch,
        expected_statuses=lifecycle.EDITABLE_STATUSES,
        conflict_statuses=lifecycle.BLOCKING_STATUSES if dates_changed else None,
        audit=_audit_entry(AuditAction.UPDATED, requester, now, VacationStatus.PENDING, VacationStatus.PENDING),
    )
    logger.info("Vacation %s updated by %s", vacation_id, requester.requester_id)
    return record


async def approve_vacation(
    store: VacationStore,
    approver: AuthContext,
    vacation_id: UUID,
    now: datetime,
) -> Vacation:
    if not approver.is_elevated:
        raise Forbidden("Only admin or HR can approve requests")
    record = await _get_or_404(store, vacation_id)
    current = VacationStatus(record.status)
    lifecycle.ensure_transition(current, VacationStatus.APPROVED)

    record = await store.update(
        vacation_id,
        {
            "status": VacationStatus.APPROVED.value,
            "approved_by": approver.requester_id,
            "decision_date": now,
            "updated_by": approver.requester_id,
            "updated_at": now,
        },
        expected_statuses=lifecycle.sources_for(VacationStatus.APPROVED),
        audit=_audit_entry(AuditAction.APPROVED, approver, now, current, VacationStatus.APPROVED),
    )
    logger.info("Vacation %s approved by %s", vacation_id, approver.requester_id)
    return record


async def reject_vacation(
    store: VacationStore,
    approver: AuthContext,
    vacation_id: UUID,
    rejection_reason: Optional[str],
    now: datetime,
) -> Vacation:
    if not approver.is_elevated:
        raise Forbidden("Only admin or HR can reject requests")
    reason = validate_rejection_reason(rejection_reason)
    record = await _get_or_404(store, vacation_id)
    current = VacationStatus(record.status)
    lifecycle.ensure_transition(current, VacationStatus.REJECTED)

    record = await store.update(
        vacation_id,
        {
            "status": VacationStatus.REJECTED.value,
            "rejection_reason": reason,
            # The decider is recorded even though the outcome is a rejection
            "approved_by": approver.requester_id,
            "decision_date": now,
            "updated_by": approver.requester_id,
            "updated_at": now,
        },
        expected_statuses=lifecycle.sources_for(VacationStatus.REJECTED),
        audit=_audit_entry(AuditAction.REJECTED, approver, now, current, VacationStatus.REJECTED, remarks=reason),
    )
    logger.info("Vacation %s rejected by %s", vacation_id, approver.requester_id)
    return record


async def cancel_vacation(
    store: VacationStore,
    requester: AuthContext,
    vacation_id: UUID,
    now: datetime,
) -> Vacation:
    """Cancel a pending or approved request, including approved leave already under way."""
    record = await _get_or_404(store, vacation_id)
    if not requester.can_act_for(record.employee_id):
        raise Forbidden("Cannot cancel another employee's request")
    current = VacationStatus(record.status)
    lifecycle.ensure_transition(current, VacationStatus.CANCELLED)

    record = await store.update(
        vacation_id,
        {
            "status": VacationStatus.CANCELLED.value,
            "updated_by": requester.requester_id,
            "updated_at": now,
        },
        expected_statuses=lifecycle.sources_for(VacationStatus.CANCELLED),
        audit=_audit_entry(AuditAction.CANCELLED, requester, now, current, VacationStatus.CANCELLED),
    )
    logger.info("Vacation %s cancelled by %s", vacation_id, requester.requester_id)
    return record


async def get_vacation(
    store: VacationStore,
    requester: AuthContext,
    vacation_id: UUID,
) -> Vacation:
    record = await _get_or_404(store, vacation_id)
    if not requester.can_act_for(record.employee_id):
        raise Forbidden("Cannot view another employee's request")
    return record


async def list_vacations(
    store: VacationStore,
    requester: AuthContext,
    now: datetime,
    employee_id: Optional[UUID] = None,
    status: Optional[VacationStatus] = None,
    leave_type: Optional[LeaveType] = None,
    vacation_year: Optional[int] = None,
    urgent: Optional[bool] = None,
) -> List[Vacation]:
    """Requests visible to the requester, newest first.

    Plain employees only ever see their own; admin/HR see everyone unless
    ``employee_id`` narrows it. ``status`` matches the effective status as of ``now``.
    """
    if not requester.is_elevated:
        employee_id = requester.requester_id

    records = await store.find_by_employee(
        employee_id,
        statuses=lifecycle.stored_statuses_for(status) if status is not None else None,
        leave_type=leave_type,
        vacation_year=vacation_year,
        urgent=urgent,
    )
    if status is not None:
        today = now.date()
        records = [r for r in records if lifecycle.derive_effective_status(r, today) == status]
    return records


async def get_vacation_balance(
    store: VacationStore,
    employees: EmployeeDirectory,
    requester: AuthContext,
    employee_id: UUID,
    year: int,
    allocated_days: int,
    now: datetime,
) -> VacationBalanceResponse:
    """Business days consumed in ``year`` against an allowance supplied by the caller."""
    if not requester.can_act_for(employee_id):
        raise Forbidden("Cannot view another employee's balance")
    employee = await employees.get(employee_id)
    if employee is None:
        raise EmployeeNotFound()

    records = await store.find_by_employee_and_year(employee_id, year, lifecycle.CONSUMING_STATUSES)
    used_days = sum(r.business_days for r in records)
    today = now.date()
    return VacationBalanceResponse(
        employee=EmployeeSummary(id=employee.id, name=employee.full_name),
        year=year,
        allocated_days=allocated_days,
        used_days=used_days,
        remaining_days=allocated_days - used_days,
        vacations=[vacation_to_response(r, today) for r in records],
    )
