from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_elevated
from app.auth.schemas import AuthContext
from app.core.config import Settings
from app.core.enums import LeaveType, VacationStatus
from app.core.exceptions import Forbidden, ServiceError

from . import service
from .deps import get_contract_directory, get_employee_directory, get_now, get_settings, get_vacation_store
from .directory import ContractDirectory, EmployeeDirectory
from .schemas import VacationBalanceResponse, VacationCreate, VacationReject, VacationResponse, VacationUpdate
from .store import VacationStore

router = APIRouter(prefix="/api/vacations", tags=["vacations"])


def _http_error(e: ServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post(
    "",
    response_model=VacationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_vacation(
    payload: VacationCreate,
    store: VacationStore = Depends(get_vacation_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
    current_user: AuthContext = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    """Request leave. Employees request for themselves; admin/HR may set ``empleado``."""
    try:
        record = await service.create_vacation(
            store,
            employees,
            current_user,
            payload,
            now,
            reject_past_start=settings.reject_past_start_dates,
        )
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())


@router.get(
    "",
    response_model=List[VacationResponse],
)
async def list_vacations(
    employee_id: Optional[UUID] = Query(None, alias="empleado"),
    status_filter: Optional[VacationStatus] = Query(None, alias="estado"),
    leave_type: Optional[LeaveType] = Query(None, alias="tipoVacacion"),
    vacation_year: Optional[int] = Query(None, alias="anoVacacional", ge=1900, le=9999),
    urgent: Optional[bool] = Query(None, alias="urgente"),
    store: VacationStore = Depends(get_vacation_store),
    current_user: AuthContext = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> List[VacationResponse]:
    """Employees get their own requests; admin/HR get everyone's, optionally filtered by ``empleado``."""
    try:
        records = await service.list_vacations(
            store,
            current_user,
            now,
            employee_id=employee_id,
            status=status_filter,
            leave_type=leave_type,
            vacation_year=vacation_year,
            urgent=urgent,
        )
    except ServiceError as e:
        raise _http_error(e)
    today = now.date()
    return [service.vacation_to_response(r, today) for r in records]


@router.get(
    "/employee/{employee_id}/balance",
    response_model=VacationBalanceResponse,
)
async def get_vacation_balance(
    employee_id: UUID,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    store: VacationStore = Depends(get_vacation_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
    contracts: ContractDirectory = Depends(get_contract_directory),
    current_user: AuthContext = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> VacationBalanceResponse:
    """Business days used in the year against the active contract's allowance."""
    year = year or now.year
    # Before the contract lookup
    if not current_user.can_act_for(employee_id):
        raise _http_error(Forbidden("Cannot view another employee's balance"))
    try:
        allocated = await contracts.allocated_days(employee_id, year)
        if allocated is None:
            allocated = settings.default_vacation_days
        return await service.get_vacation_balance(
            store, employees, current_user, employee_id, year, allocated, now
        )
    except ServiceError as e:
        raise _http_error(e)


@router.get(
    "/{vacation_id}",
    response_model=VacationResponse,
)
async def get_vacation(
    vacation_id: UUID,
    store: VacationStore = Depends(get_vacation_store),
    current_user: AuthContext = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    try:
        record = await service.get_vacation(store, current_user, vacation_id)
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())


@router.put(
    "/{vacation_id}",
    response_model=VacationResponse,
)
async def update_vacation(
    vacation_id: UUID,
    payload: VacationUpdate,
    store: VacationStore = Depends(get_vacation_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
    current_user: AuthContext = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    """Edit a pending request."""
    try:
        record = await service.update_vacation(
            store,
            employees,
            current_user,
            vacation_id,
            payload,
            now,
            recompute_days=settings.recompute_days_on_update,
        )
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())


@router.post(
    "/{vacation_id}/approve",
    response_model=VacationResponse,
)
async def approve_vacation(
    vacation_id: UUID,
    store: VacationStore = Depends(get_vacation_store),
    current_user: AuthContext = Depends(require_elevated),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    """Approve a pending request. Admin or HR only."""
    try:
        record = await service.approve_vacation(store, current_user, vacation_id, now)
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())


@router.post(
    "/{vacation_id}/reject",
    response_model=VacationResponse,
)
async def reject_vacation(
    vacation_id: UUID,
    payload: Optional[VacationReject] = None,
    store: VacationStore = Depends(get_vacation_store),
    current_user: AuthContext = Depends(require_elevated),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    """Reject a pending request with ``motivoRechazo``. Admin or HR only."""
    try:
        record = await service.reject_vacation(
            store, current_user, vacation_id, payload.rejection_reason if payload else None, now
        )
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())


@router.post(
    "/{vacation_id}/cancel",
    response_model=VacationResponse,
)
async def cancel_vacation(
    vacation_id: UUID,
    store: VacationStore = Depends(get_vacation_store),
    current_user: AuthContext = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> VacationResponse:
    """Cancel a pending or approved request."""
    try:
        record = await service.cancel_vacation(store, current_user, vacation_id, now)
    except ServiceError as e:
        raise _http_error(e)
    return service.vacation_to_response(record, now.date())
