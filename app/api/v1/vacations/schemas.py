"""Request/response models. Wire field names are the Spanish names existing clients send."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import LeaveType, VacationStatus


# ----- Nested -----
class SupportDocument(BaseModel):
    """Metadata of an uploaded supporting file (medical note, certificate). The file lives elsewhere."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., alias="nombre", min_length=1, max_length=255)
    url: str = Field(..., alias="url", min_length=1, max_length=1000)
    content_type: Optional[str] = Field(None, alias="tipo", max_length=100)
    uploaded_at: Optional[datetime] = Field(None, alias="fechaSubida")


class EmployeeSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str = Field(..., alias="nombre")


# ----- Create / Update -----
class VacationCreate(BaseModel):
    """Create a vacation request. ``employee_id`` is honored only for admin/HR requesters."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    employee_id: Optional[UUID] = Field(None, alias="empleado")
    start_date: date = Field(..., alias="fechaInicio")
    end_date: date = Field(..., alias="fechaFin")
    leave_type: LeaveType = Field(..., alias="tipoVacacion")
    reason: str = Field(..., alias="motivo", min_length=1, max_length=500)
    notes: Optional[str] = Field(None, alias="observaciones", max_length=1000)
    replacement_employee_id: Optional[UUID] = Field(None, alias="reemplazo")
    replacement_instructions: Optional[str] = Field(None, alias="instruccionesReemplazo", max_length=1000)
    urgent: bool = Field(False, alias="urgente")
    requested_days: Optional[float] = Field(None, alias="diasSolicitados", ge=0.5, le=365)
    business_days: Optional[int] = Field(None, alias="diasHabiles", ge=0)
    vacation_year: Optional[int] = Field(None, alias="anoVacacional", ge=1900, le=9999)
    affects_salary: bool = Field(False, alias="afectaSalario")
    support_document: Optional[SupportDocument] = Field(None, alias="documentoSoporte")


class VacationUpdate(BaseModel):
    """Edit a pending request. Status and decision fields are not editable here."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    start_date: Optional[date] = Field(None, alias="fechaInicio")
    end_date: Optional[date] = Field(None, alias="fechaFin")
    leave_type: Optional[LeaveType] = Field(None, alias="tipoVacacion")
    reason: Optional[str] = Field(None, alias="motivo", min_length=1, max_length=500)
    notes: Optional[str] = Field(None, alias="observaciones", max_length=1000)
    replacement_employee_id: Optional[UUID] = Field(None, alias="reemplazo")
    replacement_instructions: Optional[str] = Field(None, alias="instruccionesReemplazo", max_length=1000)
    urgent: Optional[bool] = Field(None, alias="urgente")
    requested_days: Optional[float] = Field(None, alias="diasSolicitados", ge=0.5, le=365)
    business_days: Optional[int] = Field(None, alias="diasHabiles", ge=0)
    affects_salary: Optional[bool] = Field(None, alias="afectaSalario")
    support_document: Optional[SupportDocument] = Field(None, alias="documentoSoporte")


# ----- Reject -----
class VacationReject(BaseModel):
    """The reason is checked by the engine so a missing one reports as ValidationError."""

    model_config = ConfigDict(populate_by_name=True)

    rejection_reason: Optional[str] = Field(None, alias="motivoRechazo")


# ----- Responses -----
class VacationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    employee_id: UUID = Field(..., alias="empleado")
    start_date: date = Field(..., alias="fechaInicio")
    end_date: date = Field(..., alias="fechaFin")
    leave_type: LeaveType = Field(..., alias="tipoVacacion")
    status: VacationStatus = Field(..., alias="estado")
    effective_status: VacationStatus = Field(..., alias="estadoEfectivo")
    reason: str = Field(..., alias="motivo")
    notes: Optional[str] = Field(None, alias="observaciones")
    replacement_employee_id: Optional[UUID] = Field(None, alias="reemplazo")
    replacement_instructions: Optional[str] = Field(None, alias="instruccionesReemplazo")
    urgent: bool = Field(..., alias="urgente")
    requested_days: float = Field(..., alias="diasSolicitados")
    business_days: int = Field(..., alias="diasHabiles")
    total_days: int = Field(..., alias="diasTotales")
    vacation_year: int = Field(..., alias="anoVacacional")
    approved_by: Optional[UUID] = Field(None, alias="aprobadoPor")
    decision_date: Optional[datetime] = Field(None, alias="fechaAprobacion")
    rejection_reason: Optional[str] = Field(None, alias="motivoRechazo")
    affects_salary: bool = Field(..., alias="afectaSalario")
    support_document: Optional[SupportDocument] = Field(None, alias="documentoSoporte")
    is_current: bool = Field(..., alias="vigente")
    created_by: UUID = Field(..., alias="creadoPor")
    updated_by: Optional[UUID] = Field(None, alias="modificadoPor")
    created_at: datetime = Field(..., alias="fechaSolicitud")
    updated_at: datetime = Field(..., alias="updatedAt")


class VacationBalanceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee: EmployeeSummary = Field(..., alias="empleado")
    year: int = Field(..., alias="año")
    allocated_days: int = Field(..., alias="diasDisponibles")
    used_days: int = Field(..., alias="diasUtilizados")
    remaining_days: int = Field(..., alias="diasRestantes")
    vacations: List[VacationResponse] = Field(default_factory=list, alias="vacaciones")
