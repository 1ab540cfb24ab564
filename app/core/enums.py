from enum import Enum


class Role(str, Enum):
    EMPLOYEE = "empleado"
    ADMIN = "admin"
    HR = "rrhh"


class Capability(str, Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"
    HR = "hr"


ROLE_CAPABILITIES = {
    Role.EMPLOYEE: frozenset({Capability.EMPLOYEE}),
    Role.ADMIN: frozenset({Capability.EMPLOYEE, Capability.ADMIN}),
    Role.HR: frozenset({Capability.EMPLOYEE, Capability.HR}),
}

ELEVATED_CAPABILITIES = frozenset({Capability.ADMIN, Capability.HR})


class LeaveType(str, Enum):
    VACATION = "vacaciones"
    PERSONAL_LEAVE = "permiso_personal"
    MEDICAL_LEAVE = "licencia_medica"
    MARRIAGE_LEAVE = "permiso_matrimonio"
    MATERNITY_LEAVE = "permiso_maternidad"
    PATERNITY_LEAVE = "permiso_paternidad"
    UNPAID_LEAVE = "licencia_sin_goce"
    OTHER = "otro"


class VacationStatus(str, Enum):
    PENDING = "pendiente"
    APPROVED = "aprobada"
    REJECTED = "rechazada"
    CANCELLED = "cancelada"
    IN_PROGRESS = "en_curso"
    COMPLETED = "completada"


class ContractStatus(str, Enum):
    DRAFT = "borrador"
    ACTIVE = "activo"
    FINISHED = "finalizado"
    CANCELLED = "cancelado"
    RENEWED = "renovado"


class AuditAction(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
