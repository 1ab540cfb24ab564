from app.core.models.employee import Employee
from app.core.models.contract import Contract
from app.core.models.vacation import Vacation
from app.core.models.vacation_audit_log import VacationAuditLog

__all__ = [
    "Contract",
    "Employee",
    "Vacation",
    "VacationAuditLog",
]
