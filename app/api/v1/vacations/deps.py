from datetime import datetime, timezone
from functools import lru_cache

from app.core.config import Settings, settings
from app.db.session import AsyncSessionLocal

from .directory import ContractDirectory, EmployeeDirectory, SqlContractDirectory, SqlEmployeeDirectory
from .store import SqlVacationStore, VacationStore


# One store per process: its per-employee locks must be shared by all requests.
@lru_cache
def get_vacation_store() -> VacationStore:
    return SqlVacationStore(AsyncSessionLocal)


@lru_cache
def get_employee_directory() -> EmployeeDirectory:
    return SqlEmployeeDirectory(AsyncSessionLocal)


@lru_cache
def get_contract_directory() -> ContractDirectory:
    return SqlContractDirectory(AsyncSessionLocal)


def get_settings() -> Settings:
    return settings


def get_now() -> datetime:
    """Request timestamp handed to the engine; tests override it for fixed dates."""
    return datetime.now(timezone.utc)
