"""Read-only lookups into employee and contract data owned by other modules."""

from datetime import date
from typing import Optional, Protocol
from uuid import UUID

from sqlalchemy import or_, select

from app.core.enums import ContractStatus
from app.core.models import Contract, Employee

from .store import SqlCollaborator


class EmployeeDirectory(Protocol):
    async def exists(self, employee_id: UUID) -> bool:
        ...

    async def get(self, employee_id: UUID) -> Optional[Employee]:
        ...


class ContractDirectory(Protocol):
    async def allocated_days(self, employee_id: UUID, year: int) -> Optional[int]:
        """Vacation allowance for ``year``, or None when no active contract covers it."""
        ...


class SqlEmployeeDirectory(SqlCollaborator):
    async def exists(self, employee_id: UUID) -> bool:
        async with self._session() as session:
            result = await session.execute(select(Employee.id).where(Employee.id == employee_id))
            return result.scalar_one_or_none() is not None

    async def get(self, employee_id: UUID) -> Optional[Employee]:
        async with self._session() as session:
            return await session.get(Employee, employee_id)


class SqlContractDirectory(SqlCollaborator):
    async def allocated_days(self, employee_id: UUID, year: int) -> Optional[int]:
        """Allowance from the most recent active contract overlapping the year."""
        async with self._session() as session:
            result = await session.execute(
                select(Contract.vacation_days)
                .where(
                    Contract.employee_id == employee_id,
                    Contract.status == ContractStatus.ACTIVE.value,
                    Contract.start_date <= date(year, 12, 31),
                    or_(Contract.end_date.is_(None), Contract.end_date >= date(year, 1, 1)),
                )
                .order_by(Contract.start_date.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()
