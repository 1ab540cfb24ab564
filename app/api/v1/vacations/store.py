"""
Persistence collaborator for vacation records.

insert/update are conditional writes: the overlap query is re-run inside the
write transaction while writers for the same employee are serialized, so two
concurrent requests cannot both commit overlapping intervals.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Dict, FrozenSet, Iterable, List, Optional, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.enums import LeaveType, VacationStatus
from app.core.exceptions import InvalidTransition, NotFound, OverlappingRequest, StoreUnavailable
from app.core.models import Employee, Vacation, VacationAuditLog
from app.db.session import CONNECTION_ERRORS

logger = logging.getLogger(__name__)


class VacationStore(Protocol):
    async def insert(
        self,
        record: Vacation,
        *,
        conflict_statuses: FrozenSet[VacationStatus],
        audit: Optional[VacationAuditLog] = None,
    ) -> Vacation:
        ...

    async def update(
        self,
        vacation_id: UUID,
        patch: Dict[str, Any],
        *,
        expected_statuses: FrozenSet[VacationStatus],
        conflict_statuses: Optional[FrozenSet[VacationStatus]] = None,
        audit: Optional[VacationAuditLog] = None,
    ) -> Vacation:
        ...

    async def find_by_id(self, vacation_id: UUID) -> Optional[Vacation]:
        ...

    async def find_conflicting(
        self,
        employee_id: UUID,
        start: date,
        end: date,
        statuses: Iterable[VacationStatus],
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Vacation]:
        ...

    async def find_by_employee_and_year(
        self,
        employee_id: UUID,
        year: int,
        statuses: Iterable[VacationStatus],
    ) -> List[Vacation]:
        ...

    async def find_by_employee(
        self,
        employee_id: Optional[UUID],
        *,
        statuses: Optional[Iterable[VacationStatus]] = None,
        leave_type: Optional[LeaveType] = None,
        vacation_year: Optional[int] = None,
        urgent: Optional[bool] = None,
    ) -> List[Vacation]:
        """Newest first. ``employee_id=None`` spans every employee."""
        ...


class SqlCollaborator:
    """Opens one session per call and reports connectivity failures as StoreUnavailable."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except CONNECTION_ERRORS as e:
            logger.error("Database unavailable: %s", e)
            raise StoreUnavailable() from e


def _status_values(statuses: Iterable[VacationStatus]) -> List[str]:
    return [VacationStatus(s).value for s in statuses]


def _conflict_query(
    employee_id: UUID,
    start: date,
    end: date,
    statuses: Iterable[VacationStatus],
    exclude_id: Optional[UUID] = None,
):
    # Same inclusive predicate as app.core.dates.intervals_overlap
    stmt = select(Vacation).where(
        Vacation.employee_id == employee_id,
        Vacation.status.in_(_status_values(statuses)),
        Vacation.start_date <= end,
        Vacation.end_date >= start,
    )
    if exclude_id is not None:
        stmt = stmt.where(Vacation.id != exclude_id)
    return stmt.order_by(Vacation.start_date).limit(1)


class SqlVacationStore(SqlCollaborator):
    def __init__(self, session_factory: async_sessionmaker) -> None:
        super().__init__(session_factory)
        # Entries vanish once no coroutine holds or waits on the lock
        self._locks: "weakref.WeakValueDictionary[UUID, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _employee_lock(self, employee_id: UUID) -> asyncio.Lock:
        # In-process serialization; the row lock below covers other processes.
        lock = self._locks.get(employee_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[employee_id] = lock
        return lock

    async def _lock_employee_row(self, session: AsyncSession, employee_id: UUID) -> None:
        # FOR UPDATE is a no-op on SQLite, which serializes writers on its own.
        await session.execute(
            select(Employee.id).where(Employee.id == employee_id).with_for_update()
        )

    async def insert(
        self,
        record: Vacation,
        *,
        conflict_statuses: FrozenSet[VacationStatus],
        audit: Optional[VacationAuditLog] = None,
    ) -> Vacation:
        async with self._employee_lock(record.employee_id):
            async with self._session() as session:
                async with session.begin():
                    await self._lock_employee_row(session, record.employee_id)
                    conflict = (await session.execute(
                        _conflict_query(record.employee_id, record.start_date, record.end_date, conflict_statuses)
                    )).scalar_one_or_none()
                    if conflict is not None:
                        logger.warning(
                            "Rejected overlapping insert for employee %s: conflicts with %s",
                            record.employee_id,
                            conflict.id,
                        )
                        raise OverlappingRequest()
                    session.add(record)
                    if audit is not None:
                        audit.vacation_id = record.id
                        session.add(audit)
        return record

    async def update(
        self,
        vacation_id: UUID,
        patch: Dict[str, Any],
        *,
        expected_statuses: FrozenSet[VacationStatus],
        conflict_statuses: Optional[FrozenSet[VacationStatus]] = None,
        audit: Optional[VacationAuditLog] = None,
    ) -> Vacation:
        current = await self.find_by_id(vacation_id)
        if current is None:
            raise NotFound()

        async with self._employee_lock(current.employee_id):
            async with self._session() as session:
                async with session.begin():
                    if conflict_statuses is not None:
                        await self._lock_employee_row(session, current.employee_id)
                    record = (await session.execute(
                        select(Vacation).where(Vacation.id == vacation_id).with_for_update()
                    )).scalar_one_or_none()
                    if record is None:
                        raise NotFound()
                    if VacationStatus(record.status) not in expected_statuses:
                        # Lost a race with another writer
                        raise InvalidTransition(
                            f"Request is '{record.status}' and can no longer be changed this way"
                        )

                    if conflict_statuses is not None:
                        start = patch.get("start_date", record.start_date)
                        end = patch.get("end_date", record.end_date)
                        conflict = (await session.execute(
                            _conflict_query(record.employee_id, start, end, conflict_statuses, exclude_id=record.id)
                        )).scalar_one_or_none()
                        if conflict is not None:
                            logger.warning(
                                "Rejected overlapping update of %s: conflicts with %s", record.id, conflict.id
                            )
                            raise OverlappingRequest()

                    for field, value in patch.items():
                        setattr(record, field, value)
                    if audit is not None:
                        audit.vacation_id = record.id
                        session.add(audit)
        return record

    async def find_by_id(self, vacation_id: UUID) -> Optional[Vacation]:
        async with self._session() as session:
            return await session.get(Vacation, vacation_id)

    async def find_conflicting(
        self,
        employee_id: UUID,
        start: date,
        end: date,
        statuses: Iterable[VacationStatus],
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Vacation]:
        async with self._session() as session:
            result = await session.execute(_conflict_query(employee_id, start, end, statuses, exclude_id))
            return result.scalar_one_or_none()

    async def find_by_employee_and_year(
        self,
        employee_id: UUID,
        year: int,
        statuses: Iterable[VacationStatus],
    ) -> List[Vacation]:
        async with self._session() as session:
            result = await session.execute(
                select(Vacation)
                .where(
                    Vacation.employee_id == employee_id,
                    Vacation.vacation_year == year,
                    Vacation.status.in_(_status_values(statuses)),
                )
                .order_by(Vacation.start_date)
            )
            return list(result.scalars().all())

    async def find_by_employee(
        self,
        employee_id: Optional[UUID],
        *,
        statuses: Optional[Iterable[VacationStatus]] = None,
        leave_type: Optional[LeaveType] = None,
        vacation_year: Optional[int] = None,
        urgent: Optional[bool] = None,
    ) -> List[Vacation]:
        stmt = select(Vacation)
        if employee_id is not None:
            stmt = stmt.where(Vacation.employee_id == employee_id)
        if statuses is not None:
            stmt = stmt.where(Vacation.status.in_(_status_values(statuses)))
        if leave_type is not None:
            stmt = stmt.where(Vacation.leave_type == LeaveType(leave_type).value)
        if vacation_year is not None:
            stmt = stmt.where(Vacation.vacation_year == vacation_year)
        if urgent is not None:
            stmt = stmt.where(Vacation.urgent.is_(urgent))
        stmt = stmt.order_by(Vacation.created_at.desc(), Vacation.urgent.desc())

        async with self._session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
