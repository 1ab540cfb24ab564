import os
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, Dict

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.v1.vacations.deps import get_contract_directory, get_employee_directory, get_now, get_vacation_store
from app.api.v1.vacations.directory import SqlContractDirectory, SqlEmployeeDirectory
from app.api.v1.vacations.store import SqlVacationStore
from app.auth.schemas import AuthContext
from app.auth.security import create_access_token
from app.core.enums import Role
from app.core.models import Employee
from app.db.session import Base, get_db
from app.main import app


# Mid-week reference instant; scenarios in July 2024 are all in the future.
FIXED_NOW = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh file-backed SQLite database per test, so separate sessions see each other's commits."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'vacations.db'}", echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def store(session_factory) -> SqlVacationStore:
    return SqlVacationStore(session_factory)


@pytest.fixture()
def employee_directory(session_factory) -> SqlEmployeeDirectory:
    return SqlEmployeeDirectory(session_factory)


@pytest.fixture()
def contract_directory(session_factory) -> SqlContractDirectory:
    return SqlContractDirectory(session_factory)


@pytest.fixture()
async def employees(db_session: AsyncSession) -> Dict[str, Employee]:
    """One employee per role plus a second plain employee."""
    people = {
        "ana": Employee(id=uuid.uuid4(), first_name="Ana", last_name="Ruiz", email="ana@example.com", role=Role.EMPLOYEE.value),
        "luis": Employee(id=uuid.uuid4(), first_name="Luis", last_name="Mora", email="luis@example.com", role=Role.EMPLOYEE.value),
        "hr": Employee(id=uuid.uuid4(), first_name="Marta", last_name="Gil", email="rrhh@example.com", role=Role.HR.value),
        "admin": Employee(id=uuid.uuid4(), first_name="Pablo", last_name="Sanz", email="admin@example.com", role=Role.ADMIN.value),
    }
    db_session.add_all(people.values())
    await db_session.commit()
    return people


@pytest.fixture()
def ctx(employees) -> Callable[[str], AuthContext]:
    """Build the requester context the router would hand to the engine."""

    def _ctx(name: str) -> AuthContext:
        employee = employees[name]
        return AuthContext.for_role(employee.id, Role(employee.role))

    return _ctx


@pytest.fixture()
def auth_headers(employees) -> Callable[[str], Dict[str, str]]:
    def _headers(name: str) -> Dict[str, str]:
        employee = employees[name]
        token = create_access_token(subject={"userId": str(employee.id), "role": employee.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
async def client(session_factory, store, employee_directory, contract_directory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app, with every collaborator pointed at the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_vacation_store] = lambda: store
    app.dependency_overrides[get_employee_directory] = lambda: employee_directory
    app.dependency_overrides[get_contract_directory] = lambda: contract_directory
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
