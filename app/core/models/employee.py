import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Uuid

from app.core.enums import Role
from app.db.session import Base


class Employee(Base):
    """Employee identity; also the principal behind every authenticated request."""

    __tablename__ = "employees"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    # empleado | admin | rrhh
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    department = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
