"""Work contracts. Only the vacation allowance is read by this service."""

import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import ContractStatus
from app.db.session import Base


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    contract_type = Column(String(30), nullable=False)  # indefinido, temporal, practicas, ...
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    vacation_days = Column(Integer, nullable=False, default=22)
    status = Column(String(20), nullable=False, default=ContractStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
