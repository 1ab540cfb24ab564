"""Audit log for the vacation lifecycle: CREATED, UPDATED, APPROVED, REJECTED, CANCELLED."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class VacationAuditLog(Base):
    __tablename__ = "vacation_audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    vacation_id = Column(
        Uuid,
        ForeignKey("vacations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action = Column(String(50), nullable=False)
    from_status = Column(String(20), nullable=True)
    to_status = Column(String(20), nullable=True)
    performed_by = Column(Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    performed_by_role = Column(String(20), nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    vacation = relationship("Vacation", backref="audit_logs", foreign_keys=[vacation_id])
