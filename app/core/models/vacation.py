"""Vacation/leave requests. Status values are the stored wire values of VacationStatus."""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import VacationStatus
from app.db.session import Base


class Vacation(Base):
    __tablename__ = "vacations"
    __table_args__ = (
        # Conflict lookups filter by employee, status and the date range
        Index("ix_vacations_employee_dates", "employee_id", "start_date", "end_date"),
        Index("ix_vacations_employee_year", "employee_id", "vacation_year"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    leave_type = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False, default=VacationStatus.PENDING.value, index=True)
    reason = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    replacement_employee_id = Column(Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    replacement_instructions = Column(Text, nullable=True)
    urgent = Column(Boolean, nullable=False, default=False)
    requested_days = Column(Float, nullable=False)
    business_days = Column(Integer, nullable=False)
    vacation_year = Column(Integer, nullable=False)
    approved_by = Column(Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    decision_date = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(String(500), nullable=True)
    affects_salary = Column(Boolean, nullable=False, default=False)
    # documentoSoporte: metadata only, the file itself is stored elsewhere
    support_document_name = Column(String(255), nullable=True)
    support_document_url = Column(String(1000), nullable=True)
    support_document_type = Column(String(100), nullable=True)
    support_document_uploaded_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Uuid, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    updated_by = Column(Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
    replacement = relationship("Employee", foreign_keys=[replacement_employee_id])
    approver = relationship("Employee", foreign_keys=[approved_by])
