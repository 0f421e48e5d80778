"""Payroll SQLAlchemy models

PayrollRecord is the computed compensation of one employee for one pay
period. PayrollOverride is a manual adjustment for the same employee and
period; it references the period, not the record, so the two categories are
purged independently of each other.

Both are financial records and carry the longest retention horizon.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Column, Text, Date, DateTime, Numeric, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import Base


class PayrollRecord(Base):
    """Computed payroll for an employee and pay period."""
    __tablename__ = "payroll_record"
    __table_args__ = (
        Index("ix_payroll_record_created_at", "created_at"),
        Index("ix_payroll_record_employee_period", "employee_id", "period_start"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    gross_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    deductions = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    net_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status = Column(Text, nullable=False, default="draft")  # draft / processed / paid
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    employee = relationship("Employee")


class PayrollOverride(Base):
    """Manual adjustment applied to an employee's payroll for a period."""
    __tablename__ = "payroll_override"
    __table_args__ = (
        Index("ix_payroll_override_created_at", "created_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    employee = relationship("Employee")
