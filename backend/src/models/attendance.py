"""Attendance SQLAlchemy model

One row per clock-in event. check_in drives retention.
"""

from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, Numeric, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import Base


class Attendance(Base):
    """Clock-in/clock-out record for an employee."""
    __tablename__ = "attendance"
    __table_args__ = (
        Index("ix_attendance_check_in", "check_in"),
        Index("ix_attendance_employee_id", "employee_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="CASCADE"),
        nullable=False,
    )
    check_in = Column(DateTime(timezone=True), nullable=False)
    check_out = Column(DateTime(timezone=True), nullable=True)
    status = Column(Text, nullable=False, default="present")  # present / absent / late / half_day
    work_hours = Column(Numeric(5, 2), nullable=True)

    employee = relationship("Employee")
