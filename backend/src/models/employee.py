"""Employee SQLAlchemy model

Employee is the personal record of someone hired by the company. It is created
at hire time, edited by HR workflows and finally anonymized in place by the
retention job once the employee's offboarding is older than the retention
horizon. The row itself is never deleted so payroll history keeps its link.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4
import enum

from sqlalchemy import Column, Text, Date, DateTime, Numeric, Uuid, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB


class EmployeeStatus(str, enum.Enum):
    """Employment status values.

    INACTIVE is also the terminal state of an anonymized employee.
    """
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    INACTIVE = "inactive"


class Employee(Base):
    """Employee model holding identifying and compensation fields.

    Identifying columns are nullable because anonymization clears them.
    email and employee_number stay unique after anonymization since their
    redacted values are derived from the employee id.
    """
    __tablename__ = "employee"
    __table_args__ = (
        Index("ix_employee_status", "status"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_number = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    phone_number = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(Text, nullable=True)
    marital_status = Column(Text, nullable=True)
    emergency_contact = Column(PortableJSONB, nullable=True)
    hire_date = Column(Date, nullable=True)
    salary = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status = Column(
        SQLEnum(
            EmployeeStatus,
            name="employeestatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user = relationship("User", back_populates="employee")
    offboarding_processes = relationship("OffboardingProcess", back_populates="employee")

    def to_dict(self):
        """Convert employee to dictionary representation"""
        return {
            "id": str(self.id),
            "employee_number": self.employee_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "address": self.address,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "gender": self.gender,
            "marital_status": self.marital_status,
            "emergency_contact": self.emergency_contact,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "salary": float(self.salary) if self.salary is not None else None,
            "status": self.status.value if self.status else None,
            "user_id": str(self.user_id) if self.user_id else None,
        }
