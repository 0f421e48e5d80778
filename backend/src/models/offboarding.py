"""Offboarding SQLAlchemy models

An OffboardingProcess tracks an employee's exit and owns a checklist of
OffboardingTask rows. Tasks reference their process with ON DELETE RESTRICT:
a process can only be removed once every task pointing at it is gone.
"""

from datetime import datetime, timezone
from uuid import uuid4
import enum

from sqlalchemy import Column, Text, DateTime, Uuid, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship

from .base import Base


class OffboardingStatus(str, enum.Enum):
    """Lifecycle status shared by processes and tasks.

    State flow: PENDING → IN_PROGRESS → COMPLETED (SKIPPED for tasks only)
    """
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


def _status_column(default):
    return Column(
        SQLEnum(
            OffboardingStatus,
            name="offboardingstatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=default,
    )


class OffboardingProcess(Base):
    """Exit process of a single employee."""
    __tablename__ = "offboarding_process"
    __table_args__ = (
        Index("ix_offboarding_process_exit_date", "exit_date"),
        Index("ix_offboarding_process_employee_id", "employee_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    exit_date = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=True)
    status = _status_column(OffboardingStatus.PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    employee = relationship("Employee", back_populates="offboarding_processes")
    tasks = relationship("OffboardingTask", back_populates="process")


class OffboardingTask(Base):
    """Single checklist item of an offboarding process."""
    __tablename__ = "offboarding_task"
    __table_args__ = (
        Index("ix_offboarding_task_process_id", "process_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    process_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("offboarding_process.id", ondelete="RESTRICT"),
        nullable=False,
    )
    title = Column(Text, nullable=False)
    assignee = Column(Text, nullable=True)
    status = _status_column(OffboardingStatus.PENDING)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    process = relationship("OffboardingProcess", back_populates="tasks")
