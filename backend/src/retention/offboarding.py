"""Offboarding lifecycle reaper.

Finds offboarding processes whose exit date is past the employee record
horizon, anonymizes the linked employees, then removes the processes'
tasks and finally the processes themselves.

The order is fixed:
1. Project (id, employee_id) of the expired processes
2. Anonymize every linked employee, one committed update each
3. Bulk-delete the tasks of the captured process ids
4. Bulk-delete the captured processes

Anonymization comes first: if the run dies after step 2 the PII is already
gone and the leftover tasks/processes are picked up by the next run. Tasks
go before processes because offboarding_task.process_id is ON DELETE
RESTRICT.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Any, Iterator, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, null, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Employee, EmployeeStatus, OffboardingProcess, OffboardingTask
from .exceptions import StoreError
from .schemas import ReapResult

logger = logging.getLogger(__name__)

# Upper bound on ids bound into a single IN (...) clause
ID_BATCH_SIZE = 1000


def build_redacted_email(employee_id) -> str:
    """Synthetic email derived only from the immutable employee id."""
    return f"redacted+{employee_id}@example.invalid"


def build_redacted_employee_number(employee_id) -> str:
    """Synthetic employee number derived only from the immutable employee id."""
    return f"redacted-{employee_id}"


# Values written to every anonymized employee regardless of id
REDACTED_EMPLOYEE_VALUES: Dict[str, Any] = {
    "first_name": "Redacted",
    "last_name": "Employee",
    "phone_number": None,
    "address": None,
    "date_of_birth": None,
    "gender": None,
    "marital_status": None,
    "salary": Decimal("0"),
    "status": EmployeeStatus.INACTIVE,
    "user_id": None,
}


def anonymization_values(employee_id) -> Dict[str, Any]:
    """Full set of column values for an anonymized employee.

    A pure function of the id: anonymizing the same employee twice writes
    byte-identical values, so re-runs never collide on the unique email or
    employee number.
    """
    return {
        **REDACTED_EMPLOYEE_VALUES,
        "email": build_redacted_email(employee_id),
        "employee_number": build_redacted_employee_number(employee_id),
        # SQL NULL rather than a JSON 'null' document
        "emergency_contact": null(),
    }


def anonymize_employee(db: Session, employee_id: UUID) -> int:
    """Irreversibly overwrite an employee's personal data in place.

    The row is kept for payroll and audit linkage; it is marked inactive and
    detached from its login account.

    Args:
        db: Database session
        employee_id: Employee to anonymize

    Returns:
        Number of employee rows updated (0 if the id does not exist)

    Raises:
        StoreError: If the update or its commit fails
    """
    try:
        result = db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(**anonymization_values(employee_id))
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("anonymize employee", e) from e

    logger.debug(f"Anonymized employee {employee_id}")
    return result.rowcount or 0


def _batches(ids: Sequence[UUID], size: Optional[int] = None) -> Iterator[Sequence[UUID]]:
    size = size or ID_BATCH_SIZE
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


class OffboardingReaper:
    """Anonymizes and removes offboarding data past its retention horizon.

    Not safe against a concurrent second run; the scheduler must guarantee
    at most one run at a time.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_expired(self, cutoff: datetime) -> List[Tuple[UUID, UUID]]:
        """Return (process_id, employee_id) of processes that exited before cutoff.

        Only the two ids are loaded, never the full rows.
        """
        try:
            rows = self.db.execute(
                select(OffboardingProcess.id, OffboardingProcess.employee_id)
                .where(OffboardingProcess.exit_date < cutoff)
                .order_by(OffboardingProcess.exit_date)
            ).all()
        except SQLAlchemyError as e:
            raise StoreError("find expired offboarding processes", e) from e
        return [(row.id, row.employee_id) for row in rows]

    def count_tasks(self, process_ids: Sequence[UUID]) -> int:
        """Count tasks attached to the given processes."""
        total = 0
        try:
            for batch in _batches(process_ids):
                total += self.db.scalar(
                    select(func.count())
                    .select_from(OffboardingTask)
                    .where(OffboardingTask.process_id.in_(batch))
                ) or 0
        except SQLAlchemyError as e:
            raise StoreError("count offboarding tasks", e) from e
        return total

    def _delete_by_ids(self, column, ids: Sequence[UUID], operation: str) -> int:
        model = column.class_
        deleted = 0
        try:
            for batch in _batches(ids):
                result = self.db.execute(
                    delete(model)
                    .where(column.in_(batch))
                    .execution_options(synchronize_session=False)
                )
                deleted += result.rowcount or 0
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(operation, e) from e
        return deleted

    def reap(self, employee_cutoff: datetime) -> ReapResult:
        """Anonymize and cascade-delete everything past the employee cutoff.

        Args:
            employee_cutoff: Processes with exit_date strictly earlier are reaped

        Returns:
            ReapResult with anonymized employees, deleted tasks and processes

        Raises:
            StoreError: If any step fails; earlier steps stay committed
        """
        expired = self.find_expired(employee_cutoff)
        if not expired:
            logger.info(
                "No expired offboarding processes",
                extra={"cutoff": employee_cutoff.isoformat()}
            )
            return ReapResult()

        process_ids = [process_id for process_id, _ in expired]

        # An employee can have several expired processes; anonymize once
        employee_ids = list(dict.fromkeys(employee_id for _, employee_id in expired))

        anonymized = 0
        for employee_id in employee_ids:
            anonymized += anonymize_employee(self.db, employee_id)

        deleted_tasks = self._delete_by_ids(
            OffboardingTask.process_id, process_ids, "delete offboarding tasks"
        )
        deleted_processes = self._delete_by_ids(
            OffboardingProcess.id, process_ids, "delete offboarding processes"
        )

        result = ReapResult(
            anonymized_count=anonymized,
            deleted_tasks=deleted_tasks,
            deleted_processes=deleted_processes,
        )
        logger.info(
            f"Reaped {deleted_processes} offboarding processes",
            extra={"cutoff": employee_cutoff.isoformat(), "stats": result.model_dump()}
        )
        return result
