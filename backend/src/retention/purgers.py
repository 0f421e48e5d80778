"""Category purgers.

One purger per independent data category. A purge is a single bulk
``DELETE ... WHERE <timestamp> < :cutoff`` committed as its own unit of work;
a failure rolls back that unit only and surfaces as StoreError.
"""

import logging
from datetime import datetime
from typing import Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import AuditLog, Attendance, PayrollRecord, PayrollOverride
from .exceptions import StoreError
from .policy import RetentionCategory

logger = logging.getLogger(__name__)


class CategoryPurger:
    """Hard-deletes rows of one model older than a cutoff.

    Args:
        category: Retention category the purger serves
        model: SQLAlchemy model class
        timestamp_attr: Name of the model attribute compared to the cutoff
    """

    def __init__(self, category: RetentionCategory, model, timestamp_attr: str):
        self.category = category
        self.model = model
        self.timestamp_attr = timestamp_attr

    @property
    def timestamp_column(self):
        return getattr(self.model, self.timestamp_attr)

    def count(self, db: Session, cutoff: datetime) -> int:
        """Count rows that a purge with this cutoff would delete."""
        try:
            return db.scalar(
                select(func.count())
                .select_from(self.model)
                .where(self.timestamp_column < cutoff)
            ) or 0
        except SQLAlchemyError as e:
            raise StoreError(f"count {self.category.value}", e) from e

    def purge(self, db: Session, cutoff: datetime) -> int:
        """Delete every row whose timestamp is strictly earlier than cutoff.

        Args:
            db: Database session
            cutoff: Rows older than this are removed

        Returns:
            Number of rows deleted (0 when nothing matched)

        Raises:
            StoreError: If the delete or its commit fails
        """
        try:
            result = db.execute(
                delete(self.model)
                .where(self.timestamp_column < cutoff)
                .execution_options(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"purge {self.category.value}", e) from e

        deleted = result.rowcount or 0
        logger.info(
            f"Purged {deleted} {self.category.value} rows",
            extra={"category": self.category.value, "cutoff": cutoff.isoformat()}
        )
        return deleted

    def __repr__(self) -> str:
        return f"CategoryPurger({self.category.value}, {self.model.__name__}.{self.timestamp_attr})"


audit_log_purger = CategoryPurger(RetentionCategory.AUDIT_LOGS, AuditLog, "created_at")
attendance_purger = CategoryPurger(RetentionCategory.ATTENDANCE, Attendance, "check_in")
payroll_record_purger = CategoryPurger(RetentionCategory.PAYROLL_RECORDS, PayrollRecord, "created_at")
payroll_override_purger = CategoryPurger(RetentionCategory.PAYROLL_OVERRIDES, PayrollOverride, "created_at")

# Reporting order. The purgers share no state and could run in any order.
CATEGORY_PURGERS: Tuple[CategoryPurger, ...] = (
    audit_log_purger,
    attendance_purger,
    payroll_record_purger,
    payroll_override_purger,
)
