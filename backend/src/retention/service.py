"""Retention service: coordinates one cleanup run.

A run is strictly sequential:
1. Compute every cutoff from a single captured run timestamp
2. Purge the four independent categories (audit logs, attendance,
   payroll records, payroll overrides)
3. Reap expired offboarding processes using the employee cutoff
4. Assemble the count-only summary

Each step commits its own work. A failure aborts the run with RunError;
nothing already committed is rolled back. Every step is idempotent, so the
recovery strategy is to run the whole job again.

The caller must make sure two runs never overlap (cron without overlap or
an advisory lock held by the scheduler).
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy.orm import Session

from config import get_settings
from observability.run_id import generate_run_id, set_run_id
from .exceptions import RunError
from .offboarding import OffboardingReaper
from .policy import (
    DEFAULT_POLICY,
    RetentionCategory,
    RetentionPolicy,
    calculate_cutoffs,
    normalize_run_timestamp,
)
from .purgers import CATEGORY_PURGERS
from .schemas import RetentionReport, RetentionSummary

logger = logging.getLogger(__name__)

# Summary field filled by each category purger
_SUMMARY_FIELD_BY_CATEGORY = {
    RetentionCategory.AUDIT_LOGS: "deleted_audit_logs",
    RetentionCategory.ATTENDANCE: "deleted_attendance",
    RetentionCategory.PAYROLL_RECORDS: "deleted_payroll",
    RetentionCategory.PAYROLL_OVERRIDES: "deleted_payroll_overrides",
}

# Report field filled by each category purger's dry-run count
_REPORT_FIELD_BY_CATEGORY = {
    RetentionCategory.AUDIT_LOGS: "audit_logs_eligible",
    RetentionCategory.ATTENDANCE: "attendance_eligible",
    RetentionCategory.PAYROLL_RECORDS: "payroll_records_eligible",
    RetentionCategory.PAYROLL_OVERRIDES: "payroll_overrides_eligible",
}


class RetentionService:
    """Service for executing retention cleanup operations.

    This service encapsulates all retention logic and provides methods for:
    - Calculating cutoff dates from the fixed retention policy
    - Previewing what a run would delete or anonymize
    - Running the cleanup itself
    """

    def __init__(self, db: Session, policy: RetentionPolicy = DEFAULT_POLICY):
        """Initialize retention service.

        Args:
            db: Database session
            policy: Retention horizons (the legal defaults unless testing)
        """
        self.db = db
        self.policy = policy

    def calculate_cutoff_dates(self, now: datetime) -> Dict[RetentionCategory, datetime]:
        """Calculate cutoff dates for each category from the run timestamp.

        Returns:
            Dict mapping category to cutoff datetime (records older than this are expired)
        """
        return calculate_cutoffs(now, self.policy)

    def generate_retention_report(self, now: Optional[datetime] = None) -> RetentionReport:
        """Generate report of records eligible for deletion or anonymization.

        This provides a preview of what would be deleted without actually deleting.

        Raises:
            RunError: If counting fails
        """
        run_timestamp = normalize_run_timestamp(now or datetime.now(timezone.utc))
        cutoffs = self._phase("cutoffs", self.calculate_cutoff_dates, run_timestamp)

        counts = {}
        for purger in CATEGORY_PURGERS:
            counts[_REPORT_FIELD_BY_CATEGORY[purger.category]] = self._phase(
                f"report:{purger.category.value}",
                purger.count,
                self.db,
                cutoffs[purger.category],
            )

        reaper = OffboardingReaper(self.db)
        expired = self._phase(
            "report:offboarding",
            reaper.find_expired,
            cutoffs[RetentionCategory.EMPLOYEE_RECORDS],
        )
        process_ids = [process_id for process_id, _ in expired]

        report = RetentionReport(
            generated_at=run_timestamp,
            cutoffs={category.value: cutoff for category, cutoff in cutoffs.items()},
            employees_eligible_for_anonymization=len({employee_id for _, employee_id in expired}),
            offboarding_tasks_eligible=self._phase(
                "report:offboarding", reaper.count_tasks, process_ids
            ),
            offboarding_processes_eligible=len(process_ids),
            **counts,
        )

        logger.info(
            "Generated retention report",
            extra={"stats": {"total_eligible": report.total_eligible}}
        )
        return report

    def run_cleanup(self, now: Optional[datetime] = None) -> RetentionSummary:
        """Run complete retention cleanup.

        Args:
            now: Run timestamp; defaults to the current UTC time, read once

        Returns:
            RetentionSummary: Counts of deleted and anonymized records

        Raises:
            RunError: On the first failing step; committed work is kept
        """
        run_id = generate_run_id()
        set_run_id(run_id)

        started = time.monotonic()
        run_timestamp = normalize_run_timestamp(now or datetime.now(timezone.utc))
        logger.info(f"Starting retention cleanup at {run_timestamp.isoformat()}")

        cutoffs = self._phase("cutoffs", self.calculate_cutoff_dates, run_timestamp)

        counts = {}
        for purger in CATEGORY_PURGERS:
            counts[_SUMMARY_FIELD_BY_CATEGORY[purger.category]] = self._phase(
                f"purge:{purger.category.value}",
                purger.purge,
                self.db,
                cutoffs[purger.category],
            )

        reaped = self._phase(
            "offboarding",
            OffboardingReaper(self.db).reap,
            cutoffs[RetentionCategory.EMPLOYEE_RECORDS],
        )

        duration = time.monotonic() - started
        summary = RetentionSummary(
            run_id=run_id,
            job_started_at=run_timestamp,
            job_completed_at=datetime.now(timezone.utc),
            duration_seconds=duration,
            anonymized_employees=reaped.anonymized_count,
            deleted_offboarding_tasks=reaped.deleted_tasks,
            deleted_offboarding_processes=reaped.deleted_processes,
            **counts,
        )

        logger.info(
            "Retention cleanup completed",
            extra={"stats": summary.counts(), "duration_seconds": summary.duration_seconds}
        )

        threshold = get_settings().RETENTION_ANOMALY_THRESHOLD
        if summary.is_anomaly(threshold):
            logger.warning(
                f"Retention cleanup anomaly detected: {summary.total_records_affected} records affected",
                extra={"stats": summary.counts()}
            )

        return summary

    def _phase(self, phase: str, step, *args):
        """Run one step, converting any failure into RunError for that phase."""
        try:
            return step(*args)
        except Exception as e:
            logger.error(
                f"Retention phase {phase} failed",
                exc_info=True,
                extra={"phase": phase}
            )
            raise RunError(phase, e) from e


def run_retention_cleanup(
    db: Session,
    now: Optional[datetime] = None,
    policy: RetentionPolicy = DEFAULT_POLICY,
) -> RetentionSummary:
    """Run retention cleanup once.

    This is the main entry point called by the scheduled Celery task and the
    command line script.

    Args:
        db: Database session
        now: Run timestamp; captured once and used for every cutoff
        policy: Retention horizons

    Returns:
        RetentionSummary: Aggregated counts

    Raises:
        RunError: Wrapping the underlying StoreError or unexpected exception
    """
    return RetentionService(db, policy).run_cleanup(now)
