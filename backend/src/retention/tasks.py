"""Celery tasks for data retention cleanup.

Tasks:
- retention_cleanup_task: Daily job running at 02:00 UTC (see celery_app)
- retention_report_task: Dry-run preview, never mutates data
"""

import logging
from celery import shared_task
from typing import Dict, Any

from database import get_db_session
from .exceptions import RunError
from .service import RetentionService, run_retention_cleanup

logger = logging.getLogger(__name__)


@shared_task(name="retention.cleanup", bind=True)
def retention_cleanup_task(self) -> Dict[str, Any]:
    """Execute one retention cleanup run.

    The task is idempotent - safe to run multiple times without side effects.
    Running twice in succession finds nothing more to delete.

    No retry is configured: a failed run is reported as failed and the next
    scheduled run starts over from fresh cutoffs.

    Returns:
        Dict with the run id, the seven counts and timing:
        - deleted_audit_logs, deleted_attendance, deleted_payroll,
          deleted_payroll_overrides, anonymized_employees,
          deleted_offboarding_tasks, deleted_offboarding_processes
        - run_id, job_started_at, job_completed_at, duration_seconds

    Raises:
        RunError: Re-raised so Celery records the run as failed
    """
    logger.info("Retention cleanup task started")

    try:
        with get_db_session() as db:
            summary = run_retention_cleanup(db)
    except RunError as e:
        logger.error(
            "Retention cleanup task failed",
            extra={"phase": e.phase}
        )
        raise

    result = {
        'status': 'completed',
        'run_id': summary.run_id,
        'job_started_at': summary.job_started_at.isoformat(),
        'job_completed_at': summary.job_completed_at.isoformat(),
        'duration_seconds': summary.duration_seconds,
        **summary.counts(),
        'total_affected': summary.total_records_affected,
    }

    logger.info(
        "Retention cleanup task completed successfully",
        extra={"stats": summary.counts()}
    )

    return result


@shared_task(name="retention.report", bind=True)
def retention_report_task(self) -> Dict[str, Any]:
    """Report how many records the next cleanup would affect.

    Returns:
        Dict form of RetentionReport (counts and cutoffs only)
    """
    with get_db_session() as db:
        report = RetentionService(db).generate_retention_report()

    return {
        **report.model_dump(mode="json"),
        'total_eligible': report.total_eligible,
    }
