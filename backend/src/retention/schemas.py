"""Pydantic schemas for retention results.

This module defines retention-related schemas:
- ReapResult: Outcome of the offboarding reaper
- RetentionSummary: Counts produced by one cleanup run
- RetentionReport: Dry-run preview of what a run would touch

None of these ever carry personal data: only counts, ids of runs and
timestamps.
"""

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field

# Records affected in one run above which the run is flagged for review
DEFAULT_ANOMALY_THRESHOLD = 10_000

SUMMARY_COUNT_FIELDS = (
    "deleted_audit_logs",
    "deleted_attendance",
    "deleted_payroll",
    "deleted_payroll_overrides",
    "anonymized_employees",
    "deleted_offboarding_tasks",
    "deleted_offboarding_processes",
)


class ReapResult(BaseModel):
    """Counts produced by one pass of the offboarding reaper."""

    anonymized_count: int = Field(default=0, ge=0)
    deleted_tasks: int = Field(default=0, ge=0)
    deleted_processes: int = Field(default=0, ge=0)


class RetentionSummary(BaseModel):
    """Statistics from a retention cleanup run.

    The seven counts are the job's public output; the timing fields are used
    for monitoring.
    """

    run_id: str = Field(description="Correlation id shared by the run's log lines")

    job_started_at: datetime = Field(
        description="Run timestamp every cutoff was derived from"
    )

    job_completed_at: datetime = Field(
        description="Wall-clock time the run finished, even when the run timestamp was overridden"
    )

    duration_seconds: float = Field(
        ge=0.0,
        description="Run duration in seconds"
    )

    deleted_audit_logs: int = Field(default=0, ge=0)
    deleted_attendance: int = Field(default=0, ge=0)
    deleted_payroll: int = Field(default=0, ge=0)
    deleted_payroll_overrides: int = Field(default=0, ge=0)
    anonymized_employees: int = Field(default=0, ge=0)
    deleted_offboarding_tasks: int = Field(default=0, ge=0)
    deleted_offboarding_processes: int = Field(default=0, ge=0)

    @property
    def total_records_affected(self) -> int:
        """Total number of rows deleted or anonymized."""
        return sum(getattr(self, name) for name in SUMMARY_COUNT_FIELDS)

    def is_anomaly(self, threshold: int = DEFAULT_ANOMALY_THRESHOLD) -> bool:
        """Whether the run touched more rows than normal (alert condition)."""
        return self.total_records_affected > threshold

    def counts(self) -> Dict[str, int]:
        """The seven per-category counts, in reporting order."""
        return {name: getattr(self, name) for name in SUMMARY_COUNT_FIELDS}


class RetentionReport(BaseModel):
    """Records a cleanup run would affect, computed without mutating anything.

    Useful for administrators to understand impact before running cleanup.
    """

    generated_at: datetime = Field(description="Run timestamp used for the cutoffs")

    cutoffs: Dict[str, datetime] = Field(
        default_factory=dict,
        description="Cutoff per retention category"
    )

    audit_logs_eligible: int = Field(default=0, ge=0)
    attendance_eligible: int = Field(default=0, ge=0)
    payroll_records_eligible: int = Field(default=0, ge=0)
    payroll_overrides_eligible: int = Field(default=0, ge=0)
    employees_eligible_for_anonymization: int = Field(default=0, ge=0)
    offboarding_tasks_eligible: int = Field(default=0, ge=0)
    offboarding_processes_eligible: int = Field(default=0, ge=0)

    @property
    def total_eligible(self) -> int:
        """Total records eligible for deletion or anonymization."""
        return (
            self.audit_logs_eligible +
            self.attendance_eligible +
            self.payroll_records_eligible +
            self.payroll_overrides_eligible +
            self.employees_eligible_for_anonymization +
            self.offboarding_tasks_eligible +
            self.offboarding_processes_eligible
        )
