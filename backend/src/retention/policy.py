"""Retention policy table and cutoff calculation.

The horizons are legal requirements, expressed in whole years:
- Audit logs: 5 years
- Attendance records: 3 years
- Payroll records and payroll overrides: 7 years
- Employee PII (counted from the offboarding exit date): 7 years

A cutoff is "now" with its year moved back by the horizon. Records strictly
older than the cutoff are purged or anonymized.
"""

import enum
from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class RetentionCategory(str, enum.Enum):
    """Data categories with their own retention horizon."""
    AUDIT_LOGS = "audit_logs"
    ATTENDANCE = "attendance"
    PAYROLL_RECORDS = "payroll_records"
    PAYROLL_OVERRIDES = "payroll_overrides"
    EMPLOYEE_RECORDS = "employee_records"


class RetentionPolicy(BaseModel):
    """Retention horizon per category, in whole years.

    Frozen: a policy instance cannot be changed after construction.
    """

    model_config = ConfigDict(frozen=True)

    audit_log_years: int = Field(default=5, ge=1, le=100)
    attendance_years: int = Field(default=3, ge=1, le=100)
    payroll_years: int = Field(default=7, ge=1, le=100)
    employee_record_years: int = Field(default=7, ge=1, le=100)

    def horizon_years(self, category: RetentionCategory) -> int:
        """Return the horizon for a category.

        Payroll records and payroll overrides share the payroll horizon.
        """
        if category is RetentionCategory.AUDIT_LOGS:
            return self.audit_log_years
        if category is RetentionCategory.ATTENDANCE:
            return self.attendance_years
        if category in (RetentionCategory.PAYROLL_RECORDS, RetentionCategory.PAYROLL_OVERRIDES):
            return self.payroll_years
        return self.employee_record_years

    def as_table(self) -> Dict[RetentionCategory, int]:
        return {category: self.horizon_years(category) for category in RetentionCategory}


DEFAULT_POLICY = RetentionPolicy()


def subtract_years(moment: datetime, years: int) -> datetime:
    """Move a timestamp back by whole years, keeping every other field.

    February 29 has no counterpart in a non-leap target year; it is clamped
    to February 28 of that year. Time of day and tzinfo are preserved.

    Args:
        moment: Reference timestamp
        years: Number of years to subtract (may be 0)

    Returns:
        datetime: moment with its year reduced by ``years``
    """
    target_year = moment.year - years
    try:
        return moment.replace(year=target_year)
    except ValueError:
        # Only Feb 29 into a non-leap year can fail here
        return moment.replace(year=target_year, day=28)


def normalize_run_timestamp(now: datetime) -> datetime:
    """Return ``now`` as an aware UTC timestamp.

    Naive values are taken to already be UTC.
    """
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def calculate_cutoffs(
    now: datetime,
    policy: RetentionPolicy = DEFAULT_POLICY,
) -> Dict[RetentionCategory, datetime]:
    """Calculate every category's cutoff from one run timestamp.

    All cutoffs of a run derive from the same ``now`` so they stay mutually
    consistent however long the run takes.

    Args:
        now: Run timestamp, captured once at run start
        policy: Retention horizons to apply

    Returns:
        Dict mapping category to cutoff (records older than this are expired)
    """
    run_timestamp = normalize_run_timestamp(now)
    return {
        category: subtract_years(run_timestamp, years)
        for category, years in policy.as_table().items()
    }
