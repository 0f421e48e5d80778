"""Data retention and anonymization.

Purges or anonymizes HR records once they age past their legal retention
horizon:
- Audit logs, attendance, payroll records and payroll overrides are
  hard-deleted
- Employees whose offboarding exit is past the horizon are anonymized in
  place; their offboarding tasks and processes are deleted

All operations are idempotent and can be safely re-run.
"""

from .exceptions import RetentionError, StoreError, RunError
from .policy import RetentionCategory, RetentionPolicy, DEFAULT_POLICY, calculate_cutoffs, subtract_years
from .schemas import ReapResult, RetentionSummary, RetentionReport

# Service and tasks are imported lazily to keep model imports out of policy users
# Use: from retention.service import RetentionService, run_retention_cleanup
# Use: from retention.tasks import retention_cleanup_task

__all__ = [
    "RetentionError",
    "StoreError",
    "RunError",
    "RetentionCategory",
    "RetentionPolicy",
    "DEFAULT_POLICY",
    "calculate_cutoffs",
    "subtract_years",
    "ReapResult",
    "RetentionSummary",
    "RetentionReport",
]
