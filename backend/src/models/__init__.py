"""SQLAlchemy Models for the HRM backend"""

from .base import Base
from .user import User
from .employee import Employee, EmployeeStatus
from .audit_log import AuditLog
from .attendance import Attendance
from .payroll import PayrollRecord, PayrollOverride
from .offboarding import OffboardingProcess, OffboardingTask, OffboardingStatus

__all__ = [
    "Base",
    "User",
    "Employee",
    "EmployeeStatus",
    "AuditLog",
    "Attendance",
    "PayrollRecord",
    "PayrollOverride",
    "OffboardingProcess",
    "OffboardingTask",
    "OffboardingStatus",
]
