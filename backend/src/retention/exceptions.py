"""Exceptions raised by the retention job."""

from typing import Optional


class RetentionError(Exception):
    """Base class for retention job failures."""


class StoreError(RetentionError):
    """The backing store rejected or could not complete an operation.

    Covers connectivity loss, timeouts and constraint violations. Never
    retried inside the job.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Store operation '{operation}' failed{detail}")


class RunError(RetentionError):
    """A retention run aborted.

    Wraps the underlying exception (available as ``__cause__``) and names the
    phase that failed. Work committed by earlier phases is kept.
    """

    def __init__(self, phase: str, cause: BaseException):
        self.phase = phase
        super().__init__(f"Retention run failed during {phase}: {cause}")
