"""Observability module for the HRM backend.

Provides structured logging with run correlation for batch jobs.
"""

from .logging_config import configure_logging, JSONFormatter, RunIDFilter
from .run_id import run_id_var, get_run_id, set_run_id, generate_run_id

__all__ = [
    # Logging
    "configure_logging",
    "JSONFormatter",
    "RunIDFilter",
    # Run ID
    "run_id_var",
    "get_run_id",
    "set_run_id",
    "generate_run_id",
]
