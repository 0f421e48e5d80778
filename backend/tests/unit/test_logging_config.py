"""Unit tests for JSON logging and run id correlation."""

import json
import logging

from observability.logging_config import JSONFormatter, RunIDFilter
from observability.run_id import generate_run_id, get_run_id, run_id_var, set_run_id


def _record(message: str = "Purged 3 audit_logs rows", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="retention.purgers",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRunId:
    """Test run id context handling."""

    def test_default_when_unset(self):
        """Test the placeholder outside of a run."""
        token = run_id_var.set(None)
        try:
            assert get_run_id() == "no-run-id"
        finally:
            run_id_var.reset(token)

    def test_set_and_get(self):
        """Test a run id set in context is returned."""
        token = run_id_var.set(None)
        try:
            run_id = generate_run_id()
            set_run_id(run_id)
            assert get_run_id() == run_id
        finally:
            run_id_var.reset(token)


class TestJSONFormatter:
    """Test structured log output."""

    def test_includes_run_id_and_message(self):
        """Test the filter stamps the current run id onto the record."""
        token = run_id_var.set("run-42")
        try:
            record = _record()
            RunIDFilter().filter(record)
            data = json.loads(JSONFormatter().format(record))
        finally:
            run_id_var.reset(token)

        assert data["run_id"] == "run-42"
        assert data["level"] == "INFO"
        assert data["message"] == "Purged 3 audit_logs rows"
        assert data["timestamp"].endswith("Z")

    def test_includes_retention_extras(self):
        """Test phase, category, cutoff and stats are emitted when set."""
        record = _record(
            category="audit_logs",
            cutoff="2025-01-01T00:00:00+00:00",
            stats={"deleted_audit_logs": 3},
        )

        data = json.loads(JSONFormatter().format(record))

        assert data["category"] == "audit_logs"
        assert data["cutoff"] == "2025-01-01T00:00:00+00:00"
        assert data["stats"] == {"deleted_audit_logs": 3}
        assert "phase" not in data

    def test_exception_info(self):
        """Test errors carry the exception text and traceback."""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = _record("Retention phase offboarding failed", phase="offboarding")
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert data["phase"] == "offboarding"
        assert data["error"] == "boom"
        assert "ValueError" in data["traceback"]
