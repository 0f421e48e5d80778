"""Command line entry point for the retention job.

Usage:
    # Run the cleanup (what cron / the task scheduler invokes)
    hrm-retention-cleanup

    # Preview counts without touching any data
    hrm-retention-cleanup --dry-run

    # Evaluate cutoffs against a fixed timestamp
    hrm-retention-cleanup --now 2030-01-01T00:00:00+00:00

Environment Variables:
    DATABASE_URL: Store connection string (overridden by --database-url)
    LOG_LEVEL: Logging level (default INFO)
    LOG_JSON: JSON log lines on stderr (default true)

Exit status is 0 on success and 1 when the run failed. The summary is printed
to stdout as a single JSON line; logs go to stderr.

Only one instance may run at a time. The scheduler is responsible for that,
for example with non-overlapping cron entries or `flock`.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from config import get_settings
from observability.logging_config import configure_logging
from .exceptions import RunError
from .service import RetentionService

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> datetime:
    """argparse type for ISO 8601 timestamps."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 timestamp: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hrm-retention-cleanup",
        description="Purge and anonymize HR records past their retention horizon.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report eligible record counts without deleting or anonymizing anything",
    )
    parser.add_argument(
        "--now",
        type=parse_timestamp,
        default=None,
        help="Run timestamp (ISO 8601, naive values are UTC). Defaults to the current time",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL",
    )
    return parser


def _default_session_factory(database_url: Optional[str]) -> Callable[[], Session]:
    if database_url:
        from database import create_session_factory
        return create_session_factory(database_url)

    from database import SessionLocal
    return SessionLocal


def main(
    argv: Optional[List[str]] = None,
    session_factory: Optional[Callable[[], Session]] = None,
) -> int:
    """Run the retention job and return the process exit status.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        session_factory: Session factory; built from settings when omitted

    Returns:
        0 on success, 1 if the run failed
    """
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    if session_factory is None:
        session_factory = _default_session_factory(args.database_url)

    db = session_factory()
    try:
        service = RetentionService(db)
        if args.dry_run:
            report = service.generate_retention_report(args.now)
            output = {
                "status": "dry_run",
                **report.model_dump(mode="json"),
                "total_eligible": report.total_eligible,
            }
        else:
            summary = service.run_cleanup(args.now)
            output = {
                "status": "completed",
                "run_id": summary.run_id,
                **summary.counts(),
            }
    except RunError as e:
        # Traceback already logged by the failing phase
        logger.error(
            "Retention cleanup failed",
            extra={"phase": e.phase}
        )
        print(json.dumps({"status": "failed", "phase": e.phase, "error": str(e)}))
        return 1
    finally:
        db.close()

    print(json.dumps(output))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
