#!/usr/bin/env python
"""Run the data retention job once.

Intended for cron or any task scheduler that guarantees a single running
instance. Equivalent to the installed `hrm-retention-cleanup` command.

Usage:
    python backend/scripts/run_retention_cleanup.py [--dry-run] [--now ISO8601]

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    LOG_LEVEL: Logging level (default INFO)
"""

import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from retention.cli import main


if __name__ == "__main__":
    sys.exit(main())
