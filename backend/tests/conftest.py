"""Pytest fixtures for retention testing.

Provides reusable test fixtures for:
- In-memory SQLite database session (tables created per test)
- Session factory bound to the same database, for CLI and task tests
- Factories for employees and offboarding processes with tasks

Usage:
    def test_reap(db_session, make_employee, make_offboarding):
        employee = make_employee()
        make_offboarding(employee, exit_date=datetime(2020, 1, 1, tzinfo=timezone.utc))
"""

import sys
import os
from datetime import date, datetime
from decimal import Decimal
from itertools import count
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from sqlalchemy.orm import sessionmaker, Session

from database import build_engine
from models import (
    Base,
    User,
    Employee,
    EmployeeStatus,
    OffboardingProcess,
    OffboardingTask,
    OffboardingStatus,
)


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database with every table created."""
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> sessionmaker:
    """Session factory bound to the test database."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def make_employee(db_session: Session):
    """Factory creating an employee with full personal data and a login."""
    sequence = count(1)

    def _make_employee(**overrides) -> Employee:
        n = next(sequence)
        user = User(
            email=f"user{n}@acme.test",
            password_hash="argon2$hash",
            role="EMPLOYEE",
        )
        db_session.add(user)
        db_session.flush()

        values = dict(
            employee_number=f"EMP-{n:04d}",
            first_name="Jane",
            last_name=f"Doe{n}",
            email=f"jane.doe{n}@acme.test",
            phone_number="+1 555 0100",
            address="1 Main Street, Springfield",
            date_of_birth=date(1985, 4, 12),
            gender="female",
            marital_status="married",
            emergency_contact={"name": "John Doe", "phone": "+1 555 0101"},
            hire_date=date(2015, 3, 1),
            salary=Decimal("72000.00"),
            status=EmployeeStatus.ACTIVE,
            user_id=user.id,
        )
        values.update(overrides)
        employee = Employee(**values)
        db_session.add(employee)
        db_session.commit()
        return employee

    return _make_employee


@pytest.fixture(scope="function")
def make_offboarding(db_session: Session):
    """Factory creating an offboarding process with a number of tasks."""

    def _make_offboarding(
        employee: Employee,
        exit_date: datetime,
        tasks: int = 2,
        status: OffboardingStatus = OffboardingStatus.COMPLETED,
    ) -> OffboardingProcess:
        process = OffboardingProcess(
            employee_id=employee.id,
            exit_date=exit_date,
            reason="resignation",
            status=status,
        )
        db_session.add(process)
        db_session.flush()
        for i in range(tasks):
            db_session.add(OffboardingTask(
                process_id=process.id,
                title=f"Checklist item {i + 1}",
                status=OffboardingStatus.COMPLETED,
            ))
        db_session.commit()
        return process

    return _make_offboarding

