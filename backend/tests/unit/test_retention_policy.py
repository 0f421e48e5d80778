"""Unit tests for the retention policy table and cutoff calculation."""

import pytest
from datetime import datetime, timedelta, timezone
from pydantic import ValidationError

from retention.policy import (
    DEFAULT_POLICY,
    RetentionCategory,
    RetentionPolicy,
    calculate_cutoffs,
    normalize_run_timestamp,
    subtract_years,
)

UTC = timezone.utc


class TestRetentionPolicy:
    """Test the fixed retention horizons."""

    def test_default_horizons(self):
        """Test that default horizons are the legal retention periods."""
        table = DEFAULT_POLICY.as_table()

        assert table[RetentionCategory.AUDIT_LOGS] == 5
        assert table[RetentionCategory.ATTENDANCE] == 3
        assert table[RetentionCategory.PAYROLL_RECORDS] == 7
        assert table[RetentionCategory.PAYROLL_OVERRIDES] == 7
        assert table[RetentionCategory.EMPLOYEE_RECORDS] == 7

    def test_table_covers_every_category(self):
        """Test that every category has a horizon."""
        assert set(DEFAULT_POLICY.as_table()) == set(RetentionCategory)

    def test_policy_is_frozen(self):
        """Test that a policy cannot be shortened after construction."""
        with pytest.raises(ValidationError):
            DEFAULT_POLICY.audit_log_years = 1

    def test_horizon_must_be_positive(self):
        """Test that a zero-year horizon is rejected."""
        with pytest.raises(ValidationError) as exc:
            RetentionPolicy(attendance_years=0)

        assert "greater than or equal to 1" in str(exc.value)


class TestSubtractYears:
    """Test year arithmetic used for cutoffs."""

    def test_preserves_all_other_fields(self):
        """Test that only the year changes."""
        moment = datetime(2030, 6, 15, 13, 45, 30, 123456, tzinfo=UTC)

        result = subtract_years(moment, 7)

        assert result == datetime(2023, 6, 15, 13, 45, 30, 123456, tzinfo=UTC)
        assert result.tzinfo is UTC

    def test_leap_day_into_non_leap_year_clamps_to_feb_28(self):
        """Test Feb 29 minus 3 years lands on Feb 28 of the target year."""
        moment = datetime(2028, 2, 29, 8, 30, tzinfo=UTC)

        result = subtract_years(moment, 3)

        assert result == datetime(2025, 2, 28, 8, 30, tzinfo=UTC)

    def test_leap_day_into_leap_year_is_kept(self):
        """Test Feb 29 minus 4 years stays Feb 29."""
        moment = datetime(2028, 2, 29, 8, 30, tzinfo=UTC)

        assert subtract_years(moment, 4) == datetime(2024, 2, 29, 8, 30, tzinfo=UTC)

    def test_zero_years_is_identity(self):
        """Test that subtracting nothing returns the same moment."""
        moment = datetime(2026, 10, 18, tzinfo=UTC)
        assert subtract_years(moment, 0) == moment


class TestCalculateCutoffs:
    """Test cutoff computation from a single run timestamp."""

    def test_cutoffs_for_reference_time(self):
        """Test the cutoff of each category for 2030-01-01."""
        now = datetime(2030, 1, 1, tzinfo=UTC)

        cutoffs = calculate_cutoffs(now)

        assert cutoffs[RetentionCategory.AUDIT_LOGS] == datetime(2025, 1, 1, tzinfo=UTC)
        assert cutoffs[RetentionCategory.ATTENDANCE] == datetime(2027, 1, 1, tzinfo=UTC)
        assert cutoffs[RetentionCategory.PAYROLL_RECORDS] == datetime(2023, 1, 1, tzinfo=UTC)
        assert cutoffs[RetentionCategory.PAYROLL_OVERRIDES] == datetime(2023, 1, 1, tzinfo=UTC)
        assert cutoffs[RetentionCategory.EMPLOYEE_RECORDS] == datetime(2023, 1, 1, tzinfo=UTC)

    def test_leap_day_run(self):
        """Test a run on Feb 29 clamps only the non-leap targets."""
        now = datetime(2032, 2, 29, 2, 0, tzinfo=UTC)

        cutoffs = calculate_cutoffs(now)

        assert cutoffs[RetentionCategory.AUDIT_LOGS] == datetime(2027, 2, 28, 2, 0, tzinfo=UTC)
        assert cutoffs[RetentionCategory.ATTENDANCE] == datetime(2029, 2, 28, 2, 0, tzinfo=UTC)
        assert cutoffs[RetentionCategory.PAYROLL_RECORDS] == datetime(2025, 2, 28, 2, 0, tzinfo=UTC)

    def test_naive_timestamp_is_treated_as_utc(self):
        """Test that naive run timestamps are taken as UTC."""
        cutoffs = calculate_cutoffs(datetime(2030, 1, 1))

        assert cutoffs[RetentionCategory.AUDIT_LOGS] == datetime(2025, 1, 1, tzinfo=UTC)

    def test_aware_timestamp_is_converted_to_utc(self):
        """Test that offsets are normalized before subtracting."""
        plus_two = timezone(timedelta(hours=2))
        now = datetime(2030, 1, 1, 1, 0, tzinfo=plus_two)

        assert normalize_run_timestamp(now) == datetime(2029, 12, 31, 23, 0, tzinfo=UTC)
        assert calculate_cutoffs(now)[RetentionCategory.ATTENDANCE] == datetime(
            2026, 12, 31, 23, 0, tzinfo=UTC
        )

    def test_custom_policy(self):
        """Test cutoffs follow the policy passed in."""
        policy = RetentionPolicy(audit_log_years=1)

        cutoffs = calculate_cutoffs(datetime(2030, 1, 1, tzinfo=UTC), policy)

        assert cutoffs[RetentionCategory.AUDIT_LOGS] == datetime(2029, 1, 1, tzinfo=UTC)
