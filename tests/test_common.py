from datetime import date, datetime

import pytest

from shelfcure.common.datetime_utils import month_bounds, parse_iso_datetime, parse_month, salary_period
from shelfcure.common.validators import GST_RE, FieldErrors, require_choice, require_number, require_pattern
from shelfcure.core.enums import StaffRole
from shelfcure.core.exceptions import ValidationError


def test_field_errors_collects_all_messages():
    errors = FieldErrors()
    errors.check(require_number, "abc", "Salary")
    errors.check(require_choice, "doctor", StaffRole, "Role")
    assert errors.check(require_number, "5", "Rating", minimum=1) == 5

    with pytest.raises(ValidationError) as exc:
        errors.raise_if_any()
    assert exc.value.errors[0] == "Salary must be a number"
    assert exc.value.errors[1].startswith("Role must be one of: store_manager, pharmacist")


def test_number_bounds():
    with pytest.raises(ValidationError, match="cannot be less than 0"):
        require_number(-1, "Salary", minimum=0)
    with pytest.raises(ValidationError, match="cannot exceed 100"):
        require_number(101, "Tax rate", maximum=100)


def test_gst_pattern():
    assert require_pattern(" 27AAPFU0939F1ZV ", "GST number", GST_RE) == "27AAPFU0939F1ZV"
    with pytest.raises(ValidationError):
        require_pattern("27AAPFU0939F1Z", "GST number", GST_RE)


def test_parse_iso_datetime_accepts_clock_times_and_timestamps():
    assert parse_iso_datetime("09:30", on_date=date(2025, 6, 16)) == datetime(2025, 6, 16, 9, 30)
    assert parse_iso_datetime("2025-06-16T09:30:00Z") == datetime(2025, 6, 16, 9, 30)
    with pytest.raises(ValidationError):
        parse_iso_datetime("25:99", on_date=date(2025, 6, 16))


def test_month_helpers():
    assert parse_month("2024-02") == (2024, 2)
    assert parse_month(None, today=date(2025, 6, 16)) == (2025, 6)
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert salary_period(6, 2025) == "June 2025"
    with pytest.raises(ValidationError):
        parse_month("2025-13")
