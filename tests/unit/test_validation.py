import pytest

from skipjobs.services.errors import ValidationError
from skipjobs.services.validation import (
    ValidationErrors,
    is_number,
    is_valid_date,
    is_valid_phone,
    is_valid_skip_size,
    is_valid_uuid,
)


def test_uuid_predicate():
    assert is_valid_uuid("6f1c2b9e-7d1a-4c4e-9a51-1f2d3c4b5a69")
    assert is_valid_uuid("6F1C2B9E-7D1A-4C4E-9A51-1F2D3C4B5A69")
    assert not is_valid_uuid("not-a-uuid")
    assert not is_valid_uuid(None)
    assert not is_valid_uuid(123)


def test_date_predicate_rejects_impossible_dates():
    assert is_valid_date("2025-03-14")
    assert not is_valid_date("2025-02-30")
    assert not is_valid_date("14/03/2025")
    assert not is_valid_date("2025-3-14")


def test_skip_size_predicate():
    assert is_valid_skip_size("12")
    assert not is_valid_skip_size("12y")
    assert not is_valid_skip_size(12)


def test_number_predicate_rejects_bool_and_nan():
    assert is_number(0)
    assert is_number(12.5)
    assert not is_number(True)
    assert not is_number(float("nan"))
    assert not is_number("12")


def test_phone_predicate():
    assert is_valid_phone("087 123 4567")
    assert is_valid_phone("+353-87-1234567")
    assert not is_valid_phone("call me")


def test_errors_accumulate_in_order():
    v = (
        ValidationErrors()
        .require_uuid("customer_id", "x")
        .require_non_empty("truck_reg", "   ")
        .require_date("job_date", "tomorrow")
    )
    assert v.has_errors()
    assert v.errors == [
        "customer_id must be a valid UUID",
        "truck_reg is required",
        "job_date must be a valid date (YYYY-MM-DD)",
    ]


def test_optional_checks_skip_missing_values():
    v = (
        ValidationErrors()
        .optional_uuid("driver_id", None)
        .optional_skip_size("skip_size", None)
        .optional_number("lat", None)
        .optional_string("material_type", None)
    )
    assert not v.has_errors()


def test_number_bounds():
    v = (
        ValidationErrors()
        .optional_number("lat", 91, minimum=-90, maximum=90)
        .optional_number("accuracy_m", -1, minimum=0)
        .optional_number("net_weight_kg", "heavy")
    )
    assert v.errors == [
        "lat must be at most 90",
        "accuracy_m must be at least 0",
        "net_weight_kg must be a number",
    ]


def test_require_action_distinguishes_missing_from_invalid():
    assert ValidationErrors().require_action("action", None).errors == ["action is required"]
    assert ValidationErrors().require_action("action", "lift").errors == [
        "action must be drop, pick, or pick_drop"
    ]


def test_raise_if_errors_carries_details():
    v = ValidationErrors().add("one").add("two")
    with pytest.raises(ValidationError) as exc_info:
        v.raise_if_errors()
    assert exc_info.value.status_code == 400
    assert exc_info.value.to_response() == {"error": "Validation failed", "details": ["one", "two"]}


def test_raise_if_errors_is_silent_when_clean():
    ValidationErrors().require_uuid("job_id", "6f1c2b9e-7d1a-4c4e-9a51-1f2d3c4b5a69").raise_if_errors()
