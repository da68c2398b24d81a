# tests/test_validation.py
from __future__ import annotations

from datetime import date
from typing import Any

from onboardly.validation import (
    required,
    match_pattern,
    max_length,
    min_words,
    is_of_age,
    is_time,
    is_number,
    is_allowed_upload,
    unique_items,
    age_on,
    PHONE_PATTERN,
    EMAIL_PATTERN,
)

# Test data is just a dummy dict for context, as our validators require it.
FORM_DATA: dict[str, Any] = {}
TODAY: date = date.today()

def test_max_length_validator() -> None:
    """Tests the `max_length` validator."""
    validator = max_length(10, "Cannot exceed 10 characters.")

    # --- Passing Cases ---
    is_valid_under, _ = validator("12345", FORM_DATA, TODAY)
    assert is_valid_under, "Should pass for a string under the limit"

    is_valid_exact, _ = validator("1234567890", FORM_DATA, TODAY)
    assert is_valid_exact, "Should pass for a string at the exact limit"

    # --- Failing Cases ---
    is_invalid_over, msg = validator("12345678901", FORM_DATA, TODAY)
    assert not is_invalid_over, "Should fail for a string over the limit"
    assert msg == "Cannot exceed 10 characters."

    # --- Edge Cases ---
    is_valid_empty, _ = validator("", FORM_DATA, TODAY)
    assert is_valid_empty, "Should pass for an empty string (not its responsibility)"

    is_valid_none, _ = validator(None, FORM_DATA, TODAY)
    assert is_valid_none, "Should pass for None (not its responsibility)"

def test_required_validator() -> None:
    """Tests the `required` validator for various empty/non-empty cases."""
    validator = required("This field is required.")

    # --- Failing Cases ---
    is_valid_none, _ = validator(None, FORM_DATA, TODAY)
    assert not is_valid_none, "Should fail for None"

    is_valid_whitespace, _ = validator("   ", FORM_DATA, TODAY)
    assert not is_valid_whitespace, "Should fail for whitespace-only string"

    is_valid_empty_list, _ = validator([], FORM_DATA, TODAY)
    assert not is_valid_empty_list, "Should fail for empty list"

    # --- Passing Cases ---
    is_valid_str, _ = validator("some value", FORM_DATA, TODAY)
    assert is_valid_str, "Should pass for a valid string"

    is_valid_zero, _ = validator(0, FORM_DATA, TODAY)
    assert is_valid_zero, "Should pass for the number 0"


def test_phone_pattern_validator() -> None:
    """Tests the `match_pattern` validator with the phone number pattern."""
    validator = match_pattern(PHONE_PATTERN, "Invalid phone number.")

    # --- Passing Cases ---
    assert validator("+1-123-456-7890", FORM_DATA, TODAY)[0], "One-digit country code"
    assert validator("+351-123-456-7890", FORM_DATA, TODAY)[0], "Three-digit country code"

    # --- Failing Cases ---
    assert not validator("+1234-123-456-7890", FORM_DATA, TODAY)[0], "Country code is at most 3 digits"
    assert not validator("1-123-456-7890", FORM_DATA, TODAY)[0], "Leading plus is mandatory"
    assert not validator("+1-123-456-789", FORM_DATA, TODAY)[0], "Last group needs 4 digits"
    assert not validator("+1 123 456 7890", FORM_DATA, TODAY)[0], "Groups are dash separated"
    assert not validator("+1-123-456-7890 ", FORM_DATA, TODAY)[0], "No trailing whitespace"

    # --- Edge Cases ---
    # `match_pattern` should ignore empty values; that's `required`'s job.
    assert validator("", FORM_DATA, TODAY)[0], "Should pass for an empty string (not its responsibility)"
    assert validator(None, FORM_DATA, TODAY)[0], "Should pass for None (not its responsibility)"


def test_email_pattern() -> None:
    assert EMAIL_PATTERN.match("jane.doe+hr@example.co.uk")
    assert not EMAIL_PATTERN.match("jane.doe@")
    assert not EMAIL_PATTERN.match("not an email")


def test_min_words_validator() -> None:
    """Names need at least two whitespace separated words after trimming."""
    validator = min_words(2, "Enter at least 2 words")

    assert validator("Ada Lovelace", FORM_DATA, TODAY)[0]
    assert validator("  Ada   King  Lovelace ", FORM_DATA, TODAY)[0]

    is_valid, msg = validator("  Ada  ", FORM_DATA, TODAY)
    assert not is_valid, "A single word should fail even with padding"
    assert msg == "Enter at least 2 words"


def test_is_of_age_validator() -> None:
    """The date of birth must be at least 18 calendar years before the given day."""
    validator = is_of_age(18, "Must be at least 18 years old")
    today = date(2026, 6, 15)

    # --- Passing Cases ---
    assert validator("2008-06-15", FORM_DATA, today)[0], "Turning 18 today should pass"
    assert validator("1986-01-01", FORM_DATA, today)[0]

    # --- Failing Cases ---
    assert not validator("2008-06-16", FORM_DATA, today)[0], "Minors are rejected"
    assert not validator("", FORM_DATA, today)[0], "An empty date is not old enough"
    assert not validator("2001-02-30", FORM_DATA, today)[0], "An impossible date should fail"
    assert not validator("15/06/1990", FORM_DATA, today)[0], "Only ISO dates are accepted"


def test_is_of_age_leap_day_birthday() -> None:
    """Someone born on 29 February comes of age on 1 March in common years."""
    validator = is_of_age(18, "Must be at least 18 years old")

    assert not validator("2008-02-29", FORM_DATA, date(2026, 2, 28))[0]
    assert validator("2008-02-29", FORM_DATA, date(2026, 3, 1))[0]
    assert validator("2008-02-29", FORM_DATA, date(2028, 2, 29))[0]


def test_is_of_age_uses_the_given_day() -> None:
    validator = is_of_age(18, "Must be at least 18 years old")

    assert not validator("2010-05-01", FORM_DATA, date(2026, 5, 1))[0]
    assert validator("2010-05-01", FORM_DATA, date(2028, 5, 1))[0]

def test_is_time_validator() -> None:
    validator = is_time("Use HH:MM")

    assert validator("09:00", FORM_DATA, TODAY)[0]
    assert validator("23:59", FORM_DATA, TODAY)[0]
    assert not validator("24:00", FORM_DATA, TODAY)[0]
    assert not validator("9am", FORM_DATA, TODAY)[0]
    assert not validator(None, FORM_DATA, TODAY)[0]


def test_is_number_validator() -> None:
    """Absent numbers pass; booleans and strings are not numbers."""
    validator = is_number()

    assert validator(None, FORM_DATA, TODAY)[0]
    assert validator(float('nan'), FORM_DATA, TODAY)[0], "An emptied number input reads as NaN"
    assert validator(42.5, FORM_DATA, TODAY)[0]
    assert not validator("42", FORM_DATA, TODAY)[0]
    assert not validator(True, FORM_DATA, TODAY)[0]


def test_is_allowed_upload_validator() -> None:
    """Profile pictures are optional, PNG/JPG only, and at most 2 MiB."""
    validator = is_allowed_upload()

    # --- Passing Cases ---
    assert validator(None, FORM_DATA, TODAY)[0], "Absence is allowed"
    assert validator({'name': 'me.png', 'type': 'image/png', 'size': 1024}, FORM_DATA, TODAY)[0]
    assert validator({'name': 'me.jpg', 'type': 'image/jpeg', 'size': 2 * 1024 * 1024}, FORM_DATA, TODAY)[0], \
        "Exactly 2 MiB is allowed"

    # --- Failing Cases ---
    is_valid, msg = validator({'name': 'me.gif', 'type': 'image/gif', 'size': 10}, FORM_DATA, TODAY)
    assert not is_valid and msg == "Only JPG/PNG"

    is_valid, msg = validator({'name': 'me.png', 'type': 'image/png', 'size': 2 * 1024 * 1024 + 1}, FORM_DATA, TODAY)
    assert not is_valid and msg == "Max 2MB"


def test_unique_items_validator() -> None:
    validator = unique_items("Each skill can be chosen once")

    assert validator(["Go", "Rust", "Python"], FORM_DATA, TODAY)[0]
    assert not validator(["Go", "Go", "Python"], FORM_DATA, TODAY)[0]


def test_age_on_counts_completed_years() -> None:
    assert age_on(date(2000, 2, 29), date(2001, 2, 28)) == 0
    assert age_on(date(2000, 2, 29), date(2001, 3, 1)) == 1
    assert age_on(date(2000, 2, 29), date(2004, 2, 29)) == 4
    assert age_on(date(1990, 12, 31), date(2026, 12, 30)) == 35
