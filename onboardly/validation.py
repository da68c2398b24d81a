# onboardly/validation.py
from __future__ import annotations
import math
import re
from re import Pattern
from typing import Any
from collections.abc import Callable, Collection
from datetime import date, datetime

# --- Type Aliases ---
ValidationResult = tuple[bool, str]
# The validator gets the value, the entire record for context and the
# date that counts as "today" for this evaluation
ValidatorFunc = Callable[[Any | None, dict[str, Any], date], ValidationResult]

# --- Regex Patterns (centralized) ---
PHONE_PATTERN: Pattern[str] = re.compile(r'^\+\d{1,3}-\d{3}-\d{3}-\d{4}$')
EMAIL_PATTERN: Pattern[str] = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
TIME_PATTERN: Pattern[str] = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
DATE_FORMAT_STORAGE: str = '%Y-%m-%d'

MAX_UPLOAD_BYTES: int = 2 * 1024 * 1024
ALLOWED_UPLOAD_TYPES: frozenset[str] = frozenset({'image/png', 'image/jpg', 'image/jpeg'})

# ===================================================================
# PARSING HELPERS
# ===================================================================

def parse_date(value: Any | None) -> date | None:
    """Parses a stored YYYY-MM-DD string; anything else is None."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT_STORAGE).date()
    except ValueError:
        return None


def parse_minutes(value: Any | None) -> int | None:
    """Minute of day for an HH:MM string, or None if malformed."""
    if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
        return None
    hours, minutes = value.strip().split(':')
    return int(hours) * 60 + int(minutes)


def is_number_value(value: Any | None) -> bool:
    """bool and NaN are not numbers here; an empty number input yields NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def age_on(born: date, today: date) -> int:
    """Whole years since `born`, counting a year only once the birthday has passed."""
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age

# ===================================================================
# GENERIC VALIDATOR GENERATORS (Our Reusable Building Blocks)
# ===================================================================

def required(message: str = "Required") -> ValidatorFunc:
    """Ensures a value is not None, not an empty string, and not just whitespace."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value is None:
            return False, message
        if isinstance(value, str) and not value.strip():
            return False, message
        if isinstance(value, (list, dict)) and not value:
            return False, message
        return True, ""
    return validator

def required_choice(message: str = "Please make a selection.") -> ValidatorFunc:
    """Ensures a value from a select/radio is not None or empty/whitespace."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False, message
        return True, ""
    return validator

def match_pattern(pattern: Pattern[str], message: str) -> ValidatorFunc:
    """Ensures a string value matches a regex pattern."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        # Chain it with required() to validate non-empty fields.
        if not value:
            return True, ""  # Don't fail on empty values, that's `required`'s job.
        if not isinstance(value, str) or not pattern.match(value):
            return False, message
        return True, ""
    return validator

def max_length(limit: int, message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value and isinstance(value, str) and len(value) > limit:
            return False, message
        return True, ""
    return validator

def min_length(limit: int, message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not isinstance(value, str) or len(value) < limit:
            return False, message
        return True, ""
    return validator

def min_words(count: int, message: str) -> ValidatorFunc:
    """Trims, splits on whitespace and requires at least `count` tokens."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not value or not isinstance(value, str):
            return True, ""
        if len(value.split()) < count:
            return False, message
        return True, ""
    return validator

def one_of(options: Collection[str], message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value not in options:
            return False, message
        return True, ""
    return validator

def is_valid_date(message: str = "Invalid date") -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not value:
            return True, ''
        if parse_date(value) is None:
            return False, message
        return True, ''
    return validator

def is_of_age(years: int, message: str) -> ValidatorFunc:
    """The person born on this date must be at least `years` old today."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        born = parse_date(value)
        if born is None:
            return False, message
        if age_on(born, today) < years:
            return False, message
        return True, ''
    return validator

def is_time(message: str = "Use HH:MM") -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if parse_minutes(value) is None:
            return False, message
        return True, ""
    return validator

def is_number(message: str = "Must be a number") -> ValidatorFunc:
    """Absent values pass; anything present must be numeric."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return True, ""
        if not is_number_value(value):
            return False, message
        return True, ""
    return validator

def is_number_in_range(low: float, high: float, message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not is_number_value(value) or not low <= value <= high:
            return False, message
        return True, ""
    return validator

def is_boolean(message: str = "Must be true or false") -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not isinstance(value, bool):
            return False, message
        return True, ""
    return validator

def is_true(message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if value is not True:
            return False, message
        return True, ""
    return validator

def min_items(count: int, message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not isinstance(value, list) or len(value) < count:
            return False, message
        return True, ""
    return validator

def unique_items(message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if isinstance(value, list) and len(set(value)) != len(value):
            return False, message
        return True, ""
    return validator

def is_mapping(message: str) -> ValidatorFunc:
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not isinstance(value, dict):
            return False, message
        return True, ""
    return validator

def is_allowed_upload(
    allowed_types: Collection[str] = ALLOWED_UPLOAD_TYPES,
    max_bytes: int = MAX_UPLOAD_BYTES,
    type_message: str = "Only JPG/PNG",
    size_message: str = "Max 2MB",
) -> ValidatorFunc:
    """An optional file reference: absence passes, otherwise type and size are checked."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not value:
            return True, ""
        if not isinstance(value, dict) or value.get('type') not in allowed_types:
            return False, type_message
        size = value.get('size')
        if not is_number_value(size) or size > max_bytes:
            return False, size_message
        return True, ""
    return validator

def is_known(options_provider: Callable[[], Collection[str]], message: str) -> ValidatorFunc:
    """Membership in a reference set that is looked up at validation time."""
    def validator(value: Any | None, form_data: dict[str, Any], today: date) -> ValidationResult:
        if not value:
            return True, ""
        if value not in options_provider():
            return False, message
        return True, ""
    return validator
