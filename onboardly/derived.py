# onboardly/derived.py
# Values computed from the record on demand. Nothing here is stored.
from __future__ import annotations
from datetime import date
from typing import Any

from .form_data_builder import JobType, SalaryBracket, SALARY_BRACKET_REGISTRY
from .para import Manager, managers_for, skills_for
from .utils import OnboardingRecord, get_path
from .validation import age_on, parse_date

MINIMUM_AGE: int = 18
GUARDIAN_AGE_THRESHOLD: int = 21


def compute_age(dob: Any | None, today: date | None = None) -> int | None:
    """Whole years since `dob`, counting a year only once the birthday has passed."""
    born = parse_date(dob)
    if born is None:
        return None
    return age_on(born, today or date.today())


def is_guardian_required(record: OnboardingRecord, today: date | None = None) -> bool:
    age = compute_age(get_path(record, 'personal.dob'), today)
    return age is not None and age < GUARDIAN_AGE_THRESHOLD


def salary_bracket_for(job_type: Any | None) -> SalaryBracket | None:
    """The active employment bracket, or None for an unknown job type."""
    try:
        return SALARY_BRACKET_REGISTRY[JobType(job_type)]
    except ValueError:
        return None


def available_managers(record: OnboardingRecord) -> list[Manager]:
    return managers_for(get_path(record, 'job.department'))


def available_skills(record: OnboardingRecord) -> list[str]:
    return skills_for(get_path(record, 'job.department'))
