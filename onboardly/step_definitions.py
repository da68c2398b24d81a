# onboardly/step_definitions.py
from __future__ import annotations

from .derived import MINIMUM_AGE
from .para import all_manager_ids, departments, job_types, relationships
from .utils import AppSchema, StepDefinition
from .validation import (
    required, required_choice, match_pattern, max_length, min_length, min_words,
    one_of, is_valid_date, is_of_age, is_time, is_number, is_number_in_range,
    is_boolean, is_true, min_items, unique_items, is_mapping, is_allowed_upload,
    is_known, EMAIL_PATTERN, PHONE_PATTERN,
)

PHONE_FORMAT_MESSAGE: str = "Format: +1-123-456-7890"

STEPS_BY_ID: dict[int, StepDefinition] = {
    0: {
        'id': 0, 'name': 'personal', 'title': 'Personal',
        'subtitle': 'Who you are and how to reach you.', 'needs_clearance': True,
        'fields': [
            {'field': AppSchema.FULL_NAME, 'validators': [
                required("Required"),
                min_words(2, "Enter at least 2 words"),
            ]},
            {'field': AppSchema.EMAIL, 'validators': [
                required("Required"),
                match_pattern(EMAIL_PATTERN, "Invalid email"),
            ]},
            {'field': AppSchema.PHONE, 'validators': [
                required("Required"),
                match_pattern(PHONE_PATTERN, PHONE_FORMAT_MESSAGE),
            ]},
            {'field': AppSchema.DOB, 'validators': [
                required("Required"),
                is_valid_date("Invalid date"),
                is_of_age(MINIMUM_AGE, f"Must be at least {MINIMUM_AGE} years old"),
            ]},
            {'field': AppSchema.PROFILE_PICTURE, 'validators': [is_allowed_upload()]},
        ],
    },
    1: {
        'id': 1, 'name': 'job', 'title': 'Job',
        'subtitle': 'Department, role, start date and pay.', 'needs_clearance': True,
        'fields': [
            {'field': AppSchema.DEPARTMENT, 'validators': [
                required_choice("Choose a department"),
                one_of(departments, "Unknown department"),
            ]},
            {'field': AppSchema.POSITION_TITLE, 'validators': [min_length(3, "Min 3 chars")]},
            {'field': AppSchema.START_DATE, 'validators': [
                required("Required"),
                is_valid_date("Invalid start date"),
            ]},
            {'field': AppSchema.JOB_TYPE, 'validators': [one_of(job_types, "Choose a job type")]},
            {'field': AppSchema.SALARY_ANNUAL, 'validators': [is_number()]},
            {'field': AppSchema.SALARY_HOURLY, 'validators': [is_number()]},
            {'field': AppSchema.MANAGER_ID, 'validators': [
                required("Manager required"),
                is_known(all_manager_ids, "Unknown manager"),
            ]},
        ],
    },
    2: {
        'id': 2, 'name': 'skills', 'title': 'Skills & Preferences',
        'subtitle': 'What you are good at and how you like to work.', 'needs_clearance': True,
        'fields': [
            {'field': AppSchema.SKILLS, 'validators': [
                min_items(3, "Choose at least 3 skills"),
                unique_items("Each skill can be chosen once"),
            ]},
            {'field': AppSchema.EXPERIENCE_BY_SKILL, 'validators': [is_mapping("Invalid experience entries")]},
            {'field': AppSchema.WORK_START, 'validators': [required("Required"), is_time("Use HH:MM")]},
            {'field': AppSchema.WORK_END, 'validators': [required("Required"), is_time("Use HH:MM")]},
            {'field': AppSchema.REMOTE_PREFERENCE, 'validators': [
                is_number_in_range(0, 100, "Remote preference must be 0-100%"),
            ]},
            {'field': AppSchema.MANAGER_APPROVED, 'validators': [is_boolean()]},
            {'field': AppSchema.NOTES, 'validators': [max_length(500, "Notes cannot exceed 500 characters")]},
        ],
    },
    3: {
        'id': 3, 'name': 'emergency', 'title': 'Emergency Contact',
        'subtitle': 'Someone we can call, and a guardian if you are under 21.', 'needs_clearance': True,
        'fields': [
            {'field': AppSchema.CONTACT_NAME, 'validators': [required("Contact name required")]},
            {'field': AppSchema.RELATIONSHIP, 'validators': [
                required_choice("Select a relationship"),
                one_of(relationships, "Select a relationship"),
            ]},
            {'field': AppSchema.CONTACT_PHONE, 'validators': [
                required("Required"),
                match_pattern(PHONE_PATTERN, PHONE_FORMAT_MESSAGE),
            ]},
            # Presence is conditional on age, see cross_rules.check_guardian
            {'field': AppSchema.GUARDIAN_NAME, 'validators': []},
            {'field': AppSchema.GUARDIAN_PHONE, 'validators': [
                match_pattern(PHONE_PATTERN, "Invalid guardian phone"),
            ]},
        ],
    },
    4: {
        'id': 4, 'name': 'review', 'title': 'Review & Submit',
        'subtitle': 'Check everything once more, then confirm and submit.', 'needs_clearance': False,
        'fields': [
            {'field': AppSchema.CONFIRM, 'validators': [is_true("You must confirm")]},
        ],
    },
}

REVIEW_STEP_ID: int = 4


def step_paths(step_id: int) -> list[str]:
    """The field paths a step declares, in display order."""
    step_def = STEPS_BY_ID.get(step_id)
    if not step_def:
        return []
    return [conf['field'].key for conf in step_def['fields']]
