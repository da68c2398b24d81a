# tests/conftest.py
from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Make the `onboardly` directory importable without installing the project.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from onboardly.utils import OnboardingRecord  # noqa: E402


def years_ago(years: int) -> str:
    """Today's date `years` back; a 29 February today falls back to the 28th."""
    today = date.today()
    try:
        return today.replace(year=today.year - years).isoformat()
    except ValueError:
        return today.replace(year=today.year - years, day=28).isoformat()


def next_weekday(weekday: int) -> date:
    """The next date strictly after today falling on `weekday` (Mon=0)."""
    today = date.today()
    return today + timedelta(days=(weekday - today.weekday()) % 7 or 7)


@pytest.fixture
def valid_record() -> OnboardingRecord:
    """A record that passes full validation, rebuilt for every test."""
    return {
        'personal': {
            'fullName': "John Smith",
            'email': "john.smith@example.com",
            'phone': "+1-555-987-6543",
            'dob': years_ago(30),
            'profilePicture': None,
        },
        'job': {
            'department': "Engineering",
            'positionTitle': "Backend Engineer",
            'startDate': (date.today() + timedelta(days=7)).isoformat(),
            'jobType': "Full-time",
            'salaryAnnual': 90000,
            'salaryHourly': None,
            'managerId': "m-eng-1",
        },
        'skills': {
            'skills': ["Python", "Go", "Rust"],
            'experienceBySkill': {"Python": 5, "Go": 2, "Rust": 1.5},
            'workStart': "09:00",
            'workEnd': "17:00",
            'remotePreference': 40,
            'managerApproved': False,
            'notes': "",
        },
        'emergency': {
            'contactName': "Jane Smith",
            'relationship': "Spouse",
            'contactPhone': "+1-555-123-4567",
            'guardianName': None,
            'guardianPhone': None,
        },
        'review': {
            'confirm': True,
        },
    }
