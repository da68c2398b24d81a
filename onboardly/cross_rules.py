# onboardly/cross_rules.py
"""
Rules that need more than one field to decide. Each rule is a plain
function over the whole record, registered with the paths it reads and
the paths it may blame, so the engine can decide which rules to run for
a requested subset of fields without any knowledge of the rules themselves.
"""
from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from .derived import is_guardian_required, salary_bracket_for
from .para import managers_for, skills_for
from .utils import OnboardingRecord, Violation, ViolationKind, get_path
from .validation import PHONE_PATTERN, is_number_value, parse_date, parse_minutes

RuleCheck = Callable[[OnboardingRecord, date], list[Violation]]

START_DATE_WINDOW_DAYS: int = 90
RESTRICTED_DEPARTMENTS: frozenset[str] = frozenset({'HR', 'Finance'})
RESTRICTED_WEEKDAYS: frozenset[int] = frozenset({4, 5})  # Friday, Saturday
REMOTE_APPROVAL_THRESHOLD: float = 50
MAX_EXPERIENCE_YEARS: float = 50


@dataclass(frozen=True)
class CrossFieldRule:
    name: str
    reads: tuple[str, ...]
    blames: tuple[str, ...]
    check: RuleCheck


def _violation(path: str, message: str) -> Violation:
    return Violation(path, message, ViolationKind.CROSS_FIELD)

# ===================================================================
# JOB
# ===================================================================

def check_start_date_window(record: OnboardingRecord, today: date) -> list[Violation]:
    start = parse_date(get_path(record, 'job.startDate'))
    if start is None:
        return []  # format is the field rule's job
    if start < today:
        return [_violation('job.startDate', "Start date cannot be in the past")]
    if start > today + timedelta(days=START_DATE_WINDOW_DAYS):
        return [_violation('job.startDate', f"Start date must be within {START_DATE_WINDOW_DAYS} days")]
    return []


def check_start_date_weekday(record: OnboardingRecord, today: date) -> list[Violation]:
    start = parse_date(get_path(record, 'job.startDate'))
    department = get_path(record, 'job.department')
    if start is None or department not in RESTRICTED_DEPARTMENTS:
        return []
    if start.weekday() in RESTRICTED_WEEKDAYS:
        return [_violation('job.startDate', "HR/Finance cannot start on Friday or Saturday")]
    return []


def check_salary_bracket(record: OnboardingRecord, today: date) -> list[Violation]:
    bracket = salary_bracket_for(get_path(record, 'job.jobType'))
    if bracket is None:
        return []
    amount = get_path(record, bracket['field'])
    if not is_number_value(amount):
        return [_violation(bracket['field'], bracket['required_message'])]
    if not bracket['minimum'] <= amount <= bracket['maximum']:
        return [_violation(bracket['field'], bracket['range_message'])]
    return []


def check_manager_department(record: OnboardingRecord, today: date) -> list[Violation]:
    manager_id = get_path(record, 'job.managerId')
    if not manager_id:
        return []
    department = get_path(record, 'job.department')
    if manager_id not in {m['id'] for m in managers_for(department)}:
        return [_violation('job.managerId', f"Manager does not belong to {department or 'the selected department'}")]
    return []

# ===================================================================
# SKILLS
# ===================================================================

def check_skill_catalogue(record: OnboardingRecord, today: date) -> list[Violation]:
    selected = get_path(record, 'skills.skills') or []
    department = get_path(record, 'job.department')
    offered = set(skills_for(department))
    unknown = [s for s in selected if s not in offered]
    if unknown:
        return [_violation('skills.skills', f"Not offered for {department}: {', '.join(map(str, unknown))}")]
    return []


def check_experience_per_skill(record: OnboardingRecord, today: date) -> list[Violation]:
    selected = get_path(record, 'skills.skills') or []
    experience: Any = get_path(record, 'skills.experienceBySkill')
    if not isinstance(experience, dict):
        experience = {}
    violations: list[Violation] = []
    for skill in selected:
        path = f'skills.experienceBySkill.{skill}'
        years = experience.get(skill)
        if not is_number_value(years):
            violations.append(_violation(path, f"Add experience for {skill}"))
        elif not 0 <= years <= MAX_EXPERIENCE_YEARS:
            violations.append(_violation(path, f"Experience must be between 0 and {MAX_EXPERIENCE_YEARS:g} years"))
    return violations


def check_work_hours(record: OnboardingRecord, today: date) -> list[Violation]:
    start = parse_minutes(get_path(record, 'skills.workStart'))
    end = parse_minutes(get_path(record, 'skills.workEnd'))
    if start is None or end is None:
        return []
    if not start < end:
        return [_violation('skills.workEnd', "End time must be after start time")]
    return []


def check_remote_approval(record: OnboardingRecord, today: date) -> list[Violation]:
    remote = get_path(record, 'skills.remotePreference')
    if is_number_value(remote) and remote > REMOTE_APPROVAL_THRESHOLD \
            and get_path(record, 'skills.managerApproved') is not True:
        return [_violation('skills.managerApproved', "Manager approval required for >50% remote")]
    return []

# ===================================================================
# EMERGENCY
# ===================================================================

def check_guardian(record: OnboardingRecord, today: date) -> list[Violation]:
    if not is_guardian_required(record, today):
        return []
    violations: list[Violation] = []
    name = get_path(record, 'emergency.guardianName')
    phone = get_path(record, 'emergency.guardianPhone')
    if not isinstance(name, str) or not name.strip():
        violations.append(_violation('emergency.guardianName', "Guardian name required for employees under 21"))
    if not isinstance(phone, str) or not phone.strip():
        violations.append(_violation('emergency.guardianPhone', "Guardian phone required for employees under 21"))
    elif not PHONE_PATTERN.match(phone):
        violations.append(_violation('emergency.guardianPhone', "Invalid guardian phone"))
    return violations

# ===================================================================
# THE REGISTRY (evaluation order)
# ===================================================================

CROSS_FIELD_RULES: list[CrossFieldRule] = [
    CrossFieldRule(
        name='start_date_window',
        reads=('job.startDate',),
        blames=('job.startDate',),
        check=check_start_date_window,
    ),
    CrossFieldRule(
        name='start_date_weekday',
        reads=('job.department', 'job.startDate'),
        blames=('job.startDate',),
        check=check_start_date_weekday,
    ),
    CrossFieldRule(
        name='salary_bracket',
        reads=('job.jobType', 'job.salaryAnnual', 'job.salaryHourly'),
        blames=('job.salaryAnnual', 'job.salaryHourly'),
        check=check_salary_bracket,
    ),
    CrossFieldRule(
        name='manager_department',
        reads=('job.department', 'job.managerId'),
        blames=('job.managerId',),
        check=check_manager_department,
    ),
    CrossFieldRule(
        name='skill_catalogue',
        reads=('job.department', 'skills.skills'),
        blames=('skills.skills',),
        check=check_skill_catalogue,
    ),
    CrossFieldRule(
        name='experience_per_skill',
        reads=('skills.skills', 'skills.experienceBySkill'),
        blames=('skills.experienceBySkill',),
        check=check_experience_per_skill,
    ),
    CrossFieldRule(
        name='work_hours',
        reads=('skills.workStart', 'skills.workEnd'),
        blames=('skills.workEnd',),
        check=check_work_hours,
    ),
    CrossFieldRule(
        name='remote_approval',
        reads=('skills.remotePreference', 'skills.managerApproved'),
        blames=('skills.managerApproved',),
        check=check_remote_approval,
    ),
    CrossFieldRule(
        name='guardian',
        reads=('personal.dob', 'emergency.guardianName', 'emergency.guardianPhone'),
        blames=('emergency.guardianName', 'emergency.guardianPhone'),
        check=check_guardian,
    ),
]
