# onboardly/utils.py
from __future__ import annotations
import copy
from enum import Enum, auto
from typing import Any, NotRequired, TypedDict
from dataclasses import dataclass

from .para import departments, job_types, relationships
from .validation import ValidatorFunc

# ===================================================================
# 1. THE RECORD (one TypedDict per section)
# ===================================================================

class ProfilePicture(TypedDict):
    name: str
    type: str
    size: int


class PersonalSection(TypedDict):
    fullName: str
    email: str
    phone: str
    dob: str
    profilePicture: NotRequired[ProfilePicture | None]


class JobSection(TypedDict):
    department: str
    positionTitle: str
    startDate: str
    jobType: str
    salaryAnnual: float | None
    salaryHourly: float | None
    managerId: str


class SkillsSection(TypedDict):
    skills: list[str]
    experienceBySkill: dict[str, float]
    workStart: str
    workEnd: str
    remotePreference: float
    managerApproved: bool
    notes: str


class EmergencySection(TypedDict):
    contactName: str
    relationship: str
    contactPhone: str
    guardianName: str | None
    guardianPhone: str | None


class ReviewSection(TypedDict):
    confirm: bool


class OnboardingRecord(TypedDict):
    personal: PersonalSection
    job: JobSection
    skills: SkillsSection
    emergency: EmergencySection
    review: ReviewSection

# ===================================================================
# 2. VIOLATIONS
# ===================================================================

class ViolationKind(Enum):
    FIELD = auto()
    CROSS_FIELD = auto()


@dataclass(frozen=True)
class Violation:
    """A failed rule, attributed to the field the user has to fix."""
    path: str
    message: str
    kind: ViolationKind = ViolationKind.FIELD

# ===================================================================
# 3. FIELD DEFINITIONS & STEP STRUCTURE
# ===================================================================

@dataclass(frozen=True)
class FormField:
    """Defines everything about a form field in one place."""
    key: str  # dotted path into the record, e.g. 'personal.fullName'
    label: str
    ui_type: str = 'text'
    options: list[str] | None = None
    default_value: Any = ''
    max_length: int | None = None

    @property
    def section(self) -> str:
        return self.key.split('.', 1)[0]

    @property
    def name(self) -> str:
        return self.key.split('.', 1)[1]


class FieldConfig(TypedDict):
    field: FormField
    validators: list[ValidatorFunc]


class StepDefinition(TypedDict):
    id: int
    name: str
    title: str
    subtitle: str
    fields: list[FieldConfig]
    # False when the step's fields are only cleared at final submission.
    needs_clearance: bool


class AppSchema:
    """
    Defines all fields of the onboarding record. Each field is an instance
    of the FormField dataclass, containing all its necessary metadata.
    """
    FULL_NAME = FormField(key='personal.fullName', label='Full Name')
    EMAIL = FormField(key='personal.email', label='Email')
    PHONE = FormField(key='personal.phone', label='Phone (+1-123-456-7890)')
    DOB = FormField(key='personal.dob', label='Date of Birth', ui_type='date')
    PROFILE_PICTURE = FormField(key='personal.profilePicture', label='Profile Picture (PNG/JPG, max 2MB)',
                                ui_type='file', default_value=None)

    DEPARTMENT = FormField(key='job.department', label='Department', ui_type='select',
                           options=departments, default_value='Engineering')
    POSITION_TITLE = FormField(key='job.positionTitle', label='Position Title')
    START_DATE = FormField(key='job.startDate', label='Start Date', ui_type='date')
    JOB_TYPE = FormField(key='job.jobType', label='Job Type', ui_type='radio',
                         options=job_types, default_value='Full-time')
    SALARY_ANNUAL = FormField(key='job.salaryAnnual', label='Annual ($30k-$200k)', ui_type='number',
                              default_value=None)
    SALARY_HOURLY = FormField(key='job.salaryHourly', label='Hourly ($50-$150)', ui_type='number',
                              default_value=None)
    MANAGER_ID = FormField(key='job.managerId', label='Manager', ui_type='manager')

    SKILLS = FormField(key='skills.skills', label='Primary Skills (select at least 3)', ui_type='skills',
                       default_value=[])
    EXPERIENCE_BY_SKILL = FormField(key='skills.experienceBySkill', label='Experience per selected skill (years)',
                                    ui_type='experience', default_value={})
    WORK_START = FormField(key='skills.workStart', label='Preferred Start', ui_type='time', default_value='09:00')
    WORK_END = FormField(key='skills.workEnd', label='Preferred End', ui_type='time', default_value='17:00')
    REMOTE_PREFERENCE = FormField(key='skills.remotePreference', label='Remote Preference (%)', ui_type='slider',
                                  default_value=0)
    MANAGER_APPROVED = FormField(key='skills.managerApproved', label='Manager Approved', ui_type='checkbox',
                                 default_value=False)
    NOTES = FormField(key='skills.notes', label='Extra Notes', ui_type='textarea', max_length=500)

    CONTACT_NAME = FormField(key='emergency.contactName', label='Contact Name')
    RELATIONSHIP = FormField(key='emergency.relationship', label='Relationship', ui_type='select',
                             options=relationships)
    CONTACT_PHONE = FormField(key='emergency.contactPhone', label='Contact Phone')
    GUARDIAN_NAME = FormField(key='emergency.guardianName', label='Guardian Name', default_value=None)
    GUARDIAN_PHONE = FormField(key='emergency.guardianPhone', label='Guardian Phone', default_value=None)

    CONFIRM = FormField(key='review.confirm', label='I confirm the information above is correct',
                        ui_type='checkbox', default_value=False)

    @classmethod
    def get_all_fields(cls) -> list[FormField]:
        return [
            field_instance for field_instance in cls.__dict__.values()
            if isinstance(field_instance, FormField)
        ]

    @classmethod
    def get_field(cls, key: str) -> FormField:
        for field_instance in cls.get_all_fields():
            if field_instance.key == key:
                return field_instance
        raise KeyError(f"Unknown field path: {key}")

# ===================================================================
# 4. RECORD HELPERS
# ===================================================================

SECTIONS: tuple[str, ...] = ('personal', 'job', 'skills', 'emergency', 'review')


def new_record() -> OnboardingRecord:
    """A fully defaulted record for a fresh editing session."""
    record: dict[str, dict[str, Any]] = {section: {} for section in SECTIONS}
    for field in AppSchema.get_all_fields():
        # copy so mutable defaults ([] / {}) are never shared between records
        record[field.section][field.name] = copy.deepcopy(field.default_value)
    return record  # type: ignore[return-value]


def snapshot(record: OnboardingRecord) -> OnboardingRecord:
    return copy.deepcopy(record)


def get_path(record: OnboardingRecord | dict[str, Any], path: str) -> Any:
    """Reads a dotted path; missing segments read as None."""
    node: Any = record
    for part in path.split('.'):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def set_path(record: OnboardingRecord | dict[str, Any], path: str, value: Any) -> None:
    """Writes a dotted path in place. The parent must already exist."""
    *parents, leaf = path.split('.')
    node: Any = record
    for part in parents:
        if not isinstance(node, dict) or part not in node:
            raise KeyError(f"Unknown field path: {path}")
        node = node[part]
    if not isinstance(node, dict):
        raise KeyError(f"Unknown field path: {path}")
    node[leaf] = value


def path_covered(path: str, requested: set[str] | frozenset[str]) -> bool:
    """True if `path` equals a requested path or lies beneath one."""
    if path in requested:
        return True
    return any(path.startswith(f"{prefix}.") for prefix in requested)
