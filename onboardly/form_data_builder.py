from __future__ import annotations
from enum import Enum
from typing import TypedDict

# ===================================================================
# 1. EMPLOYMENT BRACKETS
# ===================================================================
# The job type decides which salary field is mandatory. Each bracket
# names its input field, the key it takes in the payload and its bounds.

class JobType(Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"


class SalaryBracket(TypedDict):
    """Which salary field a job type uses and how it is bounded."""
    field: str
    payload_key: str
    minimum: float
    maximum: float
    required_message: str
    range_message: str


ANNUAL_BRACKET: SalaryBracket = {
    'field': 'job.salaryAnnual',
    'payload_key': 'annualSalary',
    'minimum': 30000,
    'maximum': 200000,
    'required_message': "Annual salary required",
    'range_message': "$30k-$200k",
}

HOURLY_BRACKET: SalaryBracket = {
    'field': 'job.salaryHourly',
    'payload_key': 'hourlyRate',
    'minimum': 50,
    'maximum': 150,
    'required_message': "Hourly rate required for contracts",
    'range_message': "$50-$150/hr",
}

SALARY_BRACKET_REGISTRY: dict[JobType, SalaryBracket] = {
    JobType.FULL_TIME: ANNUAL_BRACKET,
    JobType.PART_TIME: ANNUAL_BRACKET,
    JobType.CONTRACT: HOURLY_BRACKET,
}

# ===================================================================
# 2. THE WIZARD BLUEPRINT
# ===================================================================

class FormTemplate(TypedDict):
    """A blueprint for the onboarding wizard."""
    name: str
    description: str
    # The ordered sequence of step IDs the wizard walks through.
    step_sequence: list[int]


ONBOARDING_TEMPLATE: FormTemplate = {
    'name': "New Employee Onboarding",
    'description': "Personal details, job, skills and emergency contacts, reviewed before submission.",
    'step_sequence': [0, 1, 2, 3, 4],
}
