# onboardly/transform.py
from __future__ import annotations
import logging
import re
from datetime import date
from typing import Any, NotRequired, TypedDict

from .derived import compute_age, salary_bracket_for
from .engine import evaluate
from .utils import OnboardingRecord, Violation, snapshot

logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r'\s+')


class TransformPreconditionError(ValueError):
    """`transform` was handed a record that does not pass full validation."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        paths = ', '.join(v.path for v in violations)
        super().__init__(f"Cannot build a payload from an invalid record ({len(violations)} violations: {paths})")


class PayloadJob(TypedDict):
    department: str
    positionTitle: str
    startDate: str
    jobType: str
    managerId: str
    annualSalary: NotRequired[float]
    hourlyRate: NotRequired[float]


class PayloadMeta(TypedDict):
    age: int | None


class SubmissionPayload(TypedDict):
    """The shape an external transport has to accept."""
    personal: dict[str, Any]
    job: PayloadJob
    skills: dict[str, Any]
    emergency: dict[str, Any]
    meta: PayloadMeta


def _transform_job(job: dict[str, Any]) -> PayloadJob:
    payload_job: PayloadJob = {
        'department': job['department'],
        'positionTitle': job['positionTitle'],
        'startDate': job['startDate'],
        'jobType': job['jobType'],
        'managerId': job['managerId'],
    }
    # Only the applicable salary survives, under its payload name.
    bracket = salary_bracket_for(job['jobType'])
    if bracket is not None:
        field_name = bracket['field'].split('.', 1)[1]
        payload_job[bracket['payload_key']] = job[field_name]  # type: ignore[literal-required]
    return payload_job


def transform(record: OnboardingRecord, today: date | None = None) -> SubmissionPayload:
    """
    Derives the submission payload from a fully valid record. Raises
    TransformPreconditionError otherwise, which is a caller bug rather
    than something to show the user.
    """
    violations = evaluate(record, today=today)
    if violations:
        raise TransformPreconditionError(violations)

    values = snapshot(record)
    personal: dict[str, Any] = dict(values['personal'])
    personal['phone'] = WHITESPACE_PATTERN.sub('', personal['phone'])

    skills: dict[str, Any] = dict(values['skills'])
    skills['remotePreference'] = skills['remotePreference'] / 100

    payload: SubmissionPayload = {
        'personal': personal,
        'job': _transform_job(dict(values['job'])),
        'skills': skills,
        'emergency': dict(values['emergency']),
        'meta': {'age': compute_age(personal.get('dob'), today)},
    }
    logger.debug(f"Built payload for {personal['email']} ({payload['job']['jobType']}).")
    return payload
