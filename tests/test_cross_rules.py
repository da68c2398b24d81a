# tests/test_cross_rules.py
from __future__ import annotations

from datetime import date, timedelta

from onboardly.cross_rules import (
    CROSS_FIELD_RULES,
    check_start_date_window,
    check_start_date_weekday,
    check_salary_bracket,
    check_manager_department,
    check_skill_catalogue,
    check_experience_per_skill,
    check_work_hours,
    check_remote_approval,
    check_guardian,
)
from onboardly.utils import OnboardingRecord, ViolationKind

from conftest import next_weekday, years_ago

TODAY = date.today()


def paths(violations: list) -> list[str]:
    return [v.path for v in violations]


def test_every_rule_passes_on_a_valid_record(valid_record: OnboardingRecord) -> None:
    for rule in CROSS_FIELD_RULES:
        assert rule.check(valid_record, TODAY) == [], f"{rule.name} should pass on a valid record"


def test_rules_blame_only_their_declared_paths(valid_record: OnboardingRecord) -> None:
    """A broken record makes each rule speak only about the paths it declares."""
    record = valid_record
    record['job']['startDate'] = "2000-01-01"
    record['job']['salaryAnnual'] = None
    record['skills']['experienceBySkill'] = {}
    record['skills']['workEnd'] = "08:00"
    record['skills']['remotePreference'] = 80
    record['personal']['dob'] = years_ago(19)
    for rule in CROSS_FIELD_RULES:
        for violation in rule.check(record, TODAY):
            assert any(violation.path == b or violation.path.startswith(f"{b}.") for b in rule.blames), \
                f"{rule.name} blamed undeclared path {violation.path}"
            assert violation.kind is ViolationKind.CROSS_FIELD


def test_start_date_window(valid_record: OnboardingRecord) -> None:
    job = valid_record['job']

    # --- Passing Cases ---
    job['startDate'] = TODAY.isoformat()
    assert check_start_date_window(valid_record, TODAY) == [], "Today is allowed"
    job['startDate'] = (TODAY + timedelta(days=90)).isoformat()
    assert check_start_date_window(valid_record, TODAY) == [], "Day 90 is allowed"

    # --- Failing Cases ---
    job['startDate'] = (TODAY - timedelta(days=1)).isoformat()
    violations = check_start_date_window(valid_record, TODAY)
    assert paths(violations) == ['job.startDate']
    assert violations[0].message == "Start date cannot be in the past"

    job['startDate'] = (TODAY + timedelta(days=91)).isoformat()
    violations = check_start_date_window(valid_record, TODAY)
    assert violations[0].message == "Start date must be within 90 days"

    # --- Edge Cases ---
    job['startDate'] = "not a date"
    assert check_start_date_window(valid_record, TODAY) == [], "Format errors belong to the field rule"


def test_hr_cannot_start_on_friday(valid_record: OnboardingRecord) -> None:
    """HR and Finance hires may not start on a Friday or a Saturday."""
    job = valid_record['job']
    job['department'] = "HR"
    job['startDate'] = next_weekday(4).isoformat()

    violations = check_start_date_weekday(valid_record, TODAY)
    assert paths(violations) == ['job.startDate']
    assert "Friday or Saturday" in violations[0].message

    job['department'] = "Finance"
    job['startDate'] = next_weekday(5).isoformat()
    assert paths(check_start_date_weekday(valid_record, TODAY)) == ['job.startDate']

    job['startDate'] = next_weekday(0).isoformat()
    assert check_start_date_weekday(valid_record, TODAY) == [], "Mondays are fine"

    job['department'] = "Engineering"
    job['startDate'] = next_weekday(4).isoformat()
    assert check_start_date_weekday(valid_record, TODAY) == [], "Other departments may start on Friday"


def test_salary_follows_job_type(valid_record: OnboardingRecord) -> None:
    job = valid_record['job']

    # Full-time: annual required and bounded, hourly ignored
    job['salaryHourly'] = 5000
    assert check_salary_bracket(valid_record, TODAY) == []
    job['salaryAnnual'] = None
    assert [(v.path, v.message) for v in check_salary_bracket(valid_record, TODAY)] == \
        [('job.salaryAnnual', "Annual salary required")]
    job['salaryAnnual'] = 29999
    assert check_salary_bracket(valid_record, TODAY)[0].message == "$30k-$200k"
    job['salaryAnnual'] = float('nan')
    assert check_salary_bracket(valid_record, TODAY)[0].message == "Annual salary required"

    # Contract: hourly required and bounded, annual ignored
    job['jobType'] = "Contract"
    job['salaryAnnual'] = 90000
    job['salaryHourly'] = None
    assert [(v.path, v.message) for v in check_salary_bracket(valid_record, TODAY)] == \
        [('job.salaryHourly', "Hourly rate required for contracts")]
    job['salaryHourly'] = 151
    assert check_salary_bracket(valid_record, TODAY)[0].message == "$50-$150/hr"
    job['salaryHourly'] = 150
    assert check_salary_bracket(valid_record, TODAY) == []


def test_manager_must_belong_to_department(valid_record: OnboardingRecord) -> None:
    valid_record['job']['department'] = "Sales"
    assert paths(check_manager_department(valid_record, TODAY)) == ['job.managerId']

    valid_record['job']['managerId'] = "m-sal-2"
    assert check_manager_department(valid_record, TODAY) == []


def test_skills_must_come_from_department_catalogue(valid_record: OnboardingRecord) -> None:
    valid_record['job']['department'] = "Marketing"
    violations = check_skill_catalogue(valid_record, TODAY)
    assert paths(violations) == ['skills.skills']
    assert "Python" in violations[0].message


def test_missing_experience_is_reported_per_skill(valid_record: OnboardingRecord) -> None:
    valid_record['skills']['skills'] = ["Go", "Rust", "Python"]
    valid_record['skills']['experienceBySkill'] = {"Go": 2}

    violations = check_experience_per_skill(valid_record, TODAY)
    assert paths(violations) == ['skills.experienceBySkill.Rust', 'skills.experienceBySkill.Python']
    assert violations[0].message == "Add experience for Rust"


def test_experience_bounds_and_extra_entries(valid_record: OnboardingRecord) -> None:
    experience = valid_record['skills']['experienceBySkill']
    experience['Kubernetes'] = 999  # not selected, tolerated
    assert check_experience_per_skill(valid_record, TODAY) == []

    experience['Go'] = 51
    experience['Rust'] = -1
    assert paths(check_experience_per_skill(valid_record, TODAY)) == \
        ['skills.experienceBySkill.Go', 'skills.experienceBySkill.Rust']

    experience['Go'] = 0
    experience['Rust'] = 50
    assert check_experience_per_skill(valid_record, TODAY) == []


def test_work_hours_must_be_ordered(valid_record: OnboardingRecord) -> None:
    skills = valid_record['skills']
    skills['workStart'], skills['workEnd'] = "17:00", "17:00"
    assert paths(check_work_hours(valid_record, TODAY)) == ['skills.workEnd'], "Equal times are not ordered"

    skills['workStart'], skills['workEnd'] = "09:30", "09:31"
    assert check_work_hours(valid_record, TODAY) == []


def test_remote_approval(valid_record: OnboardingRecord) -> None:
    skills = valid_record['skills']
    skills['remotePreference'] = 50
    assert check_remote_approval(valid_record, TODAY) == [], "Exactly 50% needs no approval"

    skills['remotePreference'] = 55
    assert paths(check_remote_approval(valid_record, TODAY)) == ['skills.managerApproved']

    skills['managerApproved'] = True
    assert check_remote_approval(valid_record, TODAY) == []


def test_guardian_required_under_21(valid_record: OnboardingRecord) -> None:
    valid_record['personal']['dob'] = years_ago(19)
    emergency = valid_record['emergency']

    assert paths(check_guardian(valid_record, TODAY)) == ['emergency.guardianName', 'emergency.guardianPhone']

    emergency['guardianName'] = "Mary Smith"
    emergency['guardianPhone'] = "555-1234"
    violations = check_guardian(valid_record, TODAY)
    assert [(v.path, v.message) for v in violations] == [('emergency.guardianPhone', "Invalid guardian phone")]

    emergency['guardianPhone'] = "+1-555-000-1111"
    assert check_guardian(valid_record, TODAY) == []


def test_guardian_never_required_from_21(valid_record: OnboardingRecord) -> None:
    valid_record['personal']['dob'] = years_ago(21)
    assert check_guardian(valid_record, TODAY) == []
