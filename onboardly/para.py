from __future__ import annotations
from typing import TypedDict


class Manager(TypedDict):
    id: str
    name: str


departments: list[str] = [
    "Engineering",
    "Marketing",
    "Sales",
    "HR",
    "Finance",
]

job_types: list[str] = [
    "Full-time",
    "Part-time",
    "Contract",
]

relationships: list[str] = [
    "Parent",
    "Spouse",
    "Sibling",
    "Friend",
    "Other",
]

managers_by_department: dict[str, list[Manager]] = {
    "Engineering": [
        {"id": "m-eng-1", "name": "Priya Raman"},
        {"id": "m-eng-2", "name": "Tomás Herrera"},
        {"id": "m-eng-3", "name": "Grace Okafor"},
    ],
    "Marketing": [
        {"id": "m-mkt-1", "name": "Lena Fischer"},
        {"id": "m-mkt-2", "name": "Daniel Cho"},
    ],
    "Sales": [
        {"id": "m-sal-1", "name": "Marcus Bell"},
        {"id": "m-sal-2", "name": "Aiko Tanaka"},
    ],
    "HR": [
        {"id": "m-hr-1", "name": "Sofia Rossi"},
    ],
    "Finance": [
        {"id": "m-fin-1", "name": "Omar Haddad"},
        {"id": "m-fin-2", "name": "Helen Park"},
    ],
}

skills_by_department: dict[str, list[str]] = {
    "Engineering": [
        "Python", "Go", "Rust", "TypeScript", "React",
        "Kubernetes", "SQL", "AWS", "Docker", "GraphQL",
    ],
    "Marketing": [
        "SEO", "Content Writing", "Copywriting", "Google Ads",
        "Social Media", "Analytics", "Branding", "Email Campaigns",
    ],
    "Sales": [
        "Negotiation", "CRM", "Lead Generation", "Cold Calling",
        "Account Management", "Forecasting", "Presentations",
    ],
    "HR": [
        "Recruiting", "Onboarding", "Payroll", "Employee Relations",
        "Compliance", "Training", "Benefits Administration",
    ],
    "Finance": [
        "Accounting", "Budgeting", "Excel", "Financial Modeling",
        "Auditing", "Tax", "Reporting", "Forecasting",
    ],
}


def managers_for(department: str | None) -> list[Manager]:
    """Managers of a department; unknown departments have none."""
    return list(managers_by_department.get(department or "", []))


def skills_for(department: str | None) -> list[str]:
    """Skill catalogue of a department; unknown departments offer nothing."""
    return list(skills_by_department.get(department or "", []))


def all_manager_ids() -> set[str]:
    return {m["id"] for managers in managers_by_department.values() for m in managers}
