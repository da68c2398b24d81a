# onboardly/engine.py
"""
The validation engine: field rules per leaf plus cross-field rules over
the whole record, folded into one ordered list of violations.

`evaluate` never mutates the record and keeps no state between calls, so
it can run on every keystroke and a superseded result can simply be dropped.
"""
from __future__ import annotations
from collections.abc import Iterable
from datetime import date

from .cross_rules import CROSS_FIELD_RULES, CrossFieldRule
from .step_definitions import STEPS_BY_ID
from .utils import OnboardingRecord, Violation, ViolationKind, get_path, path_covered
from .validation import ValidatorFunc

# Field rules keyed by path, in step/declaration order.
FIELD_RULES: dict[str, list[ValidatorFunc]] = {
    conf['field'].key: conf['validators']
    for step_id in sorted(STEPS_BY_ID)
    for conf in STEPS_BY_ID[step_id]['fields']
}


def _validate_simple_field(
    path: str, validator_list: list[ValidatorFunc], record: OnboardingRecord, today: date,
) -> Violation | None:
    """First failing validator wins; later ones assume the earlier ones passed."""
    value_to_validate = get_path(record, path)
    for validator_func in validator_list:
        is_valid, msg = validator_func(value_to_validate, record, today)  # type: ignore[arg-type]
        if not is_valid:
            return Violation(path, msg, ViolationKind.FIELD)
    return None


def _overlaps(path: str, requested: frozenset[str]) -> bool:
    # A requested path may sit above a blame path or beneath it.
    return path_covered(path, requested) or any(path_covered(req, frozenset({path})) for req in requested)


def _rule_applies(rule: CrossFieldRule, requested: frozenset[str] | None) -> bool:
    if requested is None:
        return True
    return any(_overlaps(blame, requested) for blame in rule.blames)


def evaluate(
    record: OnboardingRecord,
    paths: Iterable[str] | None = None,
    today: date | None = None,
) -> list[Violation]:
    """
    Runs every rule that can report on `paths` (all rules when None) and
    returns the violations surfaced at those paths. Cross-field rules read
    whatever they need; only what they report is filtered. One violation
    per path survives, the last one produced in declaration order.
    """
    requested = frozenset(paths) if paths is not None else None
    today = today or date.today()
    results: dict[str, Violation] = {}

    def keep(violation: Violation) -> None:
        if requested is None or _overlaps(violation.path, requested):
            results[violation.path] = violation

    for path, validator_list in FIELD_RULES.items():
        if requested is not None and not _overlaps(path, requested):
            continue
        violation = _validate_simple_field(path, validator_list, record, today)
        if violation:
            keep(violation)

    for rule in CROSS_FIELD_RULES:
        if not _rule_applies(rule, requested):
            continue
        for violation in rule.check(record, today):
            keep(violation)

    return list(results.values())


def is_valid(record: OnboardingRecord, today: date | None = None) -> bool:
    return not evaluate(record, today=today)


def affected_paths(changed: Iterable[str]) -> list[str]:
    """
    The changed paths plus every path a cross-field rule reading them can
    blame, e.g. a new job type refreshes both salary fields.
    """
    changed_list = list(changed)
    changed_set = frozenset(changed_list)
    affected: dict[str, None] = dict.fromkeys(changed_list)
    for rule in CROSS_FIELD_RULES:
        if any(_overlaps(read, changed_set) for read in rule.reads):
            affected.update(dict.fromkeys(rule.blames))
    return list(affected)

