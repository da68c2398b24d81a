# onboardly/wizard.py
"""
The step gate: owns the current step and the record under edit, and
decides which rules have to pass before the user may move forward.
"""
from __future__ import annotations
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .derived import is_guardian_required
from .engine import affected_paths, evaluate
from .form_data_builder import FormTemplate, ONBOARDING_TEMPLATE
from .step_definitions import REVIEW_STEP_ID, STEPS_BY_ID, step_paths
from .transform import SubmissionPayload, transform
from .utils import (
    AppSchema, OnboardingRecord, StepDefinition, Violation,
    new_record, path_covered, set_path, snapshot,
)

logger = logging.getLogger(__name__)

Transport = Callable[[SubmissionPayload], Any]


class StepTransitionError(RuntimeError):
    """A transition was requested from a step that does not offer it."""


@dataclass(frozen=True)
class GlobalGuard:
    """Paths checked on every forward move while `applies` holds, whatever the step."""
    name: str
    applies: Callable[[OnboardingRecord, date], bool]
    paths: tuple[str, ...]


GLOBAL_GUARDS: list[GlobalGuard] = [
    GlobalGuard(
        name='guardian_on_file',
        applies=is_guardian_required,
        paths=(AppSchema.GUARDIAN_NAME.key, AppSchema.GUARDIAN_PHONE.key),
    ),
]


@dataclass
class StepResult:
    advanced: bool
    step: int
    violations: list[Violation] = field(default_factory=list)


@dataclass
class SubmitResult:
    succeeded: bool
    payload: SubmissionPayload | None = None
    violations: list[Violation] = field(default_factory=list)

# ===================================================================
# NAVIGATION (pure)
# ===================================================================

def calculate_next_step_id(current_step_id: int, form_template: FormTemplate | None) -> int:
    """Calculates the ID of the next step in the sequence."""
    if not form_template:
        return 0

    step_sequence: list[int] = form_template['step_sequence']
    if not step_sequence:
        return 0

    try:
        current_index: int = step_sequence.index(current_step_id)
        if current_index < len(step_sequence) - 1:
            return step_sequence[current_index + 1]
        return current_step_id  # Stay on the last step if there's no next one
    except ValueError:
        return step_sequence[0]  # Go to start if current step isn't in sequence

def calculate_prev_step_id(current_step_id: int, form_template: FormTemplate | None) -> int:
    """Calculates the ID of the previous step in the sequence."""
    if not form_template or not form_template['step_sequence']:
        return 0

    step_sequence: list[int] = form_template['step_sequence']
    try:
        current_index: int = step_sequence.index(current_step_id)
        return step_sequence[current_index - 1] if current_index > 0 else step_sequence[0]
    except ValueError:
        return step_sequence[0]

# ===================================================================
# THE WIZARD
# ===================================================================

_EXPERIENCE_PREFIX: str = f"{AppSchema.EXPERIENCE_BY_SKILL.key}."
_FIELD_KEYS: frozenset[str] = frozenset(f.key for f in AppSchema.get_all_fields())


class OnboardingWizard:
    """
    One editing session. The record lives only as long as the wizard and
    is replaced by a fresh default on discard or successful submission.
    """

    def __init__(
        self,
        form_template: FormTemplate = ONBOARDING_TEMPLATE,
        transport: Transport | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.form_template = form_template
        self.transport = transport
        self._clock = clock
        self._reset()

    def _reset(self) -> None:
        self.record: OnboardingRecord = new_record()
        self._saved: OnboardingRecord = snapshot(self.record)
        self.step_id: int = self.form_template['step_sequence'][0]
        self.errors: dict[str, str] = {}

    # --- State ---

    def current_step(self) -> int:
        return self.step_id

    @property
    def current_step_def(self) -> StepDefinition:
        return STEPS_BY_ID[self.step_id]

    @property
    def is_dirty(self) -> bool:
        return self.record != self._saved

    def save_snapshot(self) -> None:
        """Marks the current record as saved (in memory only)."""
        self._saved = snapshot(self.record)

    def discard(self) -> None:
        logger.info("Onboarding session discarded.")
        self._reset()

    def gate_paths(self, step_id: int | None = None) -> list[str]:
        """Paths that must be clean to leave `step_id` forwards, guards included."""
        step_def = STEPS_BY_ID.get(self.step_id if step_id is None else step_id)
        paths: list[str] = []
        if step_def and step_def['needs_clearance']:
            paths.extend(step_paths(step_def['id']))
        today = self._clock()
        for guard in GLOBAL_GUARDS:
            if guard.applies(self.record, today):
                paths.extend(p for p in guard.paths if p not in paths)
        return paths

    def _refresh_errors(self, paths: list[str], violations: list[Violation]) -> None:
        covered = frozenset(paths)
        self.errors = {p: m for p, m in self.errors.items() if not path_covered(p, covered)}
        self.errors.update((v.path, v.message) for v in violations)

    # --- Editing ---

    def update_field(self, path: str, value: Any) -> list[Violation]:
        """Writes one field, marks the record dirty and returns the live violations it affects."""
        if path.startswith(_EXPERIENCE_PREFIX):
            skill = path[len(_EXPERIENCE_PREFIX):]
            self.record['skills']['experienceBySkill'][skill] = value
        elif path in _FIELD_KEYS:
            set_path(self.record, path, value)
        else:
            raise KeyError(f"Unknown field path: {path}")

        paths = affected_paths([path])
        violations = evaluate(self.record, paths, today=self._clock())
        self._refresh_errors(paths, violations)
        return violations

    # --- Transitions ---

    def request_next(self) -> StepResult:
        paths = self.gate_paths()
        violations = evaluate(self.record, paths, today=self._clock())
        self._refresh_errors(paths, violations)
        if violations:
            logger.info(f"Step {self.step_id} blocked by {len(violations)} violation(s).")
            return StepResult(advanced=False, step=self.step_id, violations=violations)

        previous = self.step_id
        self.step_id = calculate_next_step_id(previous, self.form_template)
        if self.step_id != previous:
            logger.info(f"Advanced from step {previous} to step {self.step_id}.")
        return StepResult(advanced=self.step_id != previous, step=self.step_id)

    def request_prev(self) -> int:
        self.step_id = calculate_prev_step_id(self.step_id, self.form_template)
        return self.step_id

    def request_submit(self) -> SubmitResult:
        if self.step_id != REVIEW_STEP_ID:
            raise StepTransitionError(f"Submit is only available from step {REVIEW_STEP_ID}, not {self.step_id}.")

        today = self._clock()
        violations = evaluate(self.record, today=today)
        self.errors = {v.path: v.message for v in violations}
        if violations:
            logger.info(f"Submission blocked by {len(violations)} violation(s).")
            return SubmitResult(succeeded=False, violations=violations)

        payload = transform(self.record, today=today)
        logger.info(f"Onboarding record for {payload['personal']['email']} submitted.")
        self._reset()

        if self.transport is not None:
            try:
                self.transport(payload)
            except Exception as e:
                # The payload is already produced; the session stays reset.
                logger.error(f"Transport failed for submitted payload: {e}", exc_info=True)
        return SubmitResult(succeeded=True, payload=payload)
