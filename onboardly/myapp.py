# ===================================================================
# 1. IMPORTS
# ===================================================================
import json
import os
import logging
from typing import Any
from collections.abc import Callable, Mapping

from nicegui import ui

# Local application imports
from .derived import available_managers, available_skills, compute_age, GUARDIAN_AGE_THRESHOLD
from .form_data_builder import ONBOARDING_TEMPLATE, JobType
from .step_definitions import STEPS_BY_ID, REVIEW_STEP_ID
from .transform import SubmissionPayload
from .utils import AppSchema, FormField, StepDefinition, get_path
from .validation import MAX_UPLOAD_BYTES
from .wizard import OnboardingWizard

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Fields whose value changes what the current step shows.
REFRESH_ON_CHANGE: frozenset[str] = frozenset({
    AppSchema.DOB.key, AppSchema.DEPARTMENT.key, AppSchema.JOB_TYPE.key,
    AppSchema.SKILLS.key, AppSchema.REMOTE_PREFERENCE.key,
})

BEFORE_UNLOAD_SCRIPT: str = """
<script>
window.onboardlyDirty = false;
window.addEventListener('beforeunload', (e) => {
    if (!window.onboardlyDirty) return;
    e.preventDefault();
    e.returnValue = '';
});
</script>
"""

# ===================================================================
# 2. TRANSPORT (external collaborator)
# ===================================================================

def log_transport(payload: SubmissionPayload) -> None:
    """Stands in for the server hand-off: the payload is logged, nothing is sent."""
    logger.info(f"Final payload: {json.dumps(payload, default=str)}")

# ===================================================================
# 3. FIELD RENDERING
# ===================================================================

def _create_text_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.input:
    return ui.input(label=f.label, value=v or '', on_change=lambda e: on_change(e.value))

def _create_date_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.input:
    return ui.input(label=f.label, value=v or '', on_change=lambda e: on_change(e.value)).props('type=date stack-label')

def _create_time_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.input:
    return ui.input(label=f.label, value=v or '', on_change=lambda e: on_change(e.value)).props('type=time stack-label')

def _create_number_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.number:
    return ui.number(label=f.label, value=v, on_change=lambda e: on_change(e.value))

def _create_select_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.select:
    return ui.select(options=f.options or [], label=f.label, value=v or None, on_change=lambda e: on_change(e.value))

def _create_radio_buttons(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.radio:
    return ui.radio(options=f.options or [], value=v, on_change=lambda e: on_change(e.value)).props('inline')

def _create_textarea_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.textarea:
    return ui.textarea(label=f.label, value=v or '', on_change=lambda e: on_change(e.value))

def _create_checkbox_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.checkbox:
    return ui.checkbox(text=f.label, value=bool(v), on_change=lambda e: on_change(e.value))

def _create_slider_input(f: FormField, v: Any, on_change: Callable[[Any], None]) -> ui.slider:
    ui.label(f"{f.label}: {v or 0}%").classes('text-caption')
    return ui.slider(min=0, max=100, step=5, value=v or 0).on(
        'change', lambda e: on_change(e.args)
    )

CREATOR_MAP: dict[str, Callable[..., Any]] = {
    'text': _create_text_input,
    'date': _create_date_input,
    'time': _create_time_input,
    'number': _create_number_input,
    'select': _create_select_input,
    'radio': _create_radio_buttons,
    'textarea': _create_textarea_input,
    'checkbox': _create_checkbox_input,
    'slider': _create_slider_input,
}


class WizardPage:
    """Renders one editing session. Every page load starts a fresh wizard."""

    def __init__(self) -> None:
        self.wizard = OnboardingWizard(transport=log_transport)
        self.elements: dict[str, Any] = {}

    # --- Change handling ---

    def _sync_dirty_flag(self) -> None:
        ui.run_javascript(f'window.onboardlyDirty = {json.dumps(self.wizard.is_dirty)};')

    def _show_errors(self) -> None:
        for path, element in self.elements.items():
            if hasattr(element, 'error'):
                element.error = self.wizard.errors.get(path)

    def change_handler(self, path: str) -> Callable[[Any], None]:
        def handle(value: Any) -> None:
            self.wizard.update_field(path, value)
            self._sync_dirty_flag()
            if path in REFRESH_ON_CHANGE:
                self.step_content.refresh()
            else:
                self._show_errors()
        return handle

    # --- Special widgets ---

    def _render_manager_select(self, f: FormField) -> None:
        options = {m['id']: m['name'] for m in available_managers(self.wizard.record)}
        current = get_path(self.wizard.record, f.key)
        self.elements[f.key] = ui.select(
            options=options, label=f.label, value=current if current in options else None,
            on_change=lambda e: self.change_handler(f.key)(e.value or ''),
        ).props('outlined dense').classes('w-full')

    def _render_skill_checkboxes(self, f: FormField) -> None:
        ui.label(f.label).classes('text-subtitle2')
        selected: list[str] = list(get_path(self.wizard.record, f.key) or [])

        def toggle(skill: str, checked: bool) -> None:
            chosen = [s for s in selected if s != skill]
            if checked:
                chosen.append(skill)
            self.change_handler(f.key)(chosen)

        with ui.row().classes('w-full'):
            for skill in available_skills(self.wizard.record):
                ui.checkbox(skill, value=skill in selected,
                            on_change=lambda e, s=skill: toggle(s, e.value))
        self._render_error_label(f.key)

    def _render_experience_inputs(self, f: FormField) -> None:
        selected: list[str] = get_path(self.wizard.record, AppSchema.SKILLS.key) or []
        if not selected:
            return
        ui.label(f.label).classes('text-subtitle2')
        experience: dict[str, Any] = get_path(self.wizard.record, f.key) or {}
        with ui.row().classes('w-full'):
            for skill in selected:
                path = f"{f.key}.{skill}"
                self.elements[path] = ui.number(
                    label=skill, value=experience.get(skill), min=0, max=50, step=0.5,
                    on_change=lambda e, p=path: self.change_handler(p)(e.value),
                ).props('outlined dense')

    def _render_upload(self, f: FormField) -> None:
        def handle_upload(e: Any) -> None:
            content = e.content.read()
            self.change_handler(f.key)({'name': e.name, 'type': e.type, 'size': len(content)})
            self._render_error_notice(f.key)

        ui.label(f.label).classes('text-caption')
        ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1,
                  max_file_size=MAX_UPLOAD_BYTES).props('accept=".png,.jpg,.jpeg"').classes('w-full')
        self._render_error_label(f.key)

    def _render_error_label(self, path: str) -> None:
        message = self.wizard.errors.get(path)
        if message:
            ui.label(message).classes('text-negative text-caption')

    def _render_error_notice(self, path: str) -> None:
        message = self.wizard.errors.get(path)
        if message:
            ui.notify(message, type='negative')

    # --- Generic field & step rendering ---

    def _is_hidden(self, f: FormField) -> bool:
        record = self.wizard.record
        job_type = get_path(record, AppSchema.JOB_TYPE.key)
        if f.key == AppSchema.SALARY_ANNUAL.key:
            return job_type == JobType.CONTRACT.value
        if f.key == AppSchema.SALARY_HOURLY.key:
            return job_type != JobType.CONTRACT.value
        if f.key == AppSchema.MANAGER_APPROVED.key:
            return (get_path(record, AppSchema.REMOTE_PREFERENCE.key) or 0) <= 50
        if f.key in (AppSchema.GUARDIAN_NAME.key, AppSchema.GUARDIAN_PHONE.key):
            age = compute_age(get_path(record, AppSchema.DOB.key))
            return age is None or age >= GUARDIAN_AGE_THRESHOLD
        return False

    def create_field(self, f: FormField) -> None:
        if self._is_hidden(f):
            return
        special: dict[str, Callable[[FormField], None]] = {
            'manager': self._render_manager_select,
            'skills': self._render_skill_checkboxes,
            'experience': self._render_experience_inputs,
            'file': self._render_upload,
        }
        with ui.column().classes('w-full no-wrap q-mb-sm'):
            if f.ui_type in special:
                special[f.ui_type](f)
                return

            creator = CREATOR_MAP.get(f.ui_type)
            if not creator:
                raise ValueError(f"Unsupported UI type: {f.ui_type}")
            element = creator(f, get_path(self.wizard.record, f.key), self.change_handler(f.key))
            self.elements[f.key] = element
            if f.ui_type in ('checkbox', 'radio', 'slider'):
                self._render_error_label(f.key)
                return

            props_list: list[str] = ['outlined', 'dense']
            if f.max_length:
                props_list.append(f"maxlength={f.max_length}")
            element.props(' '.join(props_list)).classes('w-full')

    def render_stepper(self) -> None:
        with ui.row().classes('w-full justify-between q-mb-md'):
            for step_id in ONBOARDING_TEMPLATE['step_sequence']:
                step_def = STEPS_BY_ID[step_id]
                current = step_id == self.wizard.current_step()
                ui.label(f"{step_id + 1}. {step_def['title']}").classes(
                    'text-bold text-primary' if current else 'text-grey'
                )

    def render_review_summary(self) -> None:
        for step_id in ONBOARDING_TEMPLATE['step_sequence']:
            if step_id == REVIEW_STEP_ID:
                continue
            step_def = STEPS_BY_ID[step_id]
            with ui.expansion(step_def['title']).classes('w-full'):
                for conf in step_def['fields']:
                    value = get_path(self.wizard.record, conf['field'].key)
                    ui.label(f"{conf['field'].label}: {value if value not in (None, '') else '-'}")

    def render_step(self, step_def: StepDefinition) -> None:
        ui.label(step_def['title']).classes('text-h6 q-mb-xs')
        ui.markdown(step_def['subtitle'])
        self.elements = {}

        if step_def['id'] == REVIEW_STEP_ID:
            self.render_review_summary()
        for field_conf in step_def['fields']:
            self.create_field(field_conf['field'])
        self._show_errors()

        with ui.row().classes('w-full q-mt-lg justify-between items-center'):
            if step_def['id'] > 0:
                ui.button("Back", on_click=self.handle_prev, icon='arrow_back').props('flat color=grey')
            else:
                ui.label()
            if step_def['id'] == REVIEW_STEP_ID:
                ui.button("Submit", on_click=self.handle_submit, icon='check').props('color=green unelevated')
            else:
                ui.button("Next", on_click=self.handle_next, icon='arrow_forward').props('color=primary unelevated')
        ui.label("Unsaved changes" if self.wizard.is_dirty else "All changes saved").classes('text-caption text-grey')

    # --- Navigation handlers ---

    def handle_next(self) -> None:
        result = self.wizard.request_next()
        if not result.advanced and result.violations:
            for violation in result.violations:
                ui.notification(f"{violation.path}: {violation.message}", type='negative', multi_line=True)
        else:
            self.wizard.save_snapshot()
            self._sync_dirty_flag()
        self.step_content.refresh()

    def handle_prev(self) -> None:
        self.wizard.request_prev()
        self.step_content.refresh()

    def handle_submit(self) -> None:
        result = self.wizard.request_submit()
        if result.succeeded:
            ui.notify("Submitted!", type='positive')
        else:
            for violation in result.violations:
                ui.notification(f"{violation.path}: {violation.message}", type='negative', multi_line=True)
        self._sync_dirty_flag()
        self.step_content.refresh()

    @ui.refreshable
    def step_content(self) -> None:
        self.render_stepper()
        self.render_step(self.wizard.current_step_def)

# ===================================================================
# 4. PAGE ROUTING
# ===================================================================

@ui.page('/')
def main_page() -> None:
    ui.add_head_html(BEFORE_UNLOAD_SCRIPT)
    ui.query('body').style('background-color: #f0f2f5;')
    with ui.header(elevated=True).classes('bg-primary text-white q-pa-sm items-center'):
        ui.label(ONBOARDING_TEMPLATE['name']).classes('text-h5')

    page = WizardPage()
    with ui.column().classes('w-full items-center q-pa-md'):
        with ui.card().classes('q-pa-md shadow-4').style('width: 95%; max-width: 900px;'):
            with ui.column().classes('w-full'):
                page.step_content()


def server_settings(environ: Mapping[str, str] = os.environ) -> dict[str, Any]:
    """Keyword arguments for `ui.run`, read from HOST and PORT."""
    return {
        'host': environ.get('HOST', '0.0.0.0'),
        'port': int(environ.get('PORT', 8080)),
        'title': ONBOARDING_TEMPLATE['name'],
    }


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(**server_settings())
