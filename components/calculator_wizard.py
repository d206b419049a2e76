"""
Calculator Wizard
=================
Five-step intake form. Every widget change goes straight to the form store
(which persists it); forward navigation is gated by the step validator
through the WizardNavigator.

Widget keys are prefixed with 'calc_' so a reset can drop them all.
"""

from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd
import streamlit as st

from calculator_models import BudgetItem, FormAnswers, budget_items_from_records
from calculator_options import (
    BUDGET_RANGES,
    COMPLEXITY_PREFERENCES,
    CURRENT_TOOLS,
    DIGITAL_LEVELS,
    EMPLOYEE_BANDS,
    EXPORT_SCOPES,
    HELP_NEXT,
    INDUSTRIES,
    LEGAL_ENTITIES,
    LOCATIONS,
    MAIN_GOALS,
    MAJOR_COST_TYPES,
    PREVIOUS_FUNDING,
    PREVIOUS_PROGRAMS,
    PROJECT_DETAIL_LEVELS,
    PROJECT_TYPES,
    REVENUE_BANDS,
    SUPPORT_TYPE_HINTS,
    SUPPORT_TYPES,
    TIMELINES,
    Option,
    employees_label,
    format_currency,
    industry_label,
    location_label,
    option_label,
    option_values,
)
from components.ui_components import divider, page_header, step_progress
from components.wizard_navigator import render_step_navigator
from services.form_store import FormStateStore
from services.session_manager import SessionManager
from services.wizard_service import STEPS, NavigationOutcome, WizardNavigator

BUDGET_BASE_KEY = "calc_budget_base"
BUDGET_EDITOR_KEY = "calc_budget_editor"


# =============================================================================
# FIELD WIDGETS
# =============================================================================

def _key(field: str) -> str:
    return f"{SessionManager.WIDGET_PREFIX}{field}"


def _stale_hint(current: str, values: Sequence[str]) -> None:
    if current and current not in values:
        st.caption(f"Saved answer “{current}” is no longer an option; please choose again.")


def select_field(store: FormStateStore, field: str, label: str, options: Sequence[Option],
                 placeholder: str = "Select an option", horizontal: bool = False, radio: bool = False) -> None:
    answers = store.answers
    values = option_values(options)
    labels = dict(options)
    current = getattr(answers, field)
    index = values.index(current) if current in values else None

    if radio:
        choice = st.radio(label, values, index=index, format_func=lambda v: labels.get(v, v),
                          key=_key(field), horizontal=horizontal)
    else:
        choice = st.selectbox(label, values, index=index, format_func=lambda v: labels.get(v, v),
                              key=_key(field), placeholder=placeholder)
    _stale_hint(current, values)

    if choice is not None and choice != current:
        store.update(**{field: choice})


def multi_field(store: FormStateStore, field: str, label: str, options: Sequence[Option]) -> None:
    answers = store.answers
    values = option_values(options)
    labels = dict(options)
    current: List[str] = getattr(answers, field)

    chosen = st.multiselect(
        label,
        values,
        default=[v for v in current if v in values],
        format_func=lambda v: labels.get(v, v),
        key=_key(field),
    )
    if list(chosen) != list(current):
        store.update(**{field: list(chosen)})


def text_field(store: FormStateStore, field: str, label: str, placeholder: str = "", area: bool = False) -> None:
    current = getattr(store.answers, field)
    widget = st.text_area if area else st.text_input
    value = widget(label, value=current, placeholder=placeholder, key=_key(field))
    if value != current:
        store.update(**{field: value})


def check_field(store: FormStateStore, field: str, label: str, help_text: Optional[str] = None) -> None:
    current = getattr(store.answers, field)
    value = st.checkbox(label, value=current, help=help_text, key=_key(field))
    if value != current:
        store.update(**{field: value})


# =============================================================================
# STEP RENDERERS
# =============================================================================

def render_step_profile(store: FormStateStore) -> None:
    st.subheader("Business profile")
    col1, col2 = st.columns(2)
    with col1:
        select_field(store, "location", "Where is your main place of business?", LOCATIONS,
                     placeholder="Select your region")
        select_field(store, "industry", "What is your main sector of activity?", INDUSTRIES,
                     placeholder="Select sector")
        select_field(store, "revenue", "What was your last full year revenue (CAD)?", REVENUE_BANDS,
                     placeholder="Select revenue range")
    with col2:
        select_field(store, "legal_entity", "What type of legal entity is your business?", LEGAL_ENTITIES,
                     radio=True)
        select_field(store, "employees", "How many full-time employees (approx.)?", EMPLOYEE_BANDS,
                     placeholder="Select range")

    divider()
    check_field(store, "is_exporting", "Do you sell outside Québec?")
    if store.answers.is_exporting:
        select_field(store, "export_scope", "If yes, where?", EXPORT_SCOPES, radio=True, horizontal=True)


def render_step_project(store: FormStateStore) -> None:
    st.subheader("Project overview")
    multi_field(store, "current_tools", "Which tools do you use today? (Select all that apply)", CURRENT_TOOLS)
    select_field(store, "digital_level", "How would you describe your current digital level?",
                 DIGITAL_LEVELS, radio=True)
    multi_field(store, "project_types", "Which projects are you planning in the next 12–24 months?",
                PROJECT_TYPES)

    col1, col2 = st.columns(2)
    with col1:
        select_field(store, "timeline", "When do you expect to start your main project?", TIMELINES,
                     radio=True)
    with col2:
        select_field(store, "main_goal", "What is the main goal of your project?", MAIN_GOALS, radio=True)

    select_field(store, "project_detail_level", "How detailed is your project today?",
                 PROJECT_DETAIL_LEVELS, radio=True)
    text_field(store, "description", "Brief description (optional)",
               placeholder="e.g. Build a new website + connect ERP to BI dashboards...", area=True)


def _budget_frame(items: Sequence[BudgetItem]) -> pd.DataFrame:
    return pd.DataFrame(
        [item.to_dict() for item in items],
        columns=["id", "name", "cost"],
    )


def clean_budget_frame(df: pd.DataFrame) -> List[BudgetItem]:
    """Editor rows -> budget lines; blank or negative costs become 0."""
    df = df.copy()
    df["cost"] = pd.to_numeric(df["cost"], errors="coerce").fillna(0).clip(lower=0)
    df["name"] = df["name"].fillna("").astype(str)
    df = df.astype(object).where(pd.notna(df), None)
    return budget_items_from_records(df.to_dict("records"))


def budget_editor_base(answers: FormAnswers) -> pd.DataFrame:
    """
    Frame handed to the budget editor.

    The editor replays its edits on top of this frame, so it stays fixed while
    the editor's widget state is alive. Streamlit drops that state whenever
    the budget step is not rendered; the base is then rebuilt from the saved
    answers.
    """
    if not SessionManager.exists(BUDGET_EDITOR_KEY) or not SessionManager.exists(BUDGET_BASE_KEY):
        SessionManager.set(BUDGET_BASE_KEY, _budget_frame(answers.budget_items))
    return SessionManager.get(BUDGET_BASE_KEY)


def render_step_budget(store: FormStateStore) -> None:
    answers = store.answers
    header_col, total_col = st.columns([3, 1])
    with header_col:
        st.subheader("Estimated project budget")
    with total_col:
        st.metric("Total", format_currency(answers.total_budget))

    select_field(store, "budget_range", "Total estimated budget range (optional)", BUDGET_RANGES,
                 placeholder="Select a range (or leave blank)")

    edited = st.data_editor(
        budget_editor_base(answers),
        key=BUDGET_EDITOR_KEY,
        num_rows="dynamic",
        width="stretch",
        hide_index=True,
        column_config={
            "id": None,
            "name": st.column_config.TextColumn("Item", required=True),
            "cost": st.column_config.NumberColumn("Cost (CAD)", min_value=0, step=100, format="$%d"),
        },
    )
    items = clean_budget_frame(edited)
    if items != list(answers.budget_items):
        store.update(budget_items=items)
    st.caption("Add a row for each cost line. The total must be above $0 to continue.")

    divider()
    multi_field(store, "major_cost_types",
                "Which cost types are a large part of your budget? (Select all that apply)", MAJOR_COST_TYPES)


def render_step_preferences(store: FormStateStore) -> None:
    st.subheader("Preferences")
    select_field(store, "previous_funding",
                 "Have you received public funding for digital or innovation projects in the last 3 years?",
                 PREVIOUS_FUNDING, radio=True, horizontal=True)
    if store.answers.previous_funding == "yes":
        multi_field(store, "previous_programs", "Which programs have you used? (Select all that apply)",
                    PREVIOUS_PROGRAMS)

    support_options = [(value, f"{label} - {SUPPORT_TYPE_HINTS[value]}") for value, label in SUPPORT_TYPES]
    select_field(store, "support_type",
                 "Are you open to both grants and tax credits, or do you prefer only direct grants?",
                 support_options, radio=True)

    divider()
    check_field(store, "reimbursement_ok", "Can you pay upfront and be reimbursed later?",
                help_text="Most government grants work on a reimbursement basis (you pay, then claim).")
    check_field(store, "has_project_manager",
                "We have an internal project manager / owner for this project",
                help_text="Some programs expect clear internal ownership and coordination.")

    divider()
    select_field(store, "complexity_preference", "What do you prefer?", COMPLEXITY_PREFERENCES, radio=True)


def render_review_summary(answers: FormAnswers) -> None:
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Business**")
        st.markdown(
            f"- Location: {location_label(answers.location)}\n"
            f"- Sector: {industry_label(answers.industry)}\n"
            f"- Employees: {employees_label(answers.employees)}\n"
            f"- Revenue: {option_label(REVENUE_BANDS, answers.revenue)}\n"
            f"- Sells outside Québec: {'Yes' if answers.is_exporting else 'No'}"
        )
    with col2:
        st.markdown("**Project**")
        projects = ", ".join(answers.project_types) or "-"
        st.markdown(
            f"- Projects: {projects}\n"
            f"- Timeline: {answers.timeline or '-'}\n"
            f"- Total budget: {format_currency(answers.total_budget)}\n"
            f"- Support preference: {option_label(SUPPORT_TYPES, answers.support_type)}\n"
            f"- Approach: {option_label(COMPLEXITY_PREFERENCES, answers.complexity_preference)}"
        )


def render_step_review(store: FormStateStore) -> None:
    st.subheader("Review your details")
    render_review_summary(store.answers)

    divider()
    st.markdown("**Contact**")
    col1, col2 = st.columns(2)
    with col1:
        text_field(store, "contact_name", "Your first and last name", placeholder="e.g. Marie Tremblay")
    with col2:
        text_field(store, "company_name", "Company name", placeholder="e.g. Tremblay Manufacturing Inc.")
    text_field(store, "email", "Email", placeholder="e.g. marie.tremblay@example.com")
    select_field(store, "help_next", "How do you want us to help you next?", HELP_NEXT, radio=True)

    divider()
    check_field(store, "disclaimer_accepted",
                "I understand this tool provides estimates based on public data and is not a formal application.")


STEP_RENDERERS: Dict[int, Callable[[FormStateStore], None]] = {
    0: render_step_profile,
    1: render_step_project,
    2: render_step_budget,
    3: render_step_preferences,
    4: render_step_review,
}


# =============================================================================
# CONTROLS
# =============================================================================

def reset_calculator(store: FormStateStore, navigator: WizardNavigator) -> None:
    store.reset()
    navigator.reset()
    SessionManager.clear_cache(prefix=SessionManager.WIDGET_PREFIX)


def render_controls(store: FormStateStore, navigator: WizardNavigator) -> None:
    answers = store.answers
    col_prev, col_status, col_next = st.columns([1, 2, 1])

    with col_prev:
        if st.button("← Back", key="wizard_prev", width="stretch",
                     disabled=navigator.current_step == 0 or navigator.submitting):
            navigator.prev()
            st.rerun()

    with col_status:
        st.caption("✓ Your answers are saved automatically")

    with col_next:
        label = "Calculate" if navigator.is_last_step else "Next →"
        if st.button(label, key="wizard_next", type="primary", width="stretch",
                     disabled=not navigator.can_advance(answers)):
            if navigator.is_last_step:
                with st.spinner("Calculating your funding..."):
                    outcome = navigator.next(answers)
            else:
                outcome = navigator.next(answers)

            if outcome is NavigationOutcome.SUBMITTED:
                SessionManager.clear_export()
                SessionManager.set_current_section(navigator.consume_destination())
                st.rerun()
            elif outcome is NavigationOutcome.ADVANCED:
                st.rerun()


# =============================================================================
# MAIN RENDER FUNCTION
# =============================================================================

def render_calculator(store: FormStateStore, navigator: WizardNavigator) -> None:
    page_header("Funding calculator", "Answer a few questions to estimate the funding your project can get.")
    render_step_navigator(navigator)

    st.sidebar.markdown("---")
    if st.sidebar.button("Reset form", key="wizard_reset", width="stretch"):
        reset_calculator(store, navigator)
        st.rerun()

    step_progress(navigator.current_step, STEPS)
    STEP_RENDERERS[navigator.current_step](store)

    st.markdown("---")
    render_controls(store, navigator)
