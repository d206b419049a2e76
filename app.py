"""
Québec Funding Calculator
=========================
Main application entry point.

Sections:
1. Home - Overview and how the estimate works
2. Calculator - Five-step intake wizard
3. Results - Funding summary, chart, programs and PDF export
4. Programs - Directory and program detail (?program=<slug>)

Run with:
    streamlit run app.py
"""

import streamlit as st

from components.calculator_wizard import render_calculator
from components.program_views import (
    render_home,
    render_program_detail,
    render_program_directory,
    selected_program_slug,
)
from components.results_view import render_results
from config import FORM_STATE_KEY, RESULT_KEY, configure_logging, get_settings
from services import (
    FormStateStore,
    ReportExportClient,
    SessionManager,
    SubmissionClient,
    WizardNavigator,
    build_port,
)
from theme import configure_page

SECTIONS = [
    ('home', 'Home'),
    ('calculator', 'Calculator'),
    ('results', 'Results'),
    ('programs', 'Programs'),
]


# =============================================================================
# SESSION SETUP
# =============================================================================

def init_session_state():
    """Initialize session state variables."""
    if not SessionManager.exists(SessionManager.CURRENT_SECTION):
        SessionManager.set_current_section('home')


def build_services(settings):
    """Store, scoring client and export client for this run."""
    scope = SessionManager.storage_token()
    store = FormStateStore(build_port(settings.storage_backend, FORM_STATE_KEY, settings.state_dir, scope))
    client = SubmissionClient(
        settings.scoring_api_url,
        build_port(settings.storage_backend, RESULT_KEY, settings.state_dir, scope),
        timeout=settings.scoring_timeout_seconds,
    )
    exporter = ReportExportClient(settings.report_api_url)
    return store, client, exporter


def get_navigator(client: SubmissionClient) -> WizardNavigator:
    """The session's wizard navigator, created on first use."""
    navigator = SessionManager.get_navigator()
    if navigator is None:
        navigator = WizardNavigator(submit=client.submit)
        SessionManager.set_navigator(navigator)
    else:
        # The client is rebuilt every run; point the navigator at the current one
        navigator.submit = client.submit
    return navigator


# =============================================================================
# NAVIGATION
# =============================================================================

def render_navigation():
    """Render the main navigation in sidebar."""
    st.sidebar.markdown("### Québec Funding Calculator")
    current = SessionManager.get_current_section()

    for section_id, label in SECTIONS:
        is_active = current == section_id
        if st.sidebar.button(
            f"→ {label}" if is_active else label,
            key=f"nav_{section_id}",
            width="stretch",
            type="primary" if is_active else "secondary",
        ):
            if 'program' in st.query_params:
                del st.query_params['program']
            SessionManager.set_current_section(section_id)
            st.rerun()


# =============================================================================
# MAIN
# =============================================================================

def main():
    """Main application entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    configure_page()
    init_session_state()

    store, client, exporter = build_services(settings)
    navigator = get_navigator(client)

    render_navigation()

    slug = selected_program_slug()
    if slug:
        render_program_detail(slug)
        return

    section = SessionManager.get_current_section()
    if section == 'calculator':
        st.sidebar.markdown("---")
        render_calculator(store, navigator)
    elif section == 'results':
        render_results(store, client, exporter, navigator)
    elif section == 'programs':
        render_program_directory()
    else:
        render_home()


if __name__ == "__main__":
    main()
