"""
Program Views
=============
Home page, program directory and program detail pages. The detail page is
addressed by the 'program' query parameter so it can be linked directly.
"""

from typing import Optional, Sequence

import pandas as pd
import streamlit as st

from calculator_options import format_currency
from components.ui_components import divider, info_card, metric_row, page_header
from program_catalog import (
    Program,
    ProgramCategory,
    ProgramLevel,
    ProgramStatus,
    example_calculation,
    find_program,
    list_programs,
)
from services.session_manager import SessionManager
from theme import badge, empty_state

PROGRAM_PARAM = "program"

ANY = "All"

HOW_IT_WORKS = (
    ("1. Data collection & matching",
     "We take your inputs (location, industry, project type) and cross-reference them against active "
     "federal and provincial programs, filtering out programs that are closed or whose basic "
     "eligibility criteria you don't meet."),
    ("2. Expense analysis",
     "Not all project costs are eligible. Standard ratios are applied to your budget items; hardware, "
     "for example, is often funded at a lower rate than software or training."),
    ("3. Stacking rules",
     "Government rules limit how much public money one project can receive. Totals are capped so the "
     "estimate stays on the safe side."),
    ("4. Confidence scoring",
     "Each program gets a confidence level based on how well your profile matches what the program "
     "was designed for."),
)


def go_to_calculator():
    SessionManager.set_current_section('calculator')
    st.rerun()


def open_program(slug: str):
    st.query_params[PROGRAM_PARAM] = slug
    st.rerun()


def close_program():
    if PROGRAM_PARAM in st.query_params:
        del st.query_params[PROGRAM_PARAM]
    SessionManager.set_current_section('programs')
    st.rerun()


def selected_program_slug() -> Optional[str]:
    return st.query_params.get(PROGRAM_PARAM)


def category_variant(program: Program) -> str:
    return {
        ProgramCategory.GRANT: 'primary',
        ProgramCategory.TAX_CREDIT: 'success',
        ProgramCategory.LOAN: 'warning',
    }.get(program.category, 'neutral')


def max_funding_text(program: Program) -> str:
    return format_currency(program.funding_max) if program.has_cap else "No fixed cap"


# =============================================================================
# HOME
# =============================================================================

def render_home():
    page_header(
        "Québec digital transformation funding",
        "Find out in about 3 minutes how much of your digital project could be covered by grants and tax credits.",
    )
    if st.button("Start calculation →", key="home_start", type="primary"):
        go_to_calculator()

    divider()
    st.markdown("### How our calculation works")
    for title, content in HOW_IT_WORKS:
        st.markdown(f"**{title}**")
        st.write(content)
    st.caption(
        "Stacking is the most complex part of funding. The tool gives a safe estimate; "
        "a consultant can often optimise it further."
    )

    divider()
    st.markdown("### Eligible project types")
    st.write(
        "ERP and CRM, websites and e-commerce, integrations and automation, BI and data platforms, "
        "Industry 4.0, AI, cybersecurity and staff training."
    )
    if st.button("Browse programs", key="home_programs"):
        SessionManager.set_current_section('programs')
        st.rerun()


# =============================================================================
# DIRECTORY
# =============================================================================

def _enum_filter(label: str, enum_cls, key: str):
    choices = [ANY] + [m.value for m in enum_cls]
    picked = st.selectbox(label, choices, key=key)
    return None if picked == ANY else enum_cls(picked)


def render_program_directory():
    page_header(
        "Funding programs directory",
        "Browse digital transformation grants, loans and tax credits available in Québec.",
    )

    col_q, col_level, col_cat, col_status = st.columns([2, 1, 1, 1])
    with col_q:
        query = st.text_input("Search", placeholder="Name, provider or tag", key="programs_query")
    with col_level:
        level = _enum_filter("Level", ProgramLevel, "programs_level")
    with col_cat:
        category = _enum_filter("Type", ProgramCategory, "programs_category")
    with col_status:
        status = _enum_filter("Status", ProgramStatus, "programs_status")

    programs = list_programs(level=level, category=category, status=status, query=query)
    if not programs:
        empty_state("No programs match your filters", "Try a broader search.")
        return

    st.caption(f"{len(programs)} program(s)")
    for program in programs:
        with st.container(border=True):
            render_program_card(program)

    with st.expander("Compare all programs"):
        st.dataframe(programs_frame(programs), hide_index=True, width="stretch")


def render_program_card(program: Program):
    st.markdown(
        f"**{program.name}** &nbsp; {badge(program.category.value, category_variant(program))} "
        f"{badge(program.status.value, 'success' if program.is_open else 'neutral')}",
        unsafe_allow_html=True,
    )
    st.caption(f"{program.provider} • {program.level.value}")
    st.write(program.description)
    if program.match_reason:
        st.markdown("**Why you match:** " + "; ".join(program.match_reason))
    col_a, col_b, col_c = st.columns([1, 1, 1])
    col_a.metric("Max funding", max_funding_text(program))
    col_b.metric("Coverage", f"Up to {program.funding_percentage}%")
    with col_c:
        if st.button("View details", key=f"program_open_{program.slug}", width="stretch"):
            open_program(program.slug)


def programs_frame(programs: Sequence[Program]) -> pd.DataFrame:
    """Programs as a table, for the directory's compact view."""
    return pd.DataFrame([
        {
            'Program': p.name,
            'Provider': p.provider,
            'Level': p.level.value,
            'Type': p.category.value,
            'Max funding': max_funding_text(p),
            'Coverage': f"{p.funding_percentage}%",
            'Status': p.status.value,
        }
        for p in programs
    ])


# =============================================================================
# DETAIL
# =============================================================================

def render_program_not_found(slug: str):
    empty_state("Program not found", f"No program matches '{slug}'.")
    if st.button("← Back to directory", key="program_back_missing"):
        close_program()


def render_program_detail(slug: str):
    program = find_program(slug)
    if program is None:
        render_program_not_found(slug)
        return

    if st.button("← Back to programs", key="program_back"):
        close_program()

    st.markdown(
        f"{badge(program.provider, 'neutral')} "
        f"{badge(program.status.value, 'success' if program.is_open else 'neutral')}",
        unsafe_allow_html=True,
    )
    page_header(program.name, program.description)

    metric_row([
        {'label': 'Max funding', 'value': max_funding_text(program)},
        {'label': 'Coverage', 'value': f"Up to {program.funding_percentage}%"},
        {'label': 'Type', 'value': program.category.value},
        {'label': 'Level', 'value': program.level.value},
    ])

    divider()
    col_main, col_side = st.columns([2, 1])
    with col_main:
        st.markdown("### Eligibility criteria")
        for item in program.eligibility:
            st.markdown(f"- ✅ {item}")

        if program.match_reason:
            st.markdown("### Why businesses match")
            for reason in program.match_reason:
                st.markdown(f"- {reason}")

        st.markdown("### Example calculation")
        example = example_calculation(program)
        st.dataframe(
            pd.DataFrame([
                {'Line': 'Project total cost', 'Amount': format_currency(example['project_cost'])},
                {'Line': 'Eligible expenses (80%)', 'Amount': format_currency(example['eligible_expenses'])},
                {'Line': f"Funding amount ({program.funding_percentage}%)",
                 'Amount': format_currency(example['funding'])},
            ]),
            hide_index=True,
            width="stretch",
        )

    with col_side:
        st.markdown("### Quick facts")
        st.markdown("**Deadline:** Continuous intake  \n**Processing time:** 4-6 weeks (est.)")
        if program.tags:
            st.markdown(" ".join(badge(tag, 'info') for tag in program.tags), unsafe_allow_html=True)

    divider()
    info_card(
        "See what you could get",
        "Run the calculator to estimate your total funding across all programs.",
        'primary',
    )
    if st.button("Start calculation →", key="program_cta", type="primary"):
        if PROGRAM_PARAM in st.query_params:
            del st.query_params[PROGRAM_PARAM]
        go_to_calculator()
