"""
Results View
============
Funding summary page. Renders a ReportViewModel built from the stored scoring
response or, when there is none, the local estimate (clearly labelled as
such), and drives the PDF export.
"""

import html
from typing import Sequence

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from calculator_options import format_currency
from components.ui_components import apply_plotly_theme, divider, info_card, metric_row, page_header, status_badge
from services.form_store import FormStateStore
from services.report_service import (
    MISSING,
    ChartBar,
    ProgramCard,
    ReportExportClient,
    ReportViewModel,
    build_export_payload,
    build_report,
)
from services.session_manager import SessionManager
from services.submission_service import SubmissionClient
from services.wizard_service import LAST_STEP, WizardNavigator
from theme import CHART_COLORS, COLORS, badge


# =============================================================================
# SECTIONS
# =============================================================================

def render_funding_chart(bars: Sequence[ChartBar]):
    """Horizontal budget / grants / tax / net bar chart."""
    if not bars:
        return
    names = [b.name for b in bars]
    values = [b.value for b in bars]
    fig = go.Figure(data=[
        go.Bar(
            x=values,
            y=names,
            orientation='h',
            marker_color=[CHART_COLORS.get(b.key, COLORS['primary']) for b in bars],
            text=[format_currency(v) for v in values],
            textposition='auto',
            hovertemplate='%{y}: %{text}<extra></extra>',
        )
    ])
    fig.update_yaxes(autorange='reversed')
    fig.update_xaxes(tickprefix='$', separatethousands=True)
    fig.update_layout(height=280)
    st.plotly_chart(apply_plotly_theme(fig), width="stretch")


def render_program_card(card: ProgramCard):
    details = [f"<strong>{html.escape(card.amount_text)}</strong>"]
    if card.confidence:
        details.append(f"Confidence: {html.escape(card.confidence)}")
    st.markdown(
        f"**{html.escape(card.title)}** &nbsp; {status_badge(card.badge, card.status)}  \n"
        f"<span style='color: {COLORS['text_tertiary']};'>{html.escape(card.type)}</span>",
        unsafe_allow_html=True,
    )
    st.markdown(" • ".join(details), unsafe_allow_html=True)
    for line in card.cover:
        st.markdown(f"- {line}")
    if card.conditions:
        st.caption("Conditions: " + "; ".join(card.conditions))


def programs_table(cards: Sequence[ProgramCard]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                'Program': c.title,
                'Type': c.type,
                'Status': c.badge,
                'Estimated amount': c.amount_text,
                'Confidence': c.confidence or '',
            }
            for c in cards
        ],
        columns=['Program', 'Type', 'Status', 'Estimated amount', 'Confidence'],
    )


def render_programs(report: ReportViewModel):
    st.markdown("### Top programs for you")
    if report.programs_notice:
        info_card("No programs", report.programs_notice, 'warning')
        return

    for card in report.top_programs:
        with st.container(border=True):
            render_program_card(card)

    if len(report.programs) > len(report.top_programs):
        with st.expander(f"All programs ({len(report.programs)})"):
            st.dataframe(programs_table(report.programs), hide_index=True, width="stretch")


def render_checklist(items: Sequence[str]):
    with st.expander("Your next steps", expanded=False):
        for i, item in enumerate(items, 1):
            st.markdown(f"{i}. {item}")


def render_export(report: ReportViewModel, exporter: ReportExportClient):
    st.markdown("### Download your report")
    if st.button("Prepare PDF report", key="export_prepare", type="primary"):
        with st.spinner("Generating PDF..."):
            outcome = exporter.export(build_export_payload(report))
        if outcome.ok:
            SessionManager.set_export(outcome.content, outcome.filename)
        else:
            SessionManager.set_export_error(outcome.error or "Export failed")

    prepared = SessionManager.get_export()
    if prepared:
        st.download_button(
            label="📥 Download PDF",
            data=prepared['content'],
            file_name=prepared['filename'],
            mime="application/pdf",
            key="export_download",
        )
    error = SessionManager.get_export_error()
    if error:
        st.error(f"Could not generate the PDF: {error}")


def render_failure_notice(report: ReportViewModel, store: FormStateStore, client: SubmissionClient,
                          navigator: WizardNavigator):
    info_card("No calculation available", report.notice, 'error')
    col_back, col_retry, _ = st.columns([1, 1, 2])
    with col_back:
        if st.button("← Go back", key="results_back", width="stretch"):
            navigator.jump_to(LAST_STEP)
            SessionManager.set_current_section('calculator')
            st.rerun()
    with col_retry:
        if st.button("Retry calculation", key="results_retry", width="stretch"):
            with st.spinner("Calculating your funding..."):
                client.submit(store.answers)
            SessionManager.clear_export()
            st.rerun()
    st.caption("Below is an approximate estimate based on your answers. It is not a scoring result.")


# =============================================================================
# MAIN RENDER FUNCTION
# =============================================================================

def render_results(store: FormStateStore, client: SubmissionClient, exporter: ReportExportClient,
                   navigator: WizardNavigator):
    report = build_report(store.answers, client.load_result())

    page_header("Funding summary for your project", report.headline.company if report.headline.company != MISSING else None)

    if report.notice:
        render_failure_notice(report, store, client, navigator)

    variant = 'warning' if report.is_estimate else 'success'
    st.markdown(badge(report.source_label, variant), unsafe_allow_html=True)
    st.write("")

    metric_row([{'label': m.label, 'value': m.value, 'caption': m.caption} for m in report.metrics])
    if report.description:
        st.caption(f"Project: {report.description}")

    divider()
    st.markdown("### How your budget is covered")
    render_funding_chart(report.chart)

    divider()
    render_programs(report)
    render_checklist(report.checklist)
    st.caption(report.note)

    if not report.is_estimate:
        if st.button("Clear result", key="results_clear"):
            client.clear_result()
            SessionManager.clear_export()
            st.rerun()

    divider()
    render_export(report, exporter)
