"""
Québec Funding Calculator - UI Components
=========================================
Reusable UI building blocks shared by the calculator, results and program
views.
"""

import html

import streamlit as st
from typing import List, Dict, Any, Optional

from scoring_result import MatchStatus
from theme import COLORS, badge, stat_card

# =============================================================================
# LAYOUT COMPONENTS
# =============================================================================

def page_header(title: str, subtitle: str = None):
    """
    Render a page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional description text
    """
    st.markdown(f'''
    <div style="margin-bottom: 1.25rem;">
        <h1 style="font-size: 1.75rem; font-weight: 700; color: {COLORS['text_primary']}; margin: 0 0 0.25rem 0;">{html.escape(title)}</h1>
        {f'<p style="color: {COLORS["text_tertiary"]}; margin: 0; font-size: 0.95rem;">{html.escape(subtitle)}</p>' if subtitle else ''}
    </div>
    ''', unsafe_allow_html=True)


def metric_row(metrics: List[Dict[str, Any]], columns: int = 4):
    """
    Render a row of metric cards.

    Args:
        metrics: List of dicts with keys: label, value, caption (optional)
        columns: Number of columns
    """
    if not metrics:
        return
    cols = st.columns(min(columns, len(metrics)))
    for i, metric in enumerate(metrics):
        with cols[i % len(cols)]:
            st.markdown(
                stat_card(metric['label'], metric['value'], metric.get('caption')),
                unsafe_allow_html=True,
            )


def info_card(title: str, content: str, variant: str = 'default'):
    """
    Render an information card with a coloured left border.

    Args:
        title: Card title
        content: Plain text content
        variant: 'default', 'primary', 'success', 'warning', 'error'
    """
    border_color = COLORS.get(variant, COLORS['border_default'])
    st.markdown(f'''
    <div style="
        background-color: {COLORS['bg_elevated']};
        border: 1px solid {COLORS['border_subtle']};
        border-left: 3px solid {border_color};
        border-radius: 8px;
        padding: 0.9rem 1.1rem;
        margin-bottom: 1rem;
    ">
        <div style="font-size: 0.95rem; font-weight: 600; color: {COLORS['text_primary']}; margin-bottom: 0.35rem;">{html.escape(title)}</div>
        <div style="font-size: 0.875rem; color: {COLORS['text_secondary']}; line-height: 1.5;">{html.escape(content)}</div>
    </div>
    ''', unsafe_allow_html=True)


def divider(margin: str = '1.25rem'):
    """Render a subtle divider line."""
    st.markdown(
        f'<hr style="border: none; border-top: 1px solid {COLORS["border_subtle"]}; margin: {margin} 0;">',
        unsafe_allow_html=True,
    )


def status_badge(label: str, status: Optional[MatchStatus] = None) -> str:
    """Badge HTML for a program match status (or a neutral label)."""
    variant = {
        MatchStatus.ELIGIBLE: 'success',
        MatchStatus.MAYBE: 'warning',
    }.get(status, 'neutral')
    return badge(label, variant)


def step_progress(current: int, titles: List[str]):
    """Progress bar plus 'Step n of m: title' caption."""
    total = len(titles)
    st.progress((current + 1) / total)
    st.caption(f"Step {current + 1} of {total}: {titles[current]}")


# =============================================================================
# CHART COMPONENTS
# =============================================================================

def apply_plotly_theme(fig):
    """
    Apply the app theme to a Plotly figure.

    Args:
        fig: Plotly figure object

    Returns:
        Themed figure
    """
    fig.update_layout(
        paper_bgcolor=COLORS['bg_elevated'],
        plot_bgcolor=COLORS['bg_elevated'],
        font=dict(family="Inter, sans-serif", size=12, color=COLORS['text_secondary']),
        xaxis=dict(gridcolor=COLORS['border_subtle'], linecolor=COLORS['border_subtle']),
        yaxis=dict(gridcolor=COLORS['border_subtle'], linecolor=COLORS['border_subtle']),
        margin=dict(l=20, r=20, t=20, b=20),
        showlegend=False,
    )
    return fig
