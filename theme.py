"""
Québec Funding Calculator - Theme
=================================
Colour system, global CSS and small HTML helpers shared by the Streamlit
components.
"""

import html

import streamlit as st
from typing import Any

# =============================================================================
# COLOR SYSTEM
# =============================================================================

COLORS = {
    # Backgrounds
    'bg_base': '#F8FAFC',
    'bg_elevated': '#FFFFFF',
    'bg_surface': '#F1F5F9',

    # Borders
    'border_subtle': '#E2E8F0',
    'border_default': '#CBD5E1',

    # Text
    'text_primary': '#0F172A',
    'text_secondary': '#334155',
    'text_tertiary': '#64748B',

    # Québec blue (primary) and emerald (funding)
    'primary': '#1D4ED8',
    'primary_muted': 'rgba(29, 78, 216, 0.10)',
    'funding': '#059669',

    # Status
    'success': '#059669',
    'warning': '#D97706',
    'error': '#DC2626',
    'info': '#2563EB',
    'neutral': '#64748B',
}

# Bar colours for the budget / grants / tax / net chart
CHART_COLORS = {
    'budget': COLORS['text_primary'],
    'grants': COLORS['primary'],
    'tax': COLORS['funding'],
    'net': COLORS['text_tertiary'],
}

# =============================================================================
# MAIN THEME CSS
# =============================================================================

THEME_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

html, body, [data-testid="stAppViewContainer"] {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif !important;
}

.block-container {
    padding: 1rem 3rem 2rem 3rem !important;
    max-width: 1200px !important;
}

h1, h2, h3 {
    letter-spacing: -0.02em !important;
}

/* Primary buttons */
.stButton > button[kind="primary"] {
    background-color: #1D4ED8 !important;
    border-color: #1D4ED8 !important;
}

/* Sidebar step list */
[data-testid="stSidebar"] .stButton > button {
    justify-content: flex-start !important;
    text-align: left !important;
}
</style>
"""


def apply_theme() -> None:
    st.markdown(THEME_CSS, unsafe_allow_html=True)


def configure_page(title: str = "Québec Funding Calculator") -> None:
    """
    Configure page settings and apply theme in one call.
    """
    st.set_page_config(
        page_title=title,
        page_icon="💰",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    apply_theme()


# =============================================================================
# HTML HELPERS
# =============================================================================

def badge(text: str, variant: str = 'neutral') -> str:
    """Create a badge HTML string."""
    color = COLORS.get(variant, COLORS['neutral'])
    return (
        f'<span style="background: {color}22; color: {color}; padding: 0.25rem 0.5rem; '
        f'border-radius: 999px; font-size: 0.75rem; font-weight: 600;">{html.escape(text)}</span>'
    )


def stat_card(title: str, value: Any, subtitle: str = None) -> str:
    """Create a stat card HTML string."""
    subtitle_html = (
        f'<div style="color: {COLORS["text_tertiary"]}; font-size: 0.8rem;">{html.escape(subtitle)}</div>'
        if subtitle else ''
    )
    return f'''
    <div style="background: {COLORS["bg_surface"]}; padding: 0.9rem 1rem; border-radius: 8px; border: 1px solid {COLORS["border_subtle"]}; height: 100%;">
        <div style="color: {COLORS["text_tertiary"]}; font-size: 0.75rem; text-transform: uppercase; letter-spacing: 0.04em; font-weight: 600; margin-bottom: 0.35rem;">{html.escape(title)}</div>
        <div style="color: {COLORS["text_primary"]}; font-size: 1.25rem; font-weight: 700; margin-bottom: 0.25rem;">{html.escape(str(value))}</div>
        {subtitle_html}
    </div>
    '''


def section_header(title: str, subtitle: str = None) -> None:
    """Render a section header."""
    st.markdown(f'### {title}')
    if subtitle:
        st.caption(subtitle)


def empty_state(title: str, description: str = None) -> None:
    """Render an empty state block."""
    description_html = f'<div style="margin-bottom: 1rem;">{html.escape(description)}</div>' if description else ''
    st.markdown(f'''
    <div style="text-align: center; padding: 2.5rem 2rem; color: {COLORS["text_tertiary"]};">
        <div style="font-size: 1.4rem; font-weight: 600; color: {COLORS["text_primary"]}; margin-bottom: 0.5rem;">{html.escape(title)}</div>
        {description_html}
    </div>
    ''', unsafe_allow_html=True)
