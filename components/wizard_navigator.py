"""
Wizard Navigator Component
==========================
Sidebar step list for the calculator. Completed and current steps can be
revisited; steps ahead of the current one are shown but disabled.
"""

import streamlit as st

from services.wizard_service import STEPS, WizardNavigator


def step_label(index: int, current: int) -> str:
    if index < current:
        icon = "✅"
    elif index == current:
        icon = "→"
    else:
        icon = "○"
    return f"{icon} {index + 1}. {STEPS[index]}"


def render_step_navigator(navigator: WizardNavigator, key_prefix: str = "wizard"):
    """
    Render the step list in the sidebar.

    Args:
        navigator: Session wizard state
        key_prefix: Prefix for Streamlit keys to avoid duplicates
    """
    st.sidebar.markdown("### Calculator steps")
    current = navigator.current_step

    for idx in range(len(STEPS)):
        if st.sidebar.button(
            step_label(idx, current),
            key=f"{key_prefix}_step_{idx}",
            width="stretch",
            type="primary" if idx == current else "secondary",
            disabled=not navigator.can_jump_to(idx) or navigator.submitting,
        ):
            if navigator.jump_to(idx):
                st.rerun()

    st.sidebar.caption(f"Step {current + 1} of {len(STEPS)}")
