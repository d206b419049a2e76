"""
Session State Manager
=====================
Centralized session state management for the calculator app.

All Streamlit session-state access goes through this class so key names live
in one place and services stay testable without a running Streamlit server.
"""

import uuid

import streamlit as st
from typing import Any, Optional, Dict, List


class SessionManager:
    """
    Centralized session state manager.

    Wraps st.session_state with named keys and helpers for the wizard,
    section routing and the prepared PDF export.
    """

    # Session state keys (centralized constants)
    CURRENT_SECTION = 'current_section'
    NAVIGATOR = 'wizard_navigator'
    EXPORT_PDF = 'export_pdf'
    EXPORT_FILENAME = 'export_filename'
    EXPORT_ERROR = 'export_error'
    STORAGE_TOKEN = 'storage_token'

    WIDGET_PREFIX = 'calc_'

    @staticmethod
    def get(key: str, default: Any = None) -> Any:
        """
        Get value from session state.

        Args:
            key: Session state key
            default: Default value if key doesn't exist

        Returns:
            Value from session state or default
        """
        if key in st.session_state:
            return st.session_state[key]
        return default

    @staticmethod
    def set(key: str, value: Any) -> None:
        """
        Set value in session state.

        Args:
            key: Session state key
            value: Value to set
        """
        st.session_state[key] = value

    @staticmethod
    def delete(key: str) -> None:
        """
        Delete key from session state.

        Args:
            key: Session state key
        """
        if key in st.session_state:
            del st.session_state[key]

    @staticmethod
    def exists(key: str) -> bool:
        """Check if key exists in session state."""
        return key in st.session_state

    @staticmethod
    def get_current_section(default: str = 'home') -> str:
        return SessionManager.get(SessionManager.CURRENT_SECTION, default)

    @staticmethod
    def set_current_section(section: str) -> None:
        SessionManager.set(SessionManager.CURRENT_SECTION, section)

    @staticmethod
    def get_navigator() -> Any:
        """WizardNavigator kept for this browser session, or None."""
        return SessionManager.get(SessionManager.NAVIGATOR)

    @staticmethod
    def set_navigator(navigator: Any) -> None:
        SessionManager.set(SessionManager.NAVIGATOR, navigator)

    @staticmethod
    def storage_token() -> str:
        """Random token naming this browser session's file slots; created on first use."""
        token = SessionManager.get(SessionManager.STORAGE_TOKEN)
        if not token:
            token = uuid.uuid4().hex
            SessionManager.set(SessionManager.STORAGE_TOKEN, token)
        return token

    @staticmethod
    def get_export() -> Optional[Dict[str, Any]]:
        """Prepared PDF export, if any: {'content': bytes, 'filename': str}."""
        content = SessionManager.get(SessionManager.EXPORT_PDF)
        if not content:
            return None
        return {
            'content': content,
            'filename': SessionManager.get(SessionManager.EXPORT_FILENAME, 'funding-report.pdf'),
        }

    @staticmethod
    def set_export(content: bytes, filename: str) -> None:
        SessionManager.set(SessionManager.EXPORT_PDF, content)
        SessionManager.set(SessionManager.EXPORT_FILENAME, filename)
        SessionManager.delete(SessionManager.EXPORT_ERROR)

    @staticmethod
    def set_export_error(message: str) -> None:
        SessionManager.delete(SessionManager.EXPORT_PDF)
        SessionManager.set(SessionManager.EXPORT_ERROR, message)

    @staticmethod
    def get_export_error() -> Optional[str]:
        return SessionManager.get(SessionManager.EXPORT_ERROR)

    @staticmethod
    def clear_export() -> None:
        for key in (SessionManager.EXPORT_PDF, SessionManager.EXPORT_FILENAME, SessionManager.EXPORT_ERROR):
            SessionManager.delete(key)

    @staticmethod
    def clear_cache(prefix: Optional[str] = None) -> None:
        """
        Clear cached data from session state.

        Args:
            prefix: Optional prefix to filter keys (e.g., 'calc_'). Without
                one, widget state and the prepared export are cleared.
        """
        prefixes = [prefix] if prefix else [SessionManager.WIDGET_PREFIX, 'export_']
        keys_to_delete: List[str] = [
            key for key in list(st.session_state.keys())
            if isinstance(key, str) and any(key.startswith(p) for p in prefixes)
        ]
        for key in keys_to_delete:
            SessionManager.delete(key)

    @staticmethod
    def get_state_summary() -> Dict[str, Any]:
        """
        Get summary of current session state.

        Returns:
            Dictionary with state summary
        """
        return {
            'current_section': SessionManager.get_current_section(),
            'wizard_step': getattr(SessionManager.get_navigator(), 'current_step', None),
            'submitting': bool(getattr(SessionManager.get_navigator(), 'submitting', False)),
            'has_export': SessionManager.get_export() is not None,
            'total_keys': len(st.session_state),
        }
