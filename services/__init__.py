"""
Services Layer
==============
Business logic for the funding calculator, independent of the Streamlit UI.

Service classes can be used (and tested) without a running Streamlit server;
only SessionManager and SessionStatePersistence touch st.session_state.
"""

from .session_manager import SessionManager
from .persistence import (
    InMemoryPersistence,
    JsonFilePersistence,
    PersistencePort,
    SessionStatePersistence,
    build_port,
)
from .form_store import FormStateStore
from .step_validator import is_step_valid
from .wizard_service import NavigationOutcome, WizardNavigator
from .submission_service import SubmissionClient
from .report_service import ReportExportClient, build_export_payload, build_report

__all__ = [
    'SessionManager',
    'PersistencePort',
    'InMemoryPersistence',
    'JsonFilePersistence',
    'SessionStatePersistence',
    'build_port',
    'FormStateStore',
    'is_step_valid',
    'NavigationOutcome',
    'WizardNavigator',
    'SubmissionClient',
    'ReportExportClient',
    'build_report',
    'build_export_payload',
]
