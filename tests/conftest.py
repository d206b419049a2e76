"""
Pytest Configuration and Fixtures
==================================
Shared test fixtures: in-memory persistence, sample answers, a sample
scoring response and fake urlopen helpers.
"""

import io
import json
import urllib.error
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, Mock

import pytest

from calculator_models import BudgetItem, FormAnswers
from services.persistence import InMemoryPersistence


class FakeResponse:
    """Context-manager response returned by a fake urlopen."""

    def __init__(self, body: bytes, status: int = 200, headers: Optional[Dict[str, str]] = None):
        self._body = body
        self.status = status
        self.headers = headers or {}

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def json_opener(data: Any, status: int = 200) -> Mock:
    """urlopen stand-in answering every request with `data` as JSON."""
    return Mock(return_value=FakeResponse(json.dumps(data).encode("utf-8"), status=status))


def http_error(url: str, code: int, body: bytes = b"") -> urllib.error.HTTPError:
    return urllib.error.HTTPError(url, code, "error", {}, io.BytesIO(body))


@pytest.fixture
def memory_port():
    """Empty in-memory persistence slot."""
    return InMemoryPersistence()


@pytest.fixture
def result_port():
    """Separate slot for the scoring result."""
    return InMemoryPersistence()


@pytest.fixture
def complete_answers() -> FormAnswers:
    """Answers that satisfy every wizard step."""
    return FormAnswers(
        location="montreal",
        legal_entity="Incorporated company (Inc. / Ltd. / S.A.)",
        industry="manufacturing",
        employees="10-49",
        revenue="1m-4_9m",
        current_tools=["CRM"],
        digital_level="We are fairly digital, but we want to improve and automate more.",
        project_types=["Implement or change ERP", "Launch or improve e-commerce store"],
        timeline="In 3–6 months",
        main_goal="Improve internal efficiency and productivity",
        project_detail_level="We have a clear written project plan / digital roadmap",
        budget_items=[
            BudgetItem(id="1", name="Software Licenses (ERP/CRM)", cost=60000),
            BudgetItem(id="2", name="Implementation Consultants", cost=30000),
            BudgetItem(id="3", name="Training", cost=10000),
        ],
        complexity_preference="simple",
        contact_name="Marie Tremblay",
        company_name="Tremblay Manufacturing Inc.",
        email="marie.tremblay@example.com",
        disclaimer_accepted=True,
    )


@pytest.fixture
def backend_payload() -> Dict[str, Any]:
    """Scoring response in the shape the external service returns."""
    return {
        "company": "Tremblay Manufacturing Inc.",
        "profile": {
            "region": "Montréal",
            "sector": "Manufacturing",
            "employees_band": "10–49",
            "contact": {"name": "Marie Tremblay", "email": "marie.tremblay@example.com"},
        },
        "project": {"budget": 100000, "main_goal": "Improve internal efficiency", "description": "New ERP"},
        "summary": {
            "estimated_min": 20000,
            "estimated_max": 45000,
            "net_cost": 60000,
            "grants_total": 25000,
            "tax_total": 15000,
            "total_programs": 3,
            "strong_matches": 1,
            "conditional_matches": 1,
        },
        "program_results": [
            {
                "name": "Closed Fund",
                "type": "Grant",
                "status": "ineligible",
                "estimate": {"est_typical": 90000},
            },
            {
                "name": "ESSOR",
                "type": "Grant",
                "status": "eligible",
                "confidence": "high",
                "estimate": {"est_min": 10000, "est_max": 30000, "est_typical": 20000},
                "explanation": {"summary": "Productivity project in Québec"},
            },
            {
                "name": "C3i",
                "type": "Tax Credit",
                "status": "conditional",
                "estimate": {"est_max": 15000},
                "explanation": "Equipment purchases",
            },
        ],
    }


@pytest.fixture
def mock_session_state(monkeypatch):
    """Replace st.session_state (as seen by SessionManager) with a plain dict."""
    fake_st = MagicMock()
    fake_st.session_state = {}
    monkeypatch.setattr("services.session_manager.st", fake_st)
    return fake_st.session_state
