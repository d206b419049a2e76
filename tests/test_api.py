"""
API Tests
=========
Document export and catalog endpoints through the FastAPI TestClient.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.models import ReportRequest
from api.pdf_report import build_report_pdf, report_filename, safe_text


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def report_body():
    return {
        "calc": {
            "companyName": "Acme Corp",
            "locationLabel": "Laval, Québec",
            "industryLabel": "Manufacturing / industrial",
            "employeesLabel": "10–49",
            "focus": "Production process / automation",
        },
        "estimates": {
            "budget": 100000,
            "totalSupportLow": 25000,
            "totalSupportHigh": 38000,
            "netLow": 62000,
            "netHigh": 75000,
            "intensityLow": 25,
            "intensityHigh": 38,
        },
        "topPrograms": [
            {
                "title": "ESSOR – Digital transformation & productivity",
                "type": "Non-repayable grant",
                "amount": {"low": 12000, "high": 24000},
                "cover": ["Automation", "Roadmap"],
                "conditions": ["Manufacturing SME in Québec"],
            }
        ],
        "checklist": [f"Step {i}" for i in range(30)],
    }


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["ok"] is True


class TestReportPdf:
    """POST /api/report-pdf."""

    def test_returns_pdf(self, client, report_body):
        response = client.post("/api/report-pdf", json=report_body)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="Acme-Corp-funding-report.pdf"'
        assert response.content.startswith(b"%PDF")

    def test_minimal_body(self, client):
        """Every part of the body is optional."""
        response = client.post("/api/report-pdf", json={})

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        assert 'filename="Your-company-funding-report.pdf"' in response.headers["content-disposition"]

    def test_wrong_types_tolerated(self, client):
        body = {"calc": "nope", "estimates": {"budget": "lots"}, "topPrograms": [1, {"amount": 5}], "checklist": "x"}
        response = client.post("/api/report-pdf", json=body)
        assert response.status_code == 200

    def test_non_object_body_is_422(self, client):
        response = client.post("/api/report-pdf", json=[1, 2, 3])

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request body"
        assert isinstance(response.json()["details"], list)

    def test_wrong_method_is_405(self, client):
        response = client.get("/api/report-pdf")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"
        assert "POST" in response.headers.get("allow", "")

    def test_generation_failure_is_500(self, client, report_body):
        with patch("api.main.build_report_pdf", side_effect=RuntimeError("font missing")):
            response = client.post("/api/report-pdf", json=report_body)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate PDF", "details": "font missing"}


class TestPdfRendering:
    """Direct rendering helpers."""

    def test_long_report_spans_pages(self, report_body):
        pdf = build_report_pdf(ReportRequest.model_validate(report_body))
        assert pdf.startswith(b"%PDF")
        pages = pdf.count(b"/Type /Page") - pdf.count(b"/Type /Pages")
        assert pages >= 2

    def test_safe_text(self):
        assert safe_text("  ", "fallback") == "fallback"
        assert safe_text(None) == "-"
        assert safe_text("Montréal") == "Montréal"

    def test_report_filename(self):
        assert report_filename("Acme Corp") == "Acme-Corp-funding-report.pdf"
        assert report_filename("") == "Your-company-funding-report.pdf"

    def test_report_filename_strips_edge_dashes(self):
        assert report_filename("Tremblay Inc.") == "Tremblay-Inc-funding-report.pdf"
        assert report_filename("  (Acme) ") == "Acme-funding-report.pdf"
        assert report_filename("!!!") == "funding-report.pdf"


class TestCatalogEndpoints:
    """GET /v1/programs."""

    def test_list_all(self, client):
        response = client.get("/v1/programs")
        assert response.status_code == 200
        assert len(response.json()) == 5
        assert "fundingMax" in response.json()[0]

    def test_filter_by_status(self, client):
        response = client.get("/v1/programs", params={"status": "Paused"})
        assert [p["slug"] for p in response.json()] == ["canexport-smes"]

    def test_invalid_filter_is_422(self, client):
        response = client.get("/v1/programs", params={"level": "Galactic"})
        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request body"

    def test_detail(self, client):
        response = client.get("/v1/programs/cdap-boost")
        assert response.status_code == 200
        assert response.json()["fundingPercentage"] == 90

    def test_unknown_slug_is_404(self, client):
        response = client.get("/v1/programs/does-not-exist")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Program not found"
        assert "does-not-exist" in body["details"]


class TestEstimateEndpoint:
    """POST /v1/estimate."""

    def test_estimate(self, client):
        body = {
            "budgetItems": [{"id": "1", "name": "ERP", "cost": 100000}],
            "complexityPreference": "simple",
            "projectDetailLevel": "We have a clear written project plan / digital roadmap",
        }
        response = client.post("/v1/estimate", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["estimate"]["total_support_low"] == 25000
        assert data["estimate"]["total_support_high"] == 38000
        assert [bar["key"] for bar in data["chart"]] == ["budget", "grants", "tax", "net"]
        assert len(data["top_programs"]) == 3
        assert data["checklist"][-1].startswith("Option B")

    def test_empty_answers_use_default_budget(self, client):
        response = client.post("/v1/estimate", json={})
        assert response.json()["estimate"]["budget"] == 250000
