"""
Unit Tests for the Report Service
=================================
"""

from unittest.mock import Mock

from conftest import FakeResponse, http_error
from scoring_result import BackendResult, ProgramResult
from services.report_service import (
    MISSING,
    NO_PROGRAMS_MESSAGE,
    NO_RESULT_MESSAGE,
    ReportExportClient,
    ReportSource,
    build_export_payload,
    build_report,
    export_filename,
    rank_program_results,
)

EXPORT_URL = "http://export.test/api/report-pdf"


class TestRanking:
    """Program ordering."""

    def test_status_order(self):
        """Eligible, then maybe/conditional, then the rest."""
        results = [
            ProgramResult.parse({"name": "A", "status": "ineligible"}),
            ProgramResult.parse({"name": "B", "status": "eligible"}),
            ProgramResult.parse({"name": "C", "status": "maybe"}),
        ]
        assert [r.name for r in rank_program_results(results)] == ["B", "C", "A"]

    def test_amount_desc_within_status(self):
        """Larger typical (else max) first; ties keep input order."""
        results = [
            ProgramResult.parse({"name": "small", "status": "eligible", "estimate": {"est_typical": 100}}),
            ProgramResult.parse({"name": "big", "status": "eligible", "estimate": {"est_max": 900}}),
            ProgramResult.parse({"name": "none-1", "status": "eligible"}),
            ProgramResult.parse({"name": "none-2", "status": "eligible"}),
        ]
        assert [r.name for r in rank_program_results(results)] == ["big", "small", "none-1", "none-2"]


class TestBackendReport:
    """Report built from a stored scoring response."""

    def test_uses_backend_numbers_only(self, complete_answers, backend_payload):
        report = build_report(complete_answers, BackendResult.parse(backend_payload))

        assert report.source is ReportSource.BACKEND
        assert not report.is_estimate
        assert report.notice is None
        assert report.headline.company == "Tremblay Manufacturing Inc."
        labels = [m.label for m in report.metrics]
        assert labels[0] == "Estimated eligible funding"
        assert report.metrics[0].value == "$20,000 – $45,000"
        assert report.metrics[1].caption == "1 strong • 1 conditional"
        assert report.estimates["intensityLow"] == 20
        assert report.estimates["intensityHigh"] == 45
        assert [b.value for b in report.chart] == [100000, 25000, 15000, 60000]

    def test_programs_ranked(self, complete_answers, backend_payload):
        report = build_report(complete_answers, BackendResult.parse(backend_payload))

        assert [p.title for p in report.programs] == ["ESSOR", "C3i", "Closed Fund"]
        assert report.programs[0].amount_text == "$10,000 – $30,000"
        assert report.programs[0].cover == ("Productivity project in Québec",)
        assert report.programs[1].amount_text == "$15,000"
        assert report.programs[2].amount_text == "$90,000"

    def test_missing_net_cost_is_derived(self, complete_answers, backend_payload):
        backend_payload["summary"].pop("net_cost")
        report = build_report(complete_answers, BackendResult.parse(backend_payload))
        assert report.estimates["netLow"] == 100000 - (25000 + 15000)

    def test_no_programs_notice(self, complete_answers):
        """An empty program list says so instead of inventing cards."""
        report = build_report(complete_answers, BackendResult.parse({"summary": {}}))

        assert report.programs == ()
        assert report.programs_notice == NO_PROGRAMS_MESSAGE
        assert report.headline.company == MISSING

    def test_unknown_status_badge_uses_raw_text(self, complete_answers):
        result = BackendResult.parse({"program_results": [{"name": "X", "status": "Pending review"}]})
        report = build_report(complete_answers, result)
        assert report.programs[0].badge == "Pending review"


class TestEstimateReport:
    """Report built from the local estimate."""

    def test_labelled_as_estimate(self, complete_answers):
        report = build_report(complete_answers, None)

        assert report.source is ReportSource.ESTIMATE
        assert report.is_estimate
        assert report.notice == NO_RESULT_MESSAGE
        assert report.source_label == "Approximate estimate"
        assert report.metrics[2].value == "25%–38%"
        assert report.export_location == "Montréal, Québec"
        assert len(report.top_programs) == 3

    def test_export_payload(self, complete_answers):
        payload = build_export_payload(build_report(complete_answers, None))

        assert payload["calc"]["companyName"] == "Tremblay Manufacturing Inc."
        assert payload["calc"]["industryLabel"] == "Manufacturing / industrial"
        assert payload["estimates"]["totalSupportLow"] == 25000
        assert payload["estimates"]["totalSupportHigh"] == 38000
        assert len(payload["topPrograms"]) == 3
        assert set(payload["topPrograms"][0]) == {"title", "type", "amount", "cover", "conditions"}
        assert len(payload["checklist"]) == 11

    def test_missing_values_exported_blank(self, complete_answers):
        report = build_report(complete_answers, BackendResult.parse({}))
        payload = build_export_payload(report)
        assert payload["calc"]["companyName"] == ""
        assert payload["calc"]["locationLabel"] == ""


class TestReportExportClient:
    """Document export HTTP client."""

    def test_success_uses_content_disposition(self):
        response = FakeResponse(
            b"%PDF-1.4 ...",
            headers={"Content-Disposition": 'attachment; filename="Acme-funding-report.pdf"'},
        )
        client = ReportExportClient(EXPORT_URL, opener=Mock(return_value=response))

        outcome = client.export({"calc": {"companyName": "Acme"}})

        assert outcome.ok
        assert outcome.content.startswith(b"%PDF")
        assert outcome.filename == "Acme-funding-report.pdf"

    def test_fallback_filename(self):
        client = ReportExportClient(EXPORT_URL, opener=Mock(return_value=FakeResponse(b"%PDF")))
        outcome = client.export({"calc": {"companyName": "Tremblay Manufacturing Inc."}})
        assert outcome.filename == "tremblay-manufacturing-inc-funding-report.pdf"

    def test_http_error_message_from_body(self):
        error = http_error(EXPORT_URL, 500, b'{"error": "Failed to generate PDF", "details": "bad font"}')
        client = ReportExportClient(EXPORT_URL, opener=Mock(side_effect=error))

        outcome = client.export({"calc": {}})

        assert not outcome.ok
        assert outcome.error == "Failed to generate PDF: bad font"

    def test_unreachable(self):
        client = ReportExportClient(EXPORT_URL, opener=Mock(side_effect=ConnectionRefusedError("refused")))
        outcome = client.export({})
        assert not outcome.ok
        assert outcome.error.startswith("Report service unreachable")

    def test_empty_body(self):
        client = ReportExportClient(EXPORT_URL, opener=Mock(return_value=FakeResponse(b"")))
        assert not client.export({}).ok

    def test_export_filename_default(self):
        assert export_filename(None) == "funding-report.pdf"
