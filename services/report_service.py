"""
Report Service
==============
Builds the results report from either the stored scoring response or, when
there is none, the local fallback estimate. Both paths produce the same
ReportViewModel, so the results page and the PDF export render one shape.

The two sources are never mixed: a backend report carries only backend
numbers, an estimate report only locally-derived ones, and the view model
records which one it is.

Usage:
    report = build_report(store.answers, client.load_result())
    outcome = ReportExportClient(settings.report_api_url).export(build_export_payload(report))
"""

import json
import logging
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from calculator_models import FormAnswers
from calculator_options import (
    employees_label,
    format_currency,
    format_range,
    industry_label,
    location_label,
    project_focus,
)
from estimate_engine import (
    action_checklist,
    calculate_fallback_estimate,
    estimate_chart_series,
    estimate_top_programs,
    round_half_up,
)
from scoring_result import BackendResult, MatchStatus, ProgramResult

logger = logging.getLogger(__name__)


NO_RESULT_MESSAGE = "Could not calculate or find any programs for you. Sorry."
NO_PROGRAMS_MESSAGE = "No program data was returned by the backend."
BACKEND_NOTE = "This report reflects the backend calculation response. If data is missing, it is omitted."
ESTIMATE_NOTE = (
    "Approximate estimate calculated from your answers with typical funding ratios. "
    "It is not a scoring result."
)
MISSING = "—"
TOP_PROGRAM_COUNT = 3


# =============================================================================
# VIEW MODEL
# =============================================================================

class ReportSource(Enum):
    BACKEND = "backend"
    ESTIMATE = "estimate"


@dataclass(frozen=True)
class Metric:
    label: str
    value: str
    caption: Optional[str] = None


@dataclass(frozen=True)
class ChartBar:
    key: str
    name: str
    value: float


@dataclass(frozen=True)
class ProgramCard:
    title: str
    type: str
    badge: str
    amount_text: str
    low: float = 0
    high: float = 0
    confidence: Optional[str] = None
    status: Optional[MatchStatus] = None
    cover: Tuple[str, ...] = ()
    conditions: Tuple[str, ...] = ()

    def to_export(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type,
            "amount": {"low": self.low, "high": self.high},
            "cover": list(self.cover),
            "conditions": list(self.conditions),
        }


@dataclass(frozen=True)
class ReportHeadline:
    company: str
    location: str
    sector: str
    employees: str
    focus: str
    contact: str = MISSING
    email: str = ""


@dataclass(frozen=True)
class ReportViewModel:
    source: ReportSource
    source_label: str
    headline: ReportHeadline
    metrics: Tuple[Metric, ...]
    chart: Tuple[ChartBar, ...]
    programs: Tuple[ProgramCard, ...]
    checklist: Tuple[str, ...]
    estimates: Dict[str, Any]
    export_location: str
    note: str
    notice: Optional[str] = None
    programs_notice: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_estimate(self) -> bool:
        return self.source is ReportSource.ESTIMATE

    @property
    def top_programs(self) -> Tuple[ProgramCard, ...]:
        return self.programs[:TOP_PROGRAM_COUNT]


# =============================================================================
# RANKING
# =============================================================================

def rank_program_results(results: Sequence[ProgramResult]) -> List[ProgramResult]:
    """
    Eligible first, then maybe/conditional, then everything else; within a
    status, larger typical (else maximum) estimates first. Stable.
    """
    return sorted(results, key=lambda r: (r.status.rank, -r.sort_amount))


def _program_card(result: ProgramResult) -> ProgramCard:
    est = result.estimate
    amount = format_range(est.est_min, est.est_max)
    if not amount:
        amount = format_currency(est.est_typical) if est.est_typical else MISSING
    if result.status is MatchStatus.UNKNOWN and result.raw_status:
        badge = result.raw_status
    else:
        badge = result.status.label
    low = est.est_min or est.est_typical or 0
    high = est.est_max or est.est_typical or 0
    return ProgramCard(
        title=result.name or MISSING,
        type=result.type or MISSING,
        badge=badge,
        amount_text=amount,
        low=low,
        high=high,
        confidence=result.confidence,
        status=result.status,
        cover=(result.explanation,) if result.explanation else (),
    )


# =============================================================================
# STRATEGIES
# =============================================================================

class BackendReportStrategy:
    """Report built from the stored scoring response only."""

    source = ReportSource.BACKEND

    def build(self, answers: FormAnswers, result: BackendResult) -> ReportViewModel:
        profile, project, summary = result.profile, result.project, result.summary

        budget = project.budget or 0
        grants = summary.grants_total or 0
        tax = summary.tax_total or 0
        net = summary.net_cost or max(0, budget - (grants + tax))

        metrics: List[Metric] = []
        funding = format_range(summary.estimated_min, summary.estimated_max)
        if funding:
            metrics.append(Metric("Estimated eligible funding", funding))

        total = summary.total_programs
        caption = None
        if summary.strong_matches or summary.conditional_matches:
            caption = (
                f"{int(summary.strong_matches or 0)} strong • "
                f"{int(summary.conditional_matches or 0)} conditional"
            )
        metrics.append(Metric("Programs that fit you", f"{int(total)} matches" if total else MISSING, caption))
        metrics.append(Metric("Net cost", format_currency(net)))
        metrics.append(Metric("Total project budget", format_currency(budget)))

        ranked = rank_program_results(result.program_results)

        low = summary.estimated_min or 0
        high = summary.estimated_max or 0
        estimates = {
            "budget": budget,
            "totalSupportLow": low,
            "totalSupportHigh": high,
            "grantsLow": grants,
            "grantsHigh": grants,
            "taxLow": tax,
            "taxHigh": tax,
            "netLow": net,
            "netHigh": net,
            "intensityLow": round_half_up(low / budget * 100) if budget else 0,
            "intensityHigh": round_half_up(high / budget * 100) if budget else 0,
        }

        region = profile.region or MISSING
        return ReportViewModel(
            source=self.source,
            source_label="Based on calculations",
            headline=ReportHeadline(
                company=profile.company or MISSING,
                location=region,
                sector=profile.sector or MISSING,
                employees=profile.employees_band or MISSING,
                focus=project.main_goal or MISSING,
                contact=profile.contact_name or MISSING,
                email=profile.email or "",
            ),
            metrics=tuple(metrics),
            chart=(
                ChartBar("budget", "Total project budget", budget),
                ChartBar("grants", "Grants & funds", grants),
                ChartBar("tax", "Tax credits", tax),
                ChartBar("net", "Your net cost", net),
            ),
            programs=tuple(_program_card(r) for r in ranked),
            checklist=tuple(action_checklist(answers)),
            estimates=estimates,
            export_location=region if profile.region else "",
            note=BACKEND_NOTE,
            programs_notice=None if ranked else NO_PROGRAMS_MESSAGE,
            description=project.description,
        )


class EstimateReportStrategy:
    """Report built from the answers with the fallback calculator."""

    source = ReportSource.ESTIMATE

    def build(self, answers: FormAnswers, result: Optional[BackendResult] = None) -> ReportViewModel:
        estimate = calculate_fallback_estimate(answers)
        location = location_label(answers.location)

        programs = tuple(
            ProgramCard(
                title=p["title"],
                type=p["type"],
                badge=f"{p['fit']} fit",
                amount_text=format_range(p["amount"]["low"], p["amount"]["high"]) or MISSING,
                low=p["amount"]["low"],
                high=p["amount"]["high"],
                cover=tuple(p["cover"]),
                conditions=tuple(p["conditions"]),
            )
            for p in estimate_top_programs(estimate)
        )

        return ReportViewModel(
            source=self.source,
            source_label="Approximate estimate",
            headline=ReportHeadline(
                company=answers.company_name.strip() or MISSING,
                location=location,
                sector=industry_label(answers.industry),
                employees=employees_label(answers.employees),
                focus=project_focus(answers.project_types, answers.main_goal),
                contact=answers.contact_name.strip() or MISSING,
                email=answers.email.strip(),
            ),
            metrics=(
                Metric(
                    "Estimated eligible funding",
                    format_range(estimate.total_support_low, estimate.total_support_high),
                ),
                Metric(
                    "Estimated net project cost",
                    f"{format_currency(estimate.net_low)} – {format_currency(estimate.net_high)}",
                ),
                Metric(
                    "Funding intensity",
                    f"{estimate.intensity_low}%–{estimate.intensity_high}%",
                    "of your total project cost, if all programs are approved",
                ),
                Metric("Total project budget", format_currency(estimate.budget)),
            ),
            chart=tuple(ChartBar(b["key"], b["name"], b["value"]) for b in estimate_chart_series(estimate)),
            programs=programs,
            checklist=tuple(action_checklist(answers)),
            estimates=estimate.to_dict(),
            export_location=f"{location}, Québec",
            note=ESTIMATE_NOTE,
            notice=NO_RESULT_MESSAGE,
            description=answers.description.strip() or None,
        )


def build_report(answers: FormAnswers, result: Optional[BackendResult]) -> ReportViewModel:
    """Backend report when a scoring response is stored, local estimate otherwise."""
    if result is not None:
        return BackendReportStrategy().build(answers, result)
    return EstimateReportStrategy().build(answers)


def build_export_payload(report: ReportViewModel) -> Dict[str, Any]:
    """Body for the document export endpoint."""
    headline = report.headline

    def _text(value: str) -> str:
        return "" if value == MISSING else value

    return {
        "calc": {
            "companyName": _text(headline.company),
            "locationLabel": report.export_location,
            "industryLabel": _text(headline.sector),
            "employeesLabel": _text(headline.employees),
            "focus": _text(headline.focus),
        },
        "estimates": dict(report.estimates),
        "topPrograms": [card.to_export() for card in report.top_programs],
        "checklist": list(report.checklist),
    }


# =============================================================================
# EXPORT CLIENT
# =============================================================================

@dataclass(frozen=True)
class ExportOutcome:
    ok: bool
    content: bytes = b""
    filename: str = ""
    error: Optional[str] = None


_FILENAME_RE = re.compile(r'filename="?([^";]+)"?')


def export_filename(company: Optional[str]) -> str:
    stem = re.sub(r"[^a-z0-9]+", "-", (company or "").lower()).strip("-")
    return f"{stem}-funding-report.pdf" if stem else "funding-report.pdf"


def _error_message(status: int, body: bytes) -> str:
    text = body.decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        details = data.get("details")
        return f"{data['error']}: {details}" if details else str(data["error"])
    return f"HTTP {status}: {text}" if text else f"HTTP {status}"


class ReportExportClient:
    """
    Client for the PDF export endpoint.

    Args:
        endpoint: Export URL (POST JSON, returns application/pdf)
        timeout: Request timeout in seconds
        opener: urlopen-compatible callable, injectable for tests
    """

    def __init__(
        self,
        endpoint: str,
        timeout: Optional[float] = 60,
        opener: Callable[..., Any] = urllib.request.urlopen,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.opener = opener

    def export(self, payload: Dict[str, Any]) -> ExportOutcome:
        """POST the export body; failures come back as ExportOutcome(ok=False)."""
        request = urllib.request.Request(
            self.endpoint,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        fallback_name = export_filename(payload.get("calc", {}).get("companyName"))

        try:
            if self.timeout is None:
                resp_ctx = self.opener(request)
            else:
                resp_ctx = self.opener(request, timeout=self.timeout)
            with resp_ctx as resp:
                content = resp.read()
                disposition = resp.headers.get("Content-Disposition") if resp.headers is not None else None
        except urllib.error.HTTPError as e:
            message = _error_message(e.code, e.read() or b"")
            logger.warning("PDF export failed: %s", message)
            return ExportOutcome(ok=False, error=message)
        except (OSError, ValueError) as e:
            logger.warning("PDF export service unreachable: %s", e)
            return ExportOutcome(ok=False, error=f"Report service unreachable: {e}")

        if not content:
            return ExportOutcome(ok=False, error="Report service returned an empty document")

        filename = fallback_name
        if isinstance(disposition, str):
            match = _FILENAME_RE.search(disposition)
            if match:
                filename = match.group(1)
        return ExportOutcome(ok=True, content=content, filename=filename)
