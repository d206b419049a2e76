"""
PDF Funding Report
==================
Renders the export body (see api.models.ReportRequest) as an A4 document
with the reportlab canvas API.

Page 1: title, company block, highlights, top three programs.
Page 2: ordered next steps (up to 20) and the disclaimer.
"""

from __future__ import annotations

import io
import re
from typing import Any, List

from reportlab.lib.colors import black, gray
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from api.models import ReportRequest
from calculator_options import format_currency

MARGIN = 42
LINE_HEIGHT = 1.35
MAX_PROGRAMS = 3
MAX_COVER = 5
MAX_CONDITIONS = 6
MAX_STEPS = 20

DISCLAIMER = (
    "Note: This report is an estimate based on typical eligibility patterns and public program rules. "
    "Final approval depends on full application review."
)


def safe_text(value: Any, fallback: str = "-") -> str:
    """Stripped text limited to what the standard PDF fonts can encode."""
    if not isinstance(value, str) or not value.strip():
        return fallback
    return value.strip().encode("cp1252", errors="replace").decode("cp1252")


def report_filename(company_name: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9]+", "-", safe_text(company_name, "Your company")).strip("-")
    return f"{stem}-funding-report.pdf" if stem else "funding-report.pdf"


class _Writer:
    """Top-down text cursor over a canvas; breaks pages when the cursor runs out."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.width, self.height = A4
        self.y = self.height - MARGIN

    def new_page(self) -> None:
        self.c.showPage()
        self.y = self.height - MARGIN

    def gap(self, lines: float) -> None:
        self.y -= lines * 12

    def text(self, line: str, size: float = 11, bold: bool = False, color: Any = black, underline: bool = False) -> None:
        font = "Helvetica-Bold" if bold else "Helvetica"
        leading = size * LINE_HEIGHT
        for part in simpleSplit(line, font, size, self.width - 2 * MARGIN) or [""]:
            if self.y - leading < MARGIN:
                self.new_page()
            self.y -= leading
            self.c.setFont(font, size)
            self.c.setFillColor(color)
            self.c.drawString(MARGIN, self.y, part)
            if underline:
                self.c.setStrokeColor(color)
                self.c.line(MARGIN, self.y - 2, MARGIN + self.c.stringWidth(part, font, size), self.y - 2)
        self.c.setFillColor(black)


def _amount_range(low: float, high: float) -> str:
    return f"{format_currency(low)} – {format_currency(high)}"


def build_report_pdf(req: ReportRequest) -> bytes:
    """Return the PDF bytes for one export request."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle("Funding Summary Report")
    w = _Writer(c)

    calc, est = req.calc, req.estimates
    company = safe_text(calc.company_name, "Your company")

    w.text("Funding Summary Report", size=18, bold=True, underline=True)
    w.gap(0.6)

    w.text(f"Company: {company}", size=12)
    w.text(f"Location: {safe_text(calc.location_label)}", size=12)
    w.text(f"Sector: {safe_text(calc.industry_label)}", size=12)
    w.text(f"Employees: {safe_text(calc.employees_label)}", size=12)
    w.text(f"Project focus: {safe_text(calc.focus)}", size=12)
    w.gap(0.8)

    w.text("Highlights", size=13, bold=True, underline=True)
    w.gap(0.4)
    w.text(f"Estimated eligible funding: {_amount_range(est.total_support_low, est.total_support_high)}")
    w.text(f"Estimated net project cost after funding: {_amount_range(est.net_low, est.net_high)}")
    w.text(f"Funding intensity estimate: {est.intensity_low:g}% – {est.intensity_high:g}%")
    w.text(f"Total project budget: {format_currency(est.budget)}")
    w.gap(0.8)

    w.text("Top Programs (prioritized)", size=13, bold=True, underline=True)
    w.gap(0.4)
    for idx, program in enumerate(req.top_programs[:MAX_PROGRAMS], start=1):
        w.text(f"{idx}. {safe_text(program.title)}", size=12, bold=True)
        w.text(f"Type: {safe_text(program.type)}", size=10, color=gray)
        w.text(f"Estimated amount: {_amount_range(program.amount.low, program.amount.high)}", size=10)
        _bullets(w, "What it can cover:", program.cover[:MAX_COVER])
        _bullets(w, "Key conditions:", program.conditions[:MAX_CONDITIONS])
        w.gap(0.7)

    w.new_page()
    w.text("What we should do next (in order)", size=13, bold=True, underline=True)
    w.gap(0.4)
    for idx, step in enumerate(req.checklist[:MAX_STEPS], start=1):
        w.text(f"{idx}. {safe_text(step, '')}")
        w.gap(0.15)

    w.gap(1)
    w.text(DISCLAIMER, size=9, color=gray)

    c.showPage()
    c.save()
    return buffer.getvalue()


def _bullets(w: _Writer, heading: str, items: List[str]) -> None:
    if not items:
        return
    w.gap(0.2)
    w.text(heading, size=10)
    for item in items:
        w.text(f"• {safe_text(item, '')}", size=10)
