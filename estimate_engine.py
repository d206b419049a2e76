"""
Estimate Engine
===============
Locally-computed funding estimate used when no scoring response is available.

The numbers are fixed heuristic ratios over the project budget. They are
deterministic (same answers, same estimate) and are always reported as an
approximation, never mixed with backend-sourced figures.

Usage:
    from estimate_engine import calculate_fallback_estimate

    estimate = calculate_fallback_estimate(answers)
    estimate.total_support_low, estimate.total_support_high
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from calculator_models import FormAnswers


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_BUDGET = 250000

COMPLEXITY_BASE_SIMPLE = 0.35
COMPLEXITY_BASE_MAXIMIZE = 0.50

READINESS_BOOST_QUOTES = 0.05
READINESS_BOOST_ROADMAP = 0.03

INTENSITY_FLOOR = 0.25
INTENSITY_CEILING = 0.60
INTENSITY_SPREAD = 0.15

GRANTS_BAND = (0.22, 0.30)
TAX_BAND = (0.12, 0.18)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class FallbackEstimate:
    """All amounts in whole CAD; intensities in whole percent."""
    budget: int
    total_support_low: int
    total_support_high: int
    grants_low: int
    grants_high: int
    tax_low: int
    tax_high: int
    net_low: int
    net_high: int
    intensity_low: int
    intensity_high: int

    @property
    def grants_mid(self) -> int:
        return round_half_up((self.grants_low + self.grants_high) / 2)

    @property
    def tax_mid(self) -> int:
        return round_half_up((self.tax_low + self.tax_high) / 2)

    def to_dict(self) -> Dict[str, int]:
        """camelCase keys, as sent to the document export endpoint."""
        return {
            "budget": self.budget,
            "totalSupportLow": self.total_support_low,
            "totalSupportHigh": self.total_support_high,
            "grantsLow": self.grants_low,
            "grantsHigh": self.grants_high,
            "taxLow": self.tax_low,
            "taxHigh": self.tax_high,
            "netLow": self.net_low,
            "netHigh": self.net_high,
            "intensityLow": self.intensity_low,
            "intensityHigh": self.intensity_high,
        }


# =============================================================================
# CALCULATION
# =============================================================================

def complexity_base(answers: FormAnswers) -> float:
    if answers.complexity_preference == "simple":
        return COMPLEXITY_BASE_SIMPLE
    return COMPLEXITY_BASE_MAXIMIZE


def readiness_boost(answers: FormAnswers) -> float:
    detail = (answers.project_detail_level or "").lower()
    if "quotes" in detail:
        return READINESS_BOOST_QUOTES
    if "roadmap" in detail:
        return READINESS_BOOST_ROADMAP
    return 0.0


def calculate_fallback_estimate(answers: FormAnswers) -> FallbackEstimate:
    """
    Derive an approximate funding range from the intake answers alone.

    intensity_low  = max(25%, base - 15% + boost)
    intensity_high = min(60%, base + boost)
    where base is 35% for "simple" and 50% otherwise, and boost rewards
    supplier quotes (+5%) or a written roadmap (+3%).
    """
    total = answers.total_budget
    budget = round_half_up(total) if total > 0 else DEFAULT_BUDGET

    base = complexity_base(answers)
    boost = readiness_boost(answers)
    low_intensity = max(INTENSITY_FLOOR, base - INTENSITY_SPREAD + boost)
    high_intensity = min(INTENSITY_CEILING, base + boost)

    support_low = round_half_up(budget * low_intensity)
    support_high = round_half_up(budget * high_intensity)

    return FallbackEstimate(
        budget=budget,
        total_support_low=support_low,
        total_support_high=support_high,
        grants_low=round_half_up(budget * GRANTS_BAND[0]),
        grants_high=round_half_up(budget * GRANTS_BAND[1]),
        tax_low=round_half_up(budget * TAX_BAND[0]),
        tax_high=round_half_up(budget * TAX_BAND[1]),
        net_low=max(0, budget - support_high),
        net_high=max(0, budget - support_low),
        intensity_low=round_half_up(low_intensity * 100),
        intensity_high=round_half_up(high_intensity * 100),
    )


def estimate_chart_series(estimate: FallbackEstimate) -> List[Dict[str, Any]]:
    """Four bars: budget, grants midpoint, tax midpoint, approximate net cost."""
    net_mid = max(0, estimate.budget - (estimate.grants_mid + estimate.tax_mid))
    return [
        {"key": "budget", "name": "Total project budget", "value": estimate.budget},
        {"key": "grants", "name": "Grants & funds (est.)", "value": estimate.grants_mid},
        {"key": "tax", "name": "Tax credits (est.)", "value": estimate.tax_mid},
        {"key": "net", "name": "Your net cost (approx.)", "value": net_mid},
    ]


# =============================================================================
# ILLUSTRATIVE PROGRAMS + CHECKLIST
# =============================================================================

def estimate_top_programs(estimate: FallbackEstimate) -> List[Dict[str, Any]]:
    """Typical program mix for a digital project of this size, with capped amount bands."""
    budget = estimate.budget or DEFAULT_BUDGET

    def band(low_pct: float, low_cap: int, high_pct: float, high_cap: int) -> Dict[str, int]:
        return {
            "low": min(low_cap, round_half_up(budget * low_pct)),
            "high": min(high_cap, round_half_up(budget * high_pct)),
        }

    return [
        {
            "id": "essor",
            "title": "ESSOR – Digital transformation & productivity",
            "type": "Non-repayable grant",
            "fit": "Very strong",
            "cover": [
                "Part of your production automation project (machines, software, integration)",
                "Part of your digital roadmap / consulting",
            ],
            "amount": band(0.12, 60000, 0.24, 90000),
            "conditions": [
                "Manufacturing SME in Québec",
                "Clear productivity gains (time saved, cost per unit, defects)",
                "Project size usually above $100,000",
            ],
        },
        {
            "id": "automation",
            "title": "Industrial automation / Industry 4.0 support",
            "type": "Grant or combined grant + loan (program-dependent)",
            "fit": "Strong",
            "cover": [
                "Smart machines, sensors, data capture on the production line",
                "Integration with your ERP / BI to track production in real time",
            ],
            "amount": band(0.10, 50000, 0.20, 80000),
            "conditions": [
                "Manufacturing plant in Québec",
                "Clear link to automation and productivity",
            ],
        },
        {
            "id": "tax",
            "title": "Digital investment / productivity tax credit (C3i-type)",
            "type": "Refundable tax credit",
            "fit": "Strong",
            "cover": ["Part of your software, hardware, and equipment costs"],
            "amount": band(0.08, 40000, 0.16, 60000),
            "conditions": [
                "Investments in approved digital / manufacturing tech",
                "Company taxable in Québec",
            ],
        },
    ]


def action_checklist(answers: FormAnswers) -> List[str]:
    simple = answers.complexity_preference == "simple"
    return [
        "Lock your project scope and budget.",
        "Define the exact machines, software, and website work we will include.",
        "Apply for the main grant (ESSOR / main program).",
        "Prepare a short digital transformation plan and basic financials.",
        "We help write this in the format the program expects.",
        "Structure the project so it also qualifies for tax credits.",
        "Tag which expenses are eligible (equipment vs software vs services).",
        "Check if an automation or regional program can be stacked.",
        "If yes, we adjust the timeline to avoid conflicts.",
        "Final step: decide your preferred option.",
        (
            "Option B: 1–2 programs only (less paperwork, lower funding but simpler)."
            if simple
            else "Option A: Maximise funding (more programs, more paperwork)."
        ),
    ]


def estimate_as_dict(estimate: FallbackEstimate) -> Dict[str, Any]:
    """snake_case view with derived midpoints, for the JSON estimate endpoint."""
    out = asdict(estimate)
    out["grants_mid"] = estimate.grants_mid
    out["tax_mid"] = estimate.tax_mid
    return out
