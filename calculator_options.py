"""
Calculator Options
==================
Declared option sets for every enum-valued intake field, plus the display
label helpers used by the results report and the PDF export.

Each option set is an ordered tuple of (value, label). For the free-wording
questions (legal entity, digital level, timeline, ...) the stored value is
the label itself, which is what the scoring backend receives.
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Option = Tuple[str, str]


def _same(*labels: str) -> Tuple[Option, ...]:
    return tuple((label, label) for label in labels)


# =============================================================================
# STEP 0 - BUSINESS PROFILE
# =============================================================================

LOCATIONS: Tuple[Option, ...] = (
    ("montreal", "Montréal"),
    ("quebec_city", "Québec City"),
    ("laval", "Laval"),
    ("monteregie", "Montérégie"),
    ("laurentides", "Laurentides"),
    ("lanaudiere", "Lanaudière"),
    ("estrie", "Estrie"),
    ("outaouais", "Outaouais"),
    ("mauricie", "Mauricie"),
    ("saguenay", "Saguenay–Lac-Saint-Jean"),
    ("bas_st_laurent", "Bas-Saint-Laurent"),
    ("gaspesie", "Gaspésie–Îles-de-la-Madeleine"),
    ("abitibi", "Abitibi-Témiscamingue"),
    ("cote_nord", "Côte-Nord"),
    ("nord_du_quebec", "Nord-du-Québec"),
    ("outside_qc", "Outside Québec"),
)

LEGAL_ENTITIES = _same(
    "Incorporated company (Inc. / Ltd. / S.A.)",
    "Sole proprietorship",
    "Partnership",
    "Non-profit organization",
    "Other",
)

INDUSTRIES: Tuple[Option, ...] = (
    ("manufacturing", "Manufacturing / industrial"),
    ("retail", "Retail (physical stores)"),
    ("ecommerce", "E-commerce / online retail"),
    ("professional_services", "Professional services / consulting"),
    ("construction", "Construction / real estate"),
    ("hospitality", "Hospitality / tourism / restaurants"),
    ("logistics", "Transportation / logistics"),
    ("agri_food", "Agriculture / agri-food"),
    ("tech", "Technology / software / digital services"),
    ("health", "Health / social services"),
    ("education", "Education / training"),
    ("other", "Other"),
)

EMPLOYEE_BANDS: Tuple[Option, ...] = (
    ("1-4", "1–4"),
    ("5-9", "5–9"),
    ("10-49", "10–49"),
    ("50-99", "50–99"),
    ("100-249", "100–249"),
    ("250+", "250+"),
)

REVENUE_BANDS: Tuple[Option, ...] = (
    ("<250k", "Less than $250,000"),
    ("250k-999k", "$250,000 – $999,999"),
    ("1m-4_9m", "$1M – $4.9M"),
    ("5m-9_9m", "$5M – $9.9M"),
    ("10m-49_9m", "$10M – $49.9M"),
    ("50m+", "$50M and above"),
)

EXPORT_SCOPES: Tuple[Option, ...] = (
    ("qc_only", "Québec only"),
    ("canada", "Other provinces in Canada"),
    ("outside_canada", "Outside Canada"),
    ("both", "Both (rest of Canada and international)"),
)

# =============================================================================
# STEP 1 - PROJECT OVERVIEW
# =============================================================================

CURRENT_TOOLS = _same(
    "Accounting software (QuickBooks, Sage, Acomba, etc.)",
    "ERP (Odoo, SAP, NetSuite, etc.)",
    "CRM",
    "E-commerce platform (Shopify, WooCommerce, etc.)",
    "POS system",
    "Business intelligence / dashboards (Power BI, Looker, etc.)",
    "Industrial automation / robots / Industry 4.0",
    "Custom internal software",
    "None / very basic tools",
)

DIGITAL_LEVELS = _same(
    "We are at the very beginning (mostly manual, Excel, paper).",
    "We have some digital tools, but they are not connected and create extra work.",
    "We are fairly digital, but we want to improve and automate more.",
    "We are advanced and want to go into AI, predictive, or new automation.",
)

PROJECT_TYPES = _same(
    "Implement or change ERP",
    "Implement or change CRM",
    "Build or rebuild company website",
    "Launch or improve e-commerce store",
    "Connect systems / workflow automation (APIs, integrations, etc.)",
    "Implement or upgrade BI / dashboards / data platform",
    "Automate or modernize production (Industry 4.0, sensors, machines)",
    "Implement AI / machine learning (forecasting, quality control, etc.)",
    "Improve cybersecurity / data protection",
    "Train staff on digital tools and new processes",
    "Other digital project",
)

TIMELINES = _same(
    "Within the next 3 months",
    "In 3–6 months",
    "In 6–12 months",
    "In more than 12 months",
    "Not sure yet",
)

MAIN_GOALS = _same(
    "Improve internal efficiency and productivity",
    "Increase online sales and marketing reach",
    "Both: improve production AND online presence / sales",
    "Other",
)

PROJECT_DETAIL_LEVELS = _same(
    "Just an idea; nothing written yet",
    "We have internal notes and a rough description",
    "We have a clear written project plan / digital roadmap",
    "We already have written quotes from suppliers",
)

# =============================================================================
# STEP 2 - BUDGET
# =============================================================================

BUDGET_RANGES: Tuple[Option, ...] = (
    ("<20k", "Less than $20,000"),
    ("20k-49k", "$20,000 – $49,999"),
    ("50k-99k", "$50,000 – $99,999"),
    ("100k-249k", "$100,000 – $249,999"),
    ("250k-499k", "$250,000 – $499,999"),
    ("500k+", "$500,000 or more"),
)

MAJOR_COST_TYPES = _same(
    "External consultants / integrators / agencies",
    "Software licenses / subscriptions",
    "Hardware / equipment / machines / sensors",
    "Custom development / programming / integrations",
    "Training for employees",
    "Internal staff time assigned to the project",
    "Marketing / export activities",
    "Other costs",
)

# =============================================================================
# STEP 3 - PREFERENCES
# =============================================================================

PREVIOUS_FUNDING: Tuple[Option, ...] = (
    ("no", "No"),
    ("yes", "Yes, at least one grant or tax credit"),
    ("not_sure", "Not sure"),
)

PREVIOUS_PROGRAMS = _same(
    "ESSOR",
    "PCAN / CDAP",
    "Investissement Québec programs",
    "Municipal / regional programs",
    "Tax credits (C3i, CDAE, SR&ED, etc.)",
    "Other",
)

SUPPORT_TYPES: Tuple[Option, ...] = (
    ("both", "Grants + Tax Credits"),
    ("grants", "Grants only"),
    ("tax", "Tax Credits only"),
    ("loans", "Loans / Financing"),
    ("any", "Any / Optimized Mix"),
    ("explain", "I don’t know — explain in results"),
)

SUPPORT_TYPE_HINTS: Dict[str, str] = {
    "both": "Best overall coverage if eligible.",
    "grants": "Direct funding, more competitive.",
    "tax": "Often reliable, reimbursed later.",
    "loans": "Useful if grants don’t fit.",
    "any": "We’ll find the best combo.",
    "explain": "We’ll show differences clearly.",
}

COMPLEXITY_PREFERENCES: Tuple[Option, ...] = (
    ("maximize", "Maximise total funding, even if the process is longer/more complex"),
    ("simple", "Get some support, but keep the process very simple"),
)

# =============================================================================
# STEP 4 - REVIEW / CONTACT
# =============================================================================

HELP_NEXT = _same(
    "Just send me a summary report by email",
    "Contact me for a short call to validate funding options",
    "Contact me with a full project + funding proposal",
)

# =============================================================================
# LABEL HELPERS
# =============================================================================


def option_values(options: Sequence[Option]) -> List[str]:
    return [value for value, _ in options]


def option_label(options: Iterable[Option], value: Optional[str], default: str = "-") -> str:
    """Label for `value`, falling back to the raw value (or `default` when empty)."""
    if not value:
        return default
    for opt_value, label in options:
        if opt_value == value:
            return label
    return value


def location_label(location: Optional[str]) -> str:
    if not location:
        return "-"
    return option_label(LOCATIONS, location).replace("_", " ")


def industry_label(industry: Optional[str]) -> str:
    return option_label(INDUSTRIES, industry)


def employees_label(employees: Optional[str]) -> str:
    if not employees:
        return "-"
    return employees.replace("-", "–", 1)


def project_focus(project_types: Sequence[str], main_goal: Optional[str] = None) -> str:
    """Summarise the planned projects as a one-line focus for reports."""
    lowered = [p.lower() for p in project_types if isinstance(p, str)]

    def _any(*needles: str) -> bool:
        return any(n in p for p in lowered for n in needles)

    wants_online = _any("website", "e-commerce", "marketing")
    wants_production = _any("production", "industry 4.0", "automation")

    if wants_online and wants_production:
        return "Online presence + production process"
    if wants_online:
        return "Online presence / sales"
    if wants_production:
        return "Production process / automation"

    goal = (main_goal or "").lower()
    if "online" in goal:
        return "Online presence / sales"
    if "production" in goal:
        return "Production process / automation"

    named = [p for p in project_types if isinstance(p, str)]
    return " + ".join(named[:2]) if named else "Digital transformation"


def format_currency(value: Optional[float]) -> str:
    """Whole-dollar CAD amount, e.g. 12345.6 -> '$12,346'. None renders as $0."""
    amount = int(math.floor((value or 0) + 0.5))
    if amount < 0:
        return f"-${abs(amount):,}"
    return f"${amount:,}"


def format_range(low: Optional[float], high: Optional[float]) -> str:
    """'$a – $b'; a single bound when only one is set; '' when neither is."""
    if not low and not high:
        return ""
    if low and not high:
        return format_currency(low)
    if high and not low:
        return format_currency(high)
    return f"{format_currency(low)} – {format_currency(high)}"
