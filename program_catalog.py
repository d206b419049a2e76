"""
Program Catalog
===============
Static reference data for the funding programs shown in the directory and
detail views. Read-only for the lifetime of the process.

Usage:
    from program_catalog import get_program, list_programs

    program = get_program("cdap-boost")
    grants = list_programs(category=ProgramCategory.GRANT)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class ProgramLevel(Enum):
    PROVINCIAL = "Provincial"
    FEDERAL = "Federal"
    MUNICIPAL = "Municipal"
    PRIVATE = "Private"


class ProgramCategory(Enum):
    GRANT = "Grant"
    LOAN = "Loan"
    TAX_CREDIT = "Tax Credit"


class ProgramStatus(Enum):
    OPEN = "Open"
    PAUSED = "Paused"
    CLOSED = "Closed"


class ProgramNotFoundError(LookupError):
    """Raised when a slug does not match any catalog entry."""

    def __init__(self, slug: str):
        super().__init__(f"No funding program with slug '{slug}'")
        self.slug = slug


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class Program:
    """A named funding instrument with fixed eligibility metadata."""
    id: str
    name: str
    slug: str
    provider: str
    level: ProgramLevel
    category: ProgramCategory
    description: str
    funding_max: int  # 0 = no fixed cap
    funding_percentage: int
    status: ProgramStatus
    tags: Tuple[str, ...] = ()
    eligibility: Tuple[str, ...] = ()
    match_reason: Tuple[str, ...] = field(default=())

    @property
    def has_cap(self) -> bool:
        return self.funding_max > 0

    @property
    def is_open(self) -> bool:
        return self.status is ProgramStatus.OPEN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "provider": self.provider,
            "level": self.level.value,
            "category": self.category.value,
            "description": self.description,
            "fundingMax": self.funding_max,
            "fundingPercentage": self.funding_percentage,
            "status": self.status.value,
            "tags": list(self.tags),
            "eligibility": list(self.eligibility),
            "matchReason": list(self.match_reason),
        }


# =============================================================================
# CATALOG
# =============================================================================

PROGRAMS: Tuple[Program, ...] = (
    Program(
        id="1",
        name="ESSOR - Component 1",
        slug="essor-component-1",
        provider="Investissement Québec",
        level=ProgramLevel.PROVINCIAL,
        category=ProgramCategory.LOAN,
        description="Support for investment projects in Québec (feasibility studies, digital diagnostics).",
        funding_max=100000,
        funding_percentage=50,
        status=ProgramStatus.OPEN,
        tags=("Feasibility", "Digital Diagnostic", "SME"),
        match_reason=("Supports feasibility studies", "Match for Québec SMEs"),
        eligibility=("For-profit businesses in Québec", "Project cost > $20k"),
    ),
    Program(
        id="2",
        name="CDAP - Boost Your Business Technology",
        slug="cdap-boost",
        provider="ISED (Federal)",
        level=ProgramLevel.FEDERAL,
        category=ProgramCategory.GRANT,
        description=(
            "Get a grant to cover up to 90% of the cost of hiring a digital advisor "
            "to develop a digital adoption plan."
        ),
        funding_max=15000,
        funding_percentage=90,
        status=ProgramStatus.OPEN,
        tags=("Digital Plan", "Advisory", "Small Business"),
        match_reason=("High coverage (90%)", "Ideal for initial planning"),
        eligibility=("Canadian-owned SME", "1-499 employees", "$500k+ revenue"),
    ),
    Program(
        id="3",
        name="C3i - Investment and Innovation Tax Credit",
        slug="c3i-tax-credit",
        provider="Revenu Québec",
        level=ProgramLevel.PROVINCIAL,
        category=ProgramCategory.TAX_CREDIT,
        description=(
            "Tax credit for the acquisition of manufacturing and processing equipment, "
            "computer equipment, and management software packages."
        ),
        funding_max=0,
        funding_percentage=20,  # varies by region
        status=ProgramStatus.OPEN,
        tags=("Hardware", "Software", "Manufacturing"),
        match_reason=("Applies to hardware & software", "Refundable tax credit"),
        eligibility=("Establishment in Québec", "Eligible equipment expenses > $5k"),
    ),
    Program(
        id="4",
        name="Productivité innovation",
        slug="productivite-innovation",
        provider="Investissement Québec",
        level=ProgramLevel.PROVINCIAL,
        category=ProgramCategory.LOAN,
        description=(
            "Term loan to support innovative projects and purchase of high-tech "
            "equipment to increase productivity."
        ),
        funding_max=5000000,
        funding_percentage=100,
        status=ProgramStatus.OPEN,
        tags=("Productivity", "Equipment", "Innovation"),
        match_reason=("Large funding capacity", "Supports equipment purchase"),
        eligibility=("Profitable SME", "Project aims to increase productivity"),
    ),
    Program(
        id="5",
        name="CanExport SMEs",
        slug="canexport-smes",
        provider="Trade Commissioner Service",
        level=ProgramLevel.FEDERAL,
        category=ProgramCategory.GRANT,
        description="Funding to help Canadian SMEs break into new international markets.",
        funding_max=50000,
        funding_percentage=50,
        status=ProgramStatus.PAUSED,
        tags=("Export", "International", "Marketing"),
        match_reason=("Supports international expansion", "Digital marketing covered"),
        eligibility=("SME", "Expanding to new market"),
    ),
)

_BY_SLUG: Dict[str, Program] = {p.slug: p for p in PROGRAMS}


# =============================================================================
# LOOKUPS
# =============================================================================

def find_program(slug: Optional[str]) -> Optional[Program]:
    if not slug:
        return None
    return _BY_SLUG.get(slug.strip().lower())


def get_program(slug: str) -> Program:
    """Return the program for `slug` or raise ProgramNotFoundError."""
    program = find_program(slug)
    if program is None:
        raise ProgramNotFoundError(slug)
    return program


def list_programs(
    level: Optional[ProgramLevel] = None,
    category: Optional[ProgramCategory] = None,
    status: Optional[ProgramStatus] = None,
    query: Optional[str] = None,
) -> List[Program]:
    """
    Filter the catalog.

    `query` matches case-insensitively against name, provider and tags.
    """
    needle = (query or "").strip().lower()
    results = []
    for program in PROGRAMS:
        if level is not None and program.level is not level:
            continue
        if category is not None and program.category is not category:
            continue
        if status is not None and program.status is not status:
            continue
        if needle:
            haystack = " ".join((program.name, program.provider) + program.tags).lower()
            if needle not in haystack:
                continue
        results.append(program)
    return results


EXAMPLE_PROJECT_COST = 200000
EXAMPLE_ELIGIBLE_SHARE = 0.80


def example_calculation(program: Program, project_cost: float = EXAMPLE_PROJECT_COST) -> Dict[str, float]:
    """
    Illustrative funding for a sample project: 80% of the cost is treated as
    eligible and the program percentage is applied to that. The cap is not
    applied; the detail page shows it separately.
    """
    eligible = project_cost * EXAMPLE_ELIGIBLE_SHARE
    return {
        "project_cost": project_cost,
        "eligible_expenses": eligible,
        "funding": eligible * program.funding_percentage / 100,
    }
