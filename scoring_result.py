"""
Scoring Result Model
====================
Typed, total view over the loosely-shaped JSON returned by the external
scoring service. The payload is untrusted: every accessor tolerates absent
keys, wrong types and out-of-range values, and parsing never raises.

Absent or unusable values are represented as None (numbers, strings) or
MatchStatus.UNKNOWN (statuses); display code decides how to render them.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


# =============================================================================
# SAFE COERCION
# =============================================================================

def safe_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def safe_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def safe_str(value: Any) -> Optional[str]:
    """Non-blank string, stripped; None otherwise."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def safe_number(value: Any) -> Optional[float]:
    """Finite number from an int, float or numeric string; None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


# =============================================================================
# ENUMS
# =============================================================================

class MatchStatus(Enum):
    ELIGIBLE = "eligible"
    MAYBE = "maybe"
    INELIGIBLE = "ineligible"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "MatchStatus":
        text = (safe_str(value) or "").lower()
        if text == "conditional":
            return cls.MAYBE
        for status in cls:
            if status.value == text:
                return status
        return cls.UNKNOWN

    @property
    def rank(self) -> int:
        """Sort rank: eligible first, maybe/conditional second, everything else last."""
        if self is MatchStatus.ELIGIBLE:
            return 0
        if self is MatchStatus.MAYBE:
            return 1
        return 2

    @property
    def label(self) -> str:
        return {
            MatchStatus.ELIGIBLE: "Eligible",
            MatchStatus.MAYBE: "Conditional",
            MatchStatus.INELIGIBLE: "Not eligible",
            MatchStatus.UNKNOWN: "Unknown",
        }[self]


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ProgramEstimate:
    est_min: Optional[float] = None
    est_max: Optional[float] = None
    est_typical: Optional[float] = None


@dataclass(frozen=True)
class ProgramResult:
    name: Optional[str]
    type: Optional[str]
    status: MatchStatus
    raw_status: Optional[str]
    confidence: Optional[str]
    estimate: ProgramEstimate
    explanation: Optional[str]

    @property
    def sort_amount(self) -> float:
        """Typical estimate, else maximum, else 0 (zero counts as absent)."""
        return self.estimate.est_typical or self.estimate.est_max or 0.0

    @classmethod
    def parse(cls, raw: Any) -> "ProgramResult":
        data = safe_mapping(raw)
        estimate = safe_mapping(data.get("estimate"))
        explanation = data.get("explanation")
        if isinstance(explanation, Mapping):
            explanation_text = safe_str(explanation.get("summary"))
        else:
            explanation_text = safe_str(explanation)
        return cls(
            name=safe_str(data.get("name")),
            type=safe_str(data.get("type")),
            status=MatchStatus.parse(data.get("status")),
            raw_status=safe_str(data.get("status")),
            confidence=safe_str(data.get("confidence")),
            estimate=ProgramEstimate(
                est_min=safe_number(estimate.get("est_min")),
                est_max=safe_number(estimate.get("est_max")),
                est_typical=safe_number(estimate.get("est_typical")),
            ),
            explanation=explanation_text,
        )


@dataclass(frozen=True)
class ResultSummary:
    estimated_min: Optional[float] = None
    estimated_max: Optional[float] = None
    net_cost: Optional[float] = None
    total_funding: Optional[float] = None
    grants_total: Optional[float] = None
    tax_total: Optional[float] = None
    total_programs: Optional[float] = None
    strong_matches: Optional[float] = None
    conditional_matches: Optional[float] = None

    @classmethod
    def parse(cls, raw: Any) -> "ResultSummary":
        data = safe_mapping(raw)
        return cls(**{name: safe_number(data.get(name)) for name in cls.__dataclass_fields__})


@dataclass(frozen=True)
class ResultProfile:
    company: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    region: Optional[str] = None
    sector: Optional[str] = None
    employees_band: Optional[str] = None


@dataclass(frozen=True)
class ResultProject:
    budget: Optional[float] = None
    main_goal: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class BackendResult:
    """Parsed scoring response. Build with BackendResult.parse."""
    profile: ResultProfile
    project: ResultProject
    summary: ResultSummary
    program_results: Tuple[ProgramResult, ...] = field(default=())

    @property
    def has_programs(self) -> bool:
        return len(self.program_results) > 0

    @classmethod
    def parse(cls, raw: Any) -> Optional["BackendResult"]:
        """Return None unless `raw` is a JSON object."""
        if not isinstance(raw, Mapping):
            return None

        profile = safe_mapping(raw.get("profile"))
        contact = safe_mapping(profile.get("contact"))
        project = safe_mapping(raw.get("project"))

        return cls(
            profile=ResultProfile(
                company=safe_str(raw.get("company")) or safe_str(contact.get("company")),
                contact_name=safe_str(contact.get("name")),
                email=safe_str(contact.get("email")),
                region=safe_str(profile.get("region")),
                sector=safe_str(profile.get("sector")),
                employees_band=safe_str(profile.get("employees_band")),
            ),
            project=ResultProject(
                budget=safe_number(project.get("budget")),
                main_goal=safe_str(project.get("main_goal")),
                description=safe_str(project.get("description")),
            ),
            summary=ResultSummary.parse(raw.get("summary")),
            program_results=tuple(
                ProgramResult.parse(item)
                for item in safe_list(raw.get("program_results"))
                if isinstance(item, Mapping)
            ),
        )

