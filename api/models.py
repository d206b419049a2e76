from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scoring_result import safe_number


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


class _Loose(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# PDF REPORT REQUEST
# =============================================================================

class ReportCalc(_Loose):
    company_name: str = Field("", alias="companyName")
    location_label: str = Field("", alias="locationLabel")
    industry_label: str = Field("", alias="industryLabel")
    employees_label: str = Field("", alias="employeesLabel")
    focus: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)


class ReportEstimates(_Loose):
    budget: float = 0
    total_support_low: float = Field(0, alias="totalSupportLow")
    total_support_high: float = Field(0, alias="totalSupportHigh")
    net_low: float = Field(0, alias="netLow")
    net_high: float = Field(0, alias="netHigh")
    intensity_low: float = Field(0, alias="intensityLow")
    intensity_high: float = Field(0, alias="intensityHigh")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> float:
        return safe_number(v) or 0


class AmountBand(_Loose):
    low: float = 0
    high: float = 0

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> float:
        return safe_number(v) or 0


class ReportProgram(_Loose):
    title: str = ""
    type: str = ""
    amount: AmountBand = Field(default_factory=AmountBand)
    cover: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)

    @field_validator("title", "type", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @field_validator("cover", "conditions", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> List[str]:
        return _strings(v)


class ReportRequest(_Loose):
    """Body of POST /api/report-pdf. Missing or wrong-typed parts fall back to empty values."""
    calc: ReportCalc = Field(default_factory=ReportCalc)
    estimates: ReportEstimates = Field(default_factory=ReportEstimates)
    top_programs: List[ReportProgram] = Field(default_factory=list, alias="topPrograms")
    checklist: List[str] = Field(default_factory=list)

    @field_validator("calc", "estimates", mode="before")
    @classmethod
    def _coerce_object(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @field_validator("top_programs", mode="before")
    @classmethod
    def _coerce_programs(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        return [p for p in v if isinstance(p, dict)]

    @field_validator("checklist", mode="before")
    @classmethod
    def _coerce_checklist(cls, v: Any) -> List[str]:
        return _strings(v)


# =============================================================================
# RESPONSES
# =============================================================================

class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class ProgramResponse(_Loose):
    id: str
    name: str
    slug: str
    provider: str
    level: str
    category: str
    description: str
    funding_max: int = Field(..., alias="fundingMax")
    funding_percentage: int = Field(..., alias="fundingPercentage")
    status: str
    tags: List[str] = Field(default_factory=list)
    eligibility: List[str] = Field(default_factory=list)
    match_reason: List[str] = Field(default_factory=list, alias="matchReason")


class EstimateResponse(BaseModel):
    estimate: Dict[str, Any]
    chart: List[Dict[str, Any]]
    top_programs: List[Dict[str, Any]]
    checklist: List[str]
