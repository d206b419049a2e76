"""
Calculator Data Model
=====================
FormAnswers is the single mutable intake record for a session. Python code
uses snake_case attributes; persisted JSON and the scoring payload use the
camelCase keys the backend expects.

Usage:
    answers = FormAnswers.from_dict(json.loads(saved))
    payload = answers.to_dict()
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class BudgetItem:
    """One project budget line. Cost is always a finite number >= 0."""
    id: str
    name: str
    cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        cost = int(self.cost) if float(self.cost).is_integer() else self.cost
        return {"id": self.id, "name": self.name, "cost": cost}


DEFAULT_BUDGET_ITEMS: tuple = (
    BudgetItem(id="1", name="Software Licenses (ERP/CRM)", cost=0.0),
    BudgetItem(id="2", name="Implementation Consultants", cost=0.0),
    BudgetItem(id="3", name="Training", cost=0.0),
)


def coerce_cost(value: Any) -> float:
    """Cost of a budget line; anything non-numeric, negative or non-finite is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "").replace("$", "")
        if not value:
            return 0.0
    try:
        cost = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(cost) or cost < 0:
        return 0.0
    return cost


def budget_items_from_records(records: Any) -> List[BudgetItem]:
    """
    Build budget lines from loosely-typed records (persisted JSON or editor rows).

    Non-mapping entries are dropped. Missing ids are assigned after the
    highest numeric id already present.
    """
    if not isinstance(records, list):
        return []

    rows = [r for r in records if isinstance(r, Mapping)]
    numeric_ids = [int(str(r.get("id"))) for r in rows if str(r.get("id", "")).isdigit()]
    next_id = max(numeric_ids, default=0) + 1

    items: List[BudgetItem] = []
    for row in rows:
        raw_id = row.get("id")
        if raw_id is None or (isinstance(raw_id, float) and math.isnan(raw_id)) or str(raw_id).strip() == "":
            item_id = str(next_id)
            next_id += 1
        else:
            item_id = str(raw_id)
        raw_name = row.get("name")
        name = raw_name if isinstance(raw_name, str) else ""
        items.append(BudgetItem(id=item_id, name=name, cost=coerce_cost(row.get("cost"))))
    return items


@dataclass(frozen=True)
class FormAnswers:
    """Intake answers. Replace fields with dataclasses.replace; never mutate in place."""

    # Step 0: Business profile
    location: str = ""
    legal_entity: str = ""
    industry: str = ""
    employees: str = ""
    revenue: str = ""
    is_exporting: bool = False
    export_scope: str = "qc_only"

    # Step 1: Project overview
    current_tools: List[str] = field(default_factory=list)
    digital_level: str = ""
    project_types: List[str] = field(default_factory=list)
    timeline: str = ""
    main_goal: str = ""
    project_detail_level: str = ""
    description: str = ""

    # Step 2: Budget
    budget_range: str = ""
    budget_items: List[BudgetItem] = field(default_factory=lambda: list(DEFAULT_BUDGET_ITEMS))
    major_cost_types: List[str] = field(default_factory=list)

    # Step 3: Preferences
    previous_funding: str = "no"
    previous_programs: List[str] = field(default_factory=list)
    support_type: str = "any"
    reimbursement_ok: bool = True
    has_project_manager: bool = False
    complexity_preference: str = "maximize"

    # Step 4: Contact + review
    contact_name: str = ""
    company_name: str = ""
    email: str = ""
    help_next: str = ""
    disclaimer_accepted: bool = False

    @property
    def total_budget(self) -> float:
        return sum(item.cost for item in self.budget_items)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "budget_items":
                value = [item.to_dict() for item in value]
            elif isinstance(value, list):
                value = list(value)
            out[WIRE_KEYS[f.name]] = value
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FormAnswers":
        """Merge a persisted record over the defaults, coercing malformed fields."""
        defaults = cls()
        if not isinstance(data, Mapping):
            return defaults

        values: Dict[str, Any] = {}
        for f in fields(cls):
            key = WIRE_KEYS[f.name]
            default = getattr(defaults, f.name)
            if key not in data:
                continue
            raw = data[key]

            if f.name == "budget_items":
                values[f.name] = budget_items_from_records(raw) if isinstance(raw, list) else list(DEFAULT_BUDGET_ITEMS)
            elif isinstance(default, list):
                values[f.name] = [v for v in raw if isinstance(v, str)] if isinstance(raw, list) else []
            elif isinstance(default, bool):
                values[f.name] = raw if isinstance(raw, bool) else default
            else:
                values[f.name] = raw if isinstance(raw, str) else default

        return cls(**values)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


WIRE_KEYS: Dict[str, str] = {f.name: _camel(f.name) for f in fields(FormAnswers)}
