"""
Step Validator
==============
Pure per-step predicates gating forward navigation in the calculator wizard.
Re-evaluated on every render; never raises and never reports messages.
"""

from typing import Callable, Dict

from calculator_models import FormAnswers


def _profile_complete(a: FormAnswers) -> bool:
    return all([a.location, a.legal_entity, a.industry, a.employees, a.revenue])


def _project_complete(a: FormAnswers) -> bool:
    return (
        len(a.current_tools) > 0
        and bool(a.digital_level)
        and len(a.project_types) > 0
        and bool(a.timeline)
        and bool(a.main_goal)
    )


def _budget_complete(a: FormAnswers) -> bool:
    return a.total_budget > 0


def _preferences_complete(a: FormAnswers) -> bool:
    return bool(a.complexity_preference)


def _review_complete(a: FormAnswers) -> bool:
    return a.disclaimer_accepted is True


STEP_VALIDATORS: Dict[int, Callable[[FormAnswers], bool]] = {
    0: _profile_complete,
    1: _project_complete,
    2: _budget_complete,
    3: _preferences_complete,
    4: _review_complete,
}


def is_step_valid(step: int, answers: FormAnswers) -> bool:
    """True when `answers` satisfy wizard step `step` (0-4); any other step is invalid."""
    validator = STEP_VALIDATORS.get(step)
    if validator is None:
        return False
    return validator(answers)
