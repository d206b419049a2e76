"""
Wizard Service
==============
Linear five-step state machine for the calculator wizard.

Forward moves are gated by the step validator; backward moves never are.
Advancing from the last step runs the injected submit function and then
always sends the user to the results destination, whatever the outcome.

Usage:
    navigator = WizardNavigator(submit=client.submit)
    outcome = navigator.next(store.answers)
    if outcome is NavigationOutcome.SUBMITTED:
        go_to(navigator.consume_destination())
"""

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from calculator_models import FormAnswers
from services.step_validator import is_step_valid

logger = logging.getLogger(__name__)


STEPS: List[str] = [
    "Business Profile",
    "Project Overview",
    "Budget",
    "Preferences",
    "Review",
]

FIRST_STEP = 0
LAST_STEP = len(STEPS) - 1

RESULTS_DESTINATION = "results"


class NavigationOutcome(Enum):
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    SUBMITTED = "submitted"
    IN_FLIGHT = "in_flight"


class WizardNavigator:
    """
    Step state for one session.

    Args:
        submit: Called with the answers when advancing past the last step
        validator: Step predicate, defaults to is_step_valid
        step: Starting step
    """

    def __init__(
        self,
        submit: Callable[[FormAnswers], Any],
        validator: Callable[[int, FormAnswers], bool] = is_step_valid,
        step: int = FIRST_STEP,
    ):
        self.submit = submit
        self.validator = validator
        self.current_step = min(max(step, FIRST_STEP), LAST_STEP)
        self.submitting = False
        self.destination: Optional[str] = None

    @property
    def is_last_step(self) -> bool:
        return self.current_step == LAST_STEP

    @property
    def title(self) -> str:
        return STEPS[self.current_step]

    def can_advance(self, answers: FormAnswers) -> bool:
        """Whether the Next / Calculate control should be enabled."""
        return not self.submitting and self.validator(self.current_step, answers)

    def can_jump_to(self, step: int) -> bool:
        return FIRST_STEP <= step <= self.current_step

    def next(self, answers: FormAnswers) -> NavigationOutcome:
        if self.submitting:
            return NavigationOutcome.IN_FLIGHT

        if not self.validator(self.current_step, answers):
            return NavigationOutcome.BLOCKED

        if not self.is_last_step:
            self.current_step += 1
            return NavigationOutcome.ADVANCED

        self.submitting = True
        try:
            self.submit(answers)
        except Exception:
            # Submission failure shows up later as a missing result
            logger.exception("Submit callback failed")
        finally:
            self.submitting = False
        self.destination = RESULTS_DESTINATION
        return NavigationOutcome.SUBMITTED

    def prev(self) -> int:
        self.current_step = max(FIRST_STEP, self.current_step - 1)
        return self.current_step

    def jump_to(self, step: int) -> bool:
        """Move to an already-reached step. Returns False (and stays put) otherwise."""
        if not self.can_jump_to(step):
            return False
        self.current_step = step
        return True

    def consume_destination(self) -> Optional[str]:
        destination, self.destination = self.destination, None
        return destination

    def reset(self) -> None:
        self.current_step = FIRST_STEP
        self.submitting = False
        self.destination = None
