"""
Unit Tests for the Wizard Navigator
===================================
"""

from unittest.mock import Mock

from calculator_models import FormAnswers
from services.wizard_service import (
    LAST_STEP,
    RESULTS_DESTINATION,
    STEPS,
    NavigationOutcome,
    WizardNavigator,
)


def always(valid: bool):
    return lambda step, answers: valid


class TestWizardNavigator:
    """Linear step state machine."""

    def test_starts_at_first_step(self):
        """A new navigator is at step 0 with no destination."""
        nav = WizardNavigator(submit=Mock())
        assert nav.current_step == 0
        assert nav.title == STEPS[0]
        assert nav.destination is None
        assert not nav.submitting

    def test_next_blocked_when_invalid(self):
        """Invalid answers keep the step where it is."""
        nav = WizardNavigator(submit=Mock(), validator=always(False))
        assert nav.next(FormAnswers()) is NavigationOutcome.BLOCKED
        assert nav.current_step == 0

    def test_next_advances_when_valid(self):
        """Valid answers move forward one step."""
        nav = WizardNavigator(submit=Mock(), validator=always(True))
        assert nav.next(FormAnswers()) is NavigationOutcome.ADVANCED
        assert nav.current_step == 1

    def test_prev_never_validated_and_floors_at_zero(self):
        """Back always works and stops at step 0."""
        nav = WizardNavigator(submit=Mock(), validator=always(False), step=2)
        assert nav.prev() == 1
        assert nav.prev() == 0
        assert nav.prev() == 0

    def test_jump_only_to_reached_steps(self):
        """Steps ahead of the current one cannot be jumped to."""
        nav = WizardNavigator(submit=Mock(), step=2)
        assert nav.jump_to(3) is False
        assert nav.current_step == 2
        assert nav.jump_to(0) is True
        assert nav.current_step == 0

    def test_submit_on_last_step(self):
        """Advancing past the last step submits once and sets the destination."""
        submit = Mock()
        nav = WizardNavigator(submit=submit, validator=always(True), step=LAST_STEP)
        answers = FormAnswers(disclaimer_accepted=True)

        assert nav.next(answers) is NavigationOutcome.SUBMITTED
        submit.assert_called_once_with(answers)
        assert nav.consume_destination() == RESULTS_DESTINATION
        assert nav.consume_destination() is None
        assert nav.current_step == LAST_STEP
        assert not nav.submitting

    def test_submit_failure_still_navigates(self, caplog):
        """An exception from submit is logged and navigation proceeds."""
        nav = WizardNavigator(submit=Mock(side_effect=RuntimeError("boom")), validator=always(True),
                              step=LAST_STEP)

        assert nav.next(FormAnswers()) is NavigationOutcome.SUBMITTED
        assert nav.destination == RESULTS_DESTINATION
        assert not nav.submitting
        assert "Submit callback failed" in caplog.text

    def test_in_flight_submission_ignored(self):
        """A second Calculate while submitting is a no-op."""
        submit = Mock()
        nav = WizardNavigator(submit=submit, validator=always(True), step=LAST_STEP)
        nav.submitting = True

        assert nav.next(FormAnswers()) is NavigationOutcome.IN_FLIGHT
        assert not nav.can_advance(FormAnswers())
        submit.assert_not_called()

    def test_submitting_flag_set_during_submit(self):
        """The in-flight flag is visible to the submit callback."""
        seen = []
        nav = WizardNavigator(submit=lambda a: seen.append(nav.submitting), validator=always(True),
                              step=LAST_STEP)
        nav.next(FormAnswers())
        assert seen == [True]

    def test_step_clamped_and_reset(self):
        """Out-of-range start steps are clamped; reset returns to step 0."""
        assert WizardNavigator(submit=Mock(), step=99).current_step == LAST_STEP
        nav = WizardNavigator(submit=Mock(), step=-3)
        assert nav.current_step == 0

        nav = WizardNavigator(submit=Mock(), step=3)
        nav.destination = RESULTS_DESTINATION
        nav.reset()
        assert nav.current_step == 0
        assert nav.destination is None

    def test_full_walk_with_real_validator(self, complete_answers):
        """Complete answers walk through every step to submission."""
        submit = Mock()
        nav = WizardNavigator(submit=submit)
        outcomes = [nav.next(complete_answers) for _ in range(len(STEPS))]

        assert outcomes[:-1] == [NavigationOutcome.ADVANCED] * (len(STEPS) - 1)
        assert outcomes[-1] is NavigationOutcome.SUBMITTED
        submit.assert_called_once()
