"""Unit tests for the checkout state machine."""

import pytest

from svnmirror.checkout.state_machine import (
    CheckoutState,
    CheckoutStateMachine,
    CheckoutStateTransitionError,
)


class TestCheckoutStateMachine:
    """Tests for CheckoutStateMachine."""

    def test_initial_state(self) -> None:
        """Test that a new machine is PENDING."""
        machine = CheckoutStateMachine(run_id="run")

        assert machine.state == CheckoutState.PENDING
        assert machine.is_terminal is False

    @pytest.mark.parametrize(
        "final",
        [CheckoutState.DONE, CheckoutState.FAILED, CheckoutState.CANCELLED],
    )
    def test_running_to_terminal(self, final: CheckoutState) -> None:
        """Test the normal lifecycle transitions."""
        machine = CheckoutStateMachine(run_id="run")

        machine.transition_to(CheckoutState.RUNNING)
        machine.transition_to(final)

        assert machine.state == final
        assert machine.is_terminal is True

    def test_cannot_skip_running(self) -> None:
        """Test that PENDING cannot jump to DONE."""
        machine = CheckoutStateMachine(run_id="run")

        with pytest.raises(CheckoutStateTransitionError) as exc_info:
            machine.transition_to(CheckoutState.DONE)

        assert exc_info.value.from_state == CheckoutState.PENDING
        assert exc_info.value.to_state == CheckoutState.DONE

    def test_terminal_states_are_final(self) -> None:
        """Test that no transition leaves a terminal state."""
        machine = CheckoutStateMachine(run_id="run")
        machine.transition_to(CheckoutState.RUNNING)
        machine.transition_to(CheckoutState.DONE)

        for target in CheckoutState:
            assert machine.can_transition_to(target) is False
