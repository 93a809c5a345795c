"""State machine for a checkout run."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class CheckoutState(str, Enum):
    """Lifecycle of a single checkout call.

    - PENDING: Not yet started
    - RUNNING: Traversing the remote tree
    - DONE: Every queued directory and file was mirrored
    - FAILED: Aborted on the first fetch or filesystem error
    - CANCELLED: Aborted by cancel request or deadline
    """

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS: dict[CheckoutState, set[CheckoutState]] = {
    CheckoutState.PENDING: {CheckoutState.RUNNING, CheckoutState.FAILED},
    CheckoutState.RUNNING: {
        CheckoutState.DONE,
        CheckoutState.FAILED,
        CheckoutState.CANCELLED,
    },
    CheckoutState.DONE: set(),
    CheckoutState.FAILED: set(),
    CheckoutState.CANCELLED: set(),
}


class CheckoutStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(self, from_state: CheckoutState, to_state: CheckoutState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal checkout state transition: {from_state.value} -> {to_state.value}"
        )


class CheckoutStateMachine:
    """Enforces valid checkout transitions and logs state changes."""

    def __init__(self, run_id: str) -> None:
        self._state = CheckoutState.PENDING
        self._log = logger.bind(component="checkout", run_id=run_id)

    @property
    def state(self) -> CheckoutState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return not _VALID_TRANSITIONS[self._state]

    def can_transition_to(self, target: CheckoutState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS[self._state]

    def transition_to(self, target: CheckoutState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            CheckoutStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise CheckoutStateTransitionError(self._state, target)

        old_state = self._state
        self._state = target
        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )
