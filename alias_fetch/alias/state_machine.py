"""Per-call state machine for alias resolution."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class ResolutionState(Enum):
    """Resolution states for one resolve call.

    State transitions:
        STARTED -> VIA_ALIAS: A cached alias exists for the path
        STARTED -> DIRECT: No alias cached and the URI is short enough
        STARTED -> CREATING_ALIAS: No alias cached and the URI is too long
        VIA_ALIAS -> RECREATING_ALIAS: Alias returned 404, first retry only
        VIA_ALIAS -> FINISHED: Alias response returned to the caller
        RECREATING_ALIAS -> DIRECT/CREATING_ALIAS: Expired alias dropped
        DIRECT -> CREATING_ALIAS: Server answered 414
        DIRECT -> FINISHED: Direct response returned to the caller
        CREATING_ALIAS -> VIA_ALIAS: Alias created (or created concurrently)
        CREATING_ALIAS -> FAILED: Alias creation refused
    """

    STARTED = auto()
    VIA_ALIAS = auto()
    DIRECT = auto()
    CREATING_ALIAS = auto()
    RECREATING_ALIAS = auto()
    FINISHED = auto()
    FAILED = auto()


class ResolutionStateError(Exception):
    """Raised when an invalid resolution state transition is attempted."""

    def __init__(self, from_state: ResolutionState, to_state: ResolutionState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid resolution state transition: {from_state.name} -> {to_state.name}"
        )


class ResolutionStateMachine:
    """State machine for a single resolve call.

    Entering CREATING_ALIAS or RECREATING_ALIAS spends the retry budget.
    Once spent, a 404 on an alias can no longer trigger recreation, which
    bounds every call to one creation cycle and one recreation cycle.
    """

    VALID_TRANSITIONS: ClassVar[dict[ResolutionState, set[ResolutionState]]] = {
        ResolutionState.STARTED: {
            ResolutionState.VIA_ALIAS,
            ResolutionState.DIRECT,
            ResolutionState.CREATING_ALIAS,
        },
        ResolutionState.VIA_ALIAS: {
            ResolutionState.RECREATING_ALIAS,
            ResolutionState.FINISHED,
        },
        ResolutionState.RECREATING_ALIAS: {
            ResolutionState.DIRECT,
            ResolutionState.CREATING_ALIAS,
        },
        ResolutionState.DIRECT: {
            ResolutionState.CREATING_ALIAS,
            ResolutionState.FINISHED,
        },
        ResolutionState.CREATING_ALIAS: {
            ResolutionState.VIA_ALIAS,
            ResolutionState.FAILED,
        },
        ResolutionState.FINISHED: set(),  # Terminal state
        ResolutionState.FAILED: set(),  # Terminal state
    }

    _RETRY_STATES: ClassVar[frozenset[ResolutionState]] = frozenset(
        {ResolutionState.CREATING_ALIAS, ResolutionState.RECREATING_ALIAS}
    )

    def __init__(self, path: str) -> None:
        """Initialize the state machine in STARTED state.

        Args:
            path: Logical path being resolved, for logging.
        """
        self._state = ResolutionState.STARTED
        self._history: list[ResolutionState] = [ResolutionState.STARTED]
        self._retried = False
        self._log = logger.bind(component="alias", path_length=len(path))

    @property
    def state(self) -> ResolutionState:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> list[ResolutionState]:
        """Get every state visited so far, in order."""
        return list(self._history)

    @property
    def recreate_allowed(self) -> bool:
        """Check if an expired alias may still be recreated."""
        return not self._retried

    def can_transition(self, to_state: ResolutionState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        if to_state not in self.VALID_TRANSITIONS.get(self._state, set()):
            return False
        if to_state == ResolutionState.RECREATING_ALIAS:
            return self.recreate_allowed
        return True

    def transition(self, to_state: ResolutionState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            ResolutionStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise ResolutionStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._history.append(to_state)
        if to_state in self._RETRY_STATES:
            self._retried = True
        self._log.debug(
            "resolution_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (ResolutionState.FINISHED, ResolutionState.FAILED)
