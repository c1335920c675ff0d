"""Table-driven state machine shared by the connection and assembler FSMs."""

import logging
from enum import Enum
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

_LOGGER = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)
E = TypeVar("E", bound=Enum)


class TableStateMachine(Generic[S, E]):
    """State machine driven by an explicit ``(state, event) -> state`` table.

    Subclasses provide the initial state and the transition table.
    Unknown ``(state, event)`` pairs are rejected and leave the state
    untouched.
    """

    name = "StateMachine"

    def __init__(self, initial: S, transitions: Dict[Tuple[S, E], S]):
        self._initial = initial
        self._state: S = initial
        self._previous_state: Optional[S] = None
        self._transitions = transitions
        self._on_state_change: Dict[S, Callable[[], None]] = {}

    @property
    def state(self) -> S:
        """Get current state."""
        return self._state

    @property
    def previous_state(self) -> Optional[S]:
        return self._previous_state

    def can_transition(self, event: E) -> bool:
        return (self._state, event) in self._transitions

    def transition(self, event: E) -> bool:
        """Attempt a state transition.

        Returns:
            True if the transition was valid and executed, False otherwise
        """
        key = (self._state, event)
        if key not in self._transitions:
            _LOGGER.debug(
                "%s: invalid transition %s + %s",
                self.name,
                self._state.name,
                event.name,
            )
            return False

        self._change_state(self._transitions[key], event)
        return True

    def on_state(self, state: S, callback: Callable[[], None]) -> None:
        """Register a callback invoked on entry to ``state``."""
        self._on_state_change[state] = callback

    def reset(self) -> None:
        """Return to the initial state."""
        self._state = self._initial
        self._previous_state = None

    def _change_state(self, new_state: S, event: E) -> None:
        self._previous_state = self._state
        self._state = new_state

        _LOGGER.debug(
            "%s: %s -> %s (event: %s)",
            self.name,
            self._previous_state.name,
            new_state.name,
            event.name,
        )

        callback = self._on_state_change.get(new_state)
        if callback is not None:
            try:
                callback()
            except Exception as err:
                _LOGGER.error("Error in state change callback: %s", err)

    def __str__(self) -> str:
        return f"{self.name}(state={self._state.name})"

    def __repr__(self) -> str:
        return (
            f"{self.name}(state={self._state!r}, previous={self._previous_state!r})"
        )
