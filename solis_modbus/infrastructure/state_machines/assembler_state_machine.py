"""Response assembler state machine.

One request/response exchange walks through:

    IDLE -> AWAITING_RESPONSE -> COMPLETE | TIMED_OUT | FAILED -> IDLE
"""

from enum import Enum, auto

from .base_state_machine import TableStateMachine


class AssemblerState(Enum):
    """Assembler states."""

    IDLE = auto()
    AWAITING_RESPONSE = auto()
    COMPLETE = auto()
    TIMED_OUT = auto()
    FAILED = auto()


class AssemblerEvent(Enum):
    """Events driving the assembler."""

    BEGIN = auto()
    FRAME_COMPLETE = auto()
    DEADLINE_EXPIRED = auto()
    TRANSPORT_ERROR = auto()
    RELEASE = auto()


class AssemblerStateMachine(TableStateMachine[AssemblerState, AssemblerEvent]):
    """State machine for a single outstanding request.

    RELEASE returns to IDLE from every non-idle state; this covers both the
    normal hand-off of a finished frame and caller-level cancellation.

    Example:
        >>> sm = AssemblerStateMachine()
        >>> sm.transition(AssemblerEvent.BEGIN)
        True
        >>> sm.transition(AssemblerEvent.BEGIN)
        False
    """

    name = "AssemblerStateMachine"

    def __init__(self):
        transitions = {
            (
                AssemblerState.IDLE,
                AssemblerEvent.BEGIN,
            ): AssemblerState.AWAITING_RESPONSE,
            (
                AssemblerState.AWAITING_RESPONSE,
                AssemblerEvent.FRAME_COMPLETE,
            ): AssemblerState.COMPLETE,
            (
                AssemblerState.AWAITING_RESPONSE,
                AssemblerEvent.DEADLINE_EXPIRED,
            ): AssemblerState.TIMED_OUT,
            (
                AssemblerState.AWAITING_RESPONSE,
                AssemblerEvent.TRANSPORT_ERROR,
            ): AssemblerState.FAILED,
        }
        for state in (
            AssemblerState.AWAITING_RESPONSE,
            AssemblerState.COMPLETE,
            AssemblerState.TIMED_OUT,
            AssemblerState.FAILED,
        ):
            transitions[(state, AssemblerEvent.RELEASE)] = AssemblerState.IDLE

        super().__init__(AssemblerState.IDLE, transitions)

    @property
    def is_idle(self) -> bool:
        return self._state == AssemblerState.IDLE

    @property
    def is_awaiting(self) -> bool:
        return self._state == AssemblerState.AWAITING_RESPONSE
