"""State machines for explicit lifecycle management."""

from .assembler_state_machine import (
    AssemblerEvent,
    AssemblerState,
    AssemblerStateMachine,
)
from .base_state_machine import TableStateMachine
from .connection_state_machine import (
    ConnectionEvent,
    ConnectionState,
    ConnectionStateMachine,
)

__all__ = [
    "AssemblerEvent",
    "AssemblerState",
    "AssemblerStateMachine",
    "ConnectionEvent",
    "ConnectionState",
    "ConnectionStateMachine",
    "TableStateMachine",
]
