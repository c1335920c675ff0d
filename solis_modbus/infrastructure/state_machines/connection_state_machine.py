"""Connection state machine for the serial session lifecycle."""

from enum import Enum, auto

from .base_state_machine import TableStateMachine


class ConnectionState(Enum):
    """Connection states."""

    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    FAILED = auto()


class ConnectionEvent(Enum):
    """Connection events that trigger state transitions."""

    CONNECT = auto()
    CONNECT_SUCCESS = auto()
    CONNECT_FAILED = auto()
    DISCONNECT = auto()
    CONNECTION_LOST = auto()


class ConnectionStateMachine(TableStateMachine[ConnectionState, ConnectionEvent]):
    """State machine for the client session.

    Valid transitions:
        DISCONNECTED -> CONNECTING (on CONNECT)
        CONNECTING -> CONNECTED (on CONNECT_SUCCESS)
        CONNECTING -> FAILED (on CONNECT_FAILED)
        CONNECTED -> DISCONNECTED (on DISCONNECT)
        CONNECTED -> FAILED (on CONNECTION_LOST)
        FAILED -> DISCONNECTED (on DISCONNECT)

    There is no automatic reconnect: FAILED only leaves through an
    explicit close.

    Example:
        >>> sm = ConnectionStateMachine()
        >>> sm.transition(ConnectionEvent.CONNECT)
        True
        >>> sm.transition(ConnectionEvent.CONNECT_SUCCESS)
        True
        >>> sm.is_connected
        True
    """

    name = "ConnectionStateMachine"

    def __init__(self):
        super().__init__(
            ConnectionState.DISCONNECTED,
            {
                (
                    ConnectionState.DISCONNECTED,
                    ConnectionEvent.CONNECT,
                ): ConnectionState.CONNECTING,
                (
                    ConnectionState.CONNECTING,
                    ConnectionEvent.CONNECT_SUCCESS,
                ): ConnectionState.CONNECTED,
                (
                    ConnectionState.CONNECTING,
                    ConnectionEvent.CONNECT_FAILED,
                ): ConnectionState.FAILED,
                (
                    ConnectionState.CONNECTED,
                    ConnectionEvent.DISCONNECT,
                ): ConnectionState.DISCONNECTED,
                (
                    ConnectionState.CONNECTED,
                    ConnectionEvent.CONNECTION_LOST,
                ): ConnectionState.FAILED,
                (
                    ConnectionState.FAILED,
                    ConnectionEvent.DISCONNECT,
                ): ConnectionState.DISCONNECTED,
            },
        )

    @property
    def is_connected(self) -> bool:
        """Check if currently connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def is_failed(self) -> bool:
        return self._state == ConnectionState.FAILED

    @property
    def can_connect(self) -> bool:
        """Check if a connection can be initiated."""
        return self._state == ConnectionState.DISCONNECTED
