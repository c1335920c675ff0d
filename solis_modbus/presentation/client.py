"""SolisInverterClient: scoped session over the telemetry engine.

The client owns the transport for the lifetime of a session. Use it as
an async context manager so the port is released on every exit path:

    async with SolisInverterClient(load_settings()) as client:
        snapshot = await client.get_all_data()
"""

import logging
from typing import Optional, Tuple

from ..config_loader import ConnectionSettings, load_register_map, load_settings
from ..domain.entities import RegisterMap
from ..domain.exceptions import InverterConnectionError
from ..domain.interfaces import ITransport
from ..domain.value_objects import (
    ACData,
    BatteryData,
    GridData,
    HouseData,
    InverterSnapshot,
    InverterStatus,
    PVData,
)
from ..infrastructure.decorators import require_connection
from ..infrastructure.state_machines import (
    ConnectionEvent,
    ConnectionState,
    ConnectionStateMachine,
)
from .container import DIContainer, create_container

_LOGGER = logging.getLogger(__name__)


class SolisInverterClient:
    """Session-scoped client for one inverter.

    A lost transport moves the session to FAILED; it has to be closed
    before it can be opened again.

    Example:
        >>> client = SolisInverterClient(load_settings({"simulate": True}))
        >>> async with client:
        ...     battery = await client.get_battery_data()
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        register_map: Optional[RegisterMap] = None,
        transport: Optional[ITransport] = None,
    ):
        self._settings = settings or load_settings()
        self._register_map = register_map or load_register_map()
        self._container: DIContainer = create_container(
            self._settings, self._register_map, transport
        )
        self._connection = ConnectionStateMachine()
        self._container.exchange.set_connection_lost_callback(self._on_connection_lost)

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    @property
    def register_map(self) -> RegisterMap:
        return self._register_map

    @property
    def container(self) -> DIContainer:
        return self._container

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    async def open(self) -> None:
        """Open the transport and wait until it is ready.

        Raises:
            InverterConnectionError: If the port cannot be opened, or the
                session failed earlier and was not closed
        """
        if self._connection.is_connected:
            return
        if self._connection.is_failed:
            raise InverterConnectionError(
                "Session failed; close it before opening again"
            )

        settings = self._settings
        self._connection.transition(ConnectionEvent.CONNECT)
        try:
            await self._container.transport.open(
                settings.port,
                baudrate=settings.baud_rate,
                bytesize=settings.data_bits,
                stopbits=settings.stop_bits,
                parity=settings.parity,
            )
        except Exception as err:
            self._connection.transition(ConnectionEvent.CONNECT_FAILED)
            _LOGGER.error("Failed to open %s: %s", settings.port, err)
            await self._container.transport.close()
            raise

        self._container.pacing.reset()
        self._connection.transition(ConnectionEvent.CONNECT_SUCCESS)
        _LOGGER.info("Connected to inverter on %s", settings.port)

    async def close(self) -> None:
        """Release the transport. Safe to call any number of times."""
        await self._container.transport.close()
        if self._connection.transition(ConnectionEvent.DISCONNECT):
            _LOGGER.info("Disconnected from inverter on %s", self._settings.port)

    async def __aenter__(self) -> "SolisInverterClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @require_connection
    async def read_registers(self, start_address: int, quantity: int = 1) -> Tuple[int, ...]:
        """Read raw input registers."""
        return await self._container.exchange.read_input_registers(
            start_address, quantity
        )

    @require_connection
    async def get_status(self) -> InverterStatus:
        return await self._container.sequencer.get_status()

    @require_connection
    async def get_pv_data(self) -> PVData:
        return await self._container.sequencer.get_pv_data()

    @require_connection
    async def get_ac_data(self) -> ACData:
        return await self._container.sequencer.get_ac_data()

    @require_connection
    async def get_house_data(self) -> HouseData:
        return await self._container.sequencer.get_house_data()

    @require_connection
    async def get_grid_data(self) -> GridData:
        return await self._container.sequencer.get_grid_data()

    @require_connection
    async def get_battery_data(self) -> BatteryData:
        return await self._container.sequencer.get_battery_data()

    @require_connection
    async def get_all_data(self) -> InverterSnapshot:
        return await self._container.sequencer.get_all_data()

    @require_connection
    async def test_connection(self) -> bool:
        return await self._container.sequencer.test_connection()

    def _on_connection_lost(self, error: Exception) -> None:
        if self._connection.transition(ConnectionEvent.CONNECTION_LOST):
            _LOGGER.error("Connection to inverter lost: %s", error)
