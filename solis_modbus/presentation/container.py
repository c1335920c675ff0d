"""Dependency Injection Container.

Wires the engine's object graph in one place: infrastructure first,
then the application services that depend on it. Tests replace the
transport with a double and get the rest of the real graph.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..application.services import (
    ModbusExchangeService,
    PacingPolicy,
    RegisterDecoder,
    RetryPolicy,
)
from ..application.use_cases import PollSequencer
from ..config_loader import ConnectionSettings
from ..domain.entities import RegisterMap
from ..domain.interfaces import ITransport
from ..infrastructure.protocol import (
    FramingMode,
    ModbusCRC16,
    ModbusRTUProtocol,
    ResponseAssembler,
)
from ..infrastructure.transport import SerialTransport, SimulatedTransport

_LOGGER = logging.getLogger(__name__)


@dataclass
class DIContainer:
    """Dependency Injection Container.

    Attributes:
        settings: Validated connection settings
        register_map: Static register table

        # Infrastructure Layer
        crc: CRC calculation implementation
        protocol: Modbus RTU frame codec
        transport: Serial or simulated transport
        assembler: Response frame assembler

        # Application Layer
        pacing: Inter-request pacing policy
        retry: Retry policy
        exchange: Serialized request/response service
        decoder: Register decoder
        sequencer: Poll sequencer

    Example:
        >>> container = create_container(settings, register_map)
        >>> snapshot = await container.sequencer.get_all_data()
    """

    settings: ConnectionSettings
    register_map: RegisterMap

    # Infrastructure Layer
    crc: Optional[Any] = None  # ICRC
    protocol: Optional[Any] = None  # IProtocol
    transport: Optional[Any] = None  # ITransport
    assembler: Optional[Any] = None

    # Application Layer
    pacing: Optional[Any] = None
    retry: Optional[Any] = None
    exchange: Optional[Any] = None
    decoder: Optional[Any] = None
    sequencer: Optional[Any] = None


def create_container(
    settings: ConnectionSettings,
    register_map: RegisterMap,
    transport: Optional[ITransport] = None,
) -> DIContainer:
    """Create a fully-wired container.

    Args:
        settings: Connection settings
        register_map: Register table
        transport: Transport to use instead of the one selected by settings
    """
    container = DIContainer(settings=settings, register_map=register_map)

    # Infrastructure Layer
    container.crc = ModbusCRC16()
    container.protocol = ModbusRTUProtocol(container.crc)
    container.transport = transport or _create_transport(settings, register_map)
    container.assembler = ResponseAssembler(
        protocol=container.protocol,
        quiet_window=settings.quiet_window,
        deadline=settings.response_timeout,
        framing_mode=FramingMode(settings.framing_mode),
    )

    # Application Layer
    container.pacing = PacingPolicy(min_delay=settings.command_delay)
    container.retry = RetryPolicy(count=settings.retry_count, delay=settings.retry_delay)
    container.exchange = ModbusExchangeService(
        protocol=container.protocol,
        transport=container.transport,
        assembler=container.assembler,
        pacing=container.pacing,
        retry=container.retry,
        slave_id=settings.slave_id,
    )
    container.decoder = RegisterDecoder()
    container.sequencer = PollSequencer(
        exchange=container.exchange,
        register_map=register_map,
        decoder=container.decoder,
    )

    return container


def _create_transport(
    settings: ConnectionSettings, register_map: RegisterMap
) -> ITransport:
    if settings.simulate:
        _LOGGER.info(
            "Simulation enabled, using scenario %s", settings.simulation_scenario
        )
        return SimulatedTransport(
            register_map,
            scenario=settings.simulation_scenario,
            slave_id=settings.slave_id,
        )
    return SerialTransport()
