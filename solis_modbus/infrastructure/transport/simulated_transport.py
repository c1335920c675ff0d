"""Simulated inverter transport.

An in-process Modbus RTU slave that answers read requests from one of a
few canned power scenarios. Replies are properly framed and delivered in
small chunks on the event loop, so the whole stack above the transport
(assembler, codec, decoder) runs exactly as it does against the real
device.
"""

import asyncio
import logging
import struct
from typing import Dict, List, Mapping, Optional, Union

from ...const import (
    DEFAULT_SIMULATION_SCENARIO,
    DEFAULT_SLAVE_ID,
    EXCEPTION_FLAG,
    FUNC_READ_HOLDING,
    FUNC_READ_INPUT,
    SIMULATION_SCENARIOS,
)
from ...domain.entities import RegisterMap
from ...domain.exceptions import (
    InvalidParameterError,
    InverterConnectionError,
    NotConnectedError,
)
from ...domain.interfaces import DataHandler, ErrorHandler, ITransport
from ...domain.value_objects import ExceptionCode
from ..protocol.modbus_crc16 import ModbusCRC16

_LOGGER = logging.getLogger(__name__)

# Base figures per scenario: PV production, house load, grid exchange
# (positive = export), battery power (negative = charging), SOC.
SCENARIOS: Dict[str, Dict[str, int]] = {
    "full_power": {"pv": 5500, "house": 500, "grid": 5000, "battery": 0, "soc": 100},
    "high_power": {"pv": 4500, "house": 800, "grid": 3200, "battery": -500, "soc": 85},
    "medium_power": {"pv": 2200, "house": 1200, "grid": 600, "battery": -400, "soc": 65},
    "low_power": {"pv": 800, "house": 1100, "grid": -200, "battery": 100, "soc": 45},
    "no_power": {"pv": 0, "house": 500, "grid": -100, "battery": 400, "soc": 25},
}


def scenario_values(scenario: str) -> Dict[str, Union[int, float]]:
    """Physical values served for ``scenario``, keyed by quantity name.

    Raises:
        InvalidParameterError: If the scenario is unknown
    """
    try:
        base = SCENARIOS[scenario]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown simulation scenario {scenario!r} "
            f"(expected one of {', '.join(SCENARIOS)})"
        ) from None

    pv = base["pv"]
    inverter_power = int(pv * 0.95)
    return {
        "inverter_status": 2,
        "pv1_voltage": 390.0,
        "pv1_current": round(pv / 2 / 390, 1),
        "pv2_voltage": 385.0,
        "pv2_current": round(pv / 2 / 385, 1),
        "pv_total_power": pv,
        "ac_total_power": round(inverter_power, -2),
        "inverter_temperature": 32.5,
        "house_consumption": base["house"],
        "backup_consumption": 0,
        "grid_active_power": base["grid"],
        "inverter_ac_power": inverter_power,
        "grid_imported_energy": 1500.0,
        "grid_exported_energy": 800.0,
        "battery_power": base["battery"],
        "battery_soc": base["soc"],
        "battery_voltage": 49.0,
        "battery_current": round(abs(base["battery"]) / 49, 1),
    }


class SimulatedTransport(ITransport):
    """Transport backed by a simulated Solis slave.

    Attributes:
        sent_frames: Every frame written, in order
        scenario: Name of the active scenario

    Example:
        >>> transport = SimulatedTransport(register_map, scenario="low_power")
        >>> transport.set_data_handler(assembler.feed)
        >>> await transport.open("simulated")
    """

    def __init__(
        self,
        register_map: RegisterMap,
        scenario: str = DEFAULT_SIMULATION_SCENARIO,
        slave_id: int = DEFAULT_SLAVE_ID,
        chunk_size: int = 4,
        chunk_interval: float = 0.002,
        response_delay: float = 0.005,
    ):
        if chunk_size < 1:
            raise InvalidParameterError(f"Chunk size must be positive, got {chunk_size}")

        self._register_map = register_map
        self._slave_id = slave_id
        self._chunk_size = chunk_size
        self._chunk_interval = chunk_interval
        self._response_delay = response_delay
        self._crc = ModbusCRC16()
        self._registers: Dict[int, int] = {}
        self._pending: List[asyncio.TimerHandle] = []
        self._open = False
        self._data_handler: Optional[DataHandler] = None
        self._error_handler: Optional[ErrorHandler] = None

        self.sent_frames: List[bytes] = []
        self.scenario = scenario
        self.load_scenario(scenario)

    @property
    def is_open(self) -> bool:
        return self._open

    def set_data_handler(self, handler: Optional[DataHandler]) -> None:
        self._data_handler = handler

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        self._error_handler = handler

    def load_scenario(self, scenario: str) -> None:
        """Replace the register contents with the values of ``scenario``."""
        self.load_values(scenario_values(scenario))
        self.scenario = scenario

    def load_values(self, values: Mapping[str, Union[int, float]]) -> None:
        """Serve ``values`` (quantity name -> physical value)."""
        registers: Dict[int, int] = {}
        for definition in self._register_map:
            words = definition.encode(values.get(definition.name, 0))
            for offset, word in enumerate(words):
                registers[definition.address + offset] = word
        self._registers = registers

    def set_register(self, address: int, word: int) -> None:
        """Override a single raw register word."""
        self._registers[address] = word & 0xFFFF

    async def open(
        self,
        port: str,
        baudrate: int = 9600,
        bytesize: int = 8,
        stopbits: int = 1,
        parity: str = "none",
    ) -> None:
        self._open = True
        _LOGGER.info(
            "Simulated inverter ready on %s (scenario %s)", port, self.scenario
        )

    async def write(self, data: bytes) -> None:
        if not self._open:
            raise NotConnectedError("Simulated link is not open")

        frame = bytes(data)
        self.sent_frames.append(frame)
        response = self._respond(frame)
        if response is not None:
            self._schedule(response)

    async def close(self) -> None:
        if not self._open:
            return
        self._open = False
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        _LOGGER.info("Simulated inverter closed")

    def simulate_disconnect(self) -> None:
        """Drop the link as if the adapter had been unplugged."""
        self._open = False
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        if self._error_handler is not None:
            self._error_handler(InverterConnectionError("Simulated link lost"))

    def _respond(self, frame: bytes) -> Optional[bytes]:
        # A real slave stays silent on anything it cannot trust
        if len(frame) != 8:
            _LOGGER.debug("Simulator ignoring %d-byte frame", len(frame))
            return None
        if not self._crc.validate(frame[:-2], struct.unpack("<H", frame[-2:])[0]):
            _LOGGER.debug("Simulator ignoring frame with bad CRC")
            return None

        slave_id, function_code, start, quantity = struct.unpack(">BBHH", frame[:6])
        if slave_id != self._slave_id:
            return None

        if function_code not in (FUNC_READ_HOLDING, FUNC_READ_INPUT):
            return self._exception(function_code, ExceptionCode.ILLEGAL_FUNCTION)

        addresses = range(start, start + quantity)
        if any(address not in self._registers for address in addresses):
            return self._exception(function_code, ExceptionCode.ILLEGAL_DATA_ADDRESS)

        words = [self._registers[address] for address in addresses]
        body = struct.pack(
            f">BBB{quantity}H", slave_id, function_code, 2 * quantity, *words
        )
        return body + struct.pack("<H", self._crc.calculate(body))

    def _exception(self, function_code: int, code: int) -> bytes:
        body = bytes([self._slave_id, function_code | EXCEPTION_FLAG, code])
        return body + struct.pack("<H", self._crc.calculate(body))

    def _schedule(self, response: bytes) -> None:
        loop = asyncio.get_running_loop()
        self._pending = [h for h in self._pending if h.when() > loop.time()]
        for index in range(0, len(response), self._chunk_size):
            chunk = response[index : index + self._chunk_size]
            delay = self._response_delay + (index // self._chunk_size) * self._chunk_interval
            self._pending.append(loop.call_later(delay, self._deliver, chunk))

    def _deliver(self, chunk: bytes) -> None:
        if self._open and self._data_handler is not None:
            self._data_handler(chunk)
