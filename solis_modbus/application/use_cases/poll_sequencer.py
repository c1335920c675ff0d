"""PollSequencer use case.

Reads the register groups of the inverter one quantity at a time, in
register table order, and assembles the typed snapshots. Every read goes
through the exchange service, which enforces serialization, pacing and
retry.

A full cycle issues 18 reads:
    status 1, pv 5, ac 2, house 2, grid 4, battery 4
"""

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ...const import (
    DEFAULT_LINE_FREQUENCY,
    GROUP_AC,
    GROUP_BATTERY,
    GROUP_GRID,
    GROUP_HOUSE,
    GROUP_PV,
    GROUP_STATUS,
)
from ...domain.entities import RegisterDefinition, RegisterMap
from ...domain.exceptions import SnapshotIncompleteError, SolisModbusError
from ...domain.helpers import apply_precision
from ...domain.value_objects import (
    ACData,
    BatteryData,
    GridData,
    HouseData,
    InverterSnapshot,
    InverterStatus,
    PVData,
    PVStringData,
)
from ..services import ModbusExchangeService, RegisterDecoder

_LOGGER = logging.getLogger(__name__)

Number = Union[int, float]


class PollSequencer:
    """Sequence the per-group reads and build snapshots.

    Example:
        >>> sequencer = PollSequencer(exchange, register_map)
        >>> battery = await sequencer.get_battery_data()
        >>> battery.soc
        85
        >>> snapshot = await sequencer.get_all_data()
    """

    def __init__(
        self,
        exchange: ModbusExchangeService,
        register_map: RegisterMap,
        decoder: Optional[RegisterDecoder] = None,
    ):
        self._exchange = exchange
        self._register_map = register_map
        self._decoder = decoder or RegisterDecoder()

    async def read_quantity(self, definition: RegisterDefinition) -> Number:
        """Read and decode a single quantity."""
        words = await self._exchange.read_input_registers(
            definition.address, definition.span
        )
        return self._decoder.decode(definition, words)

    async def read_group(self, group: str) -> Dict[str, Number]:
        """Read every quantity of ``group``, in table order."""
        definitions = self._register_map.group(group)
        if not definitions:
            raise KeyError(f"Register map has no group {group!r}")

        values: Dict[str, Number] = {}
        for definition in definitions:
            values[definition.name] = await self.read_quantity(definition)

        _LOGGER.debug("Group %s: %s", group, values)
        return values

    async def get_status(self) -> InverterStatus:
        values = await self.read_group(GROUP_STATUS)
        return self._decoder.decode_status(int(values["inverter_status"]))

    async def get_pv_data(self) -> PVData:
        values = await self.read_group(GROUP_PV)
        return PVData(
            pv1=self._pv_string(values["pv1_voltage"], values["pv1_current"]),
            pv2=self._pv_string(values["pv2_voltage"], values["pv2_current"]),
            total_power_dc=values["pv_total_power"],
        )

    async def get_ac_data(self) -> ACData:
        values = await self.read_group(GROUP_AC)
        return ACData(
            total_power_ac=values["ac_total_power"],
            frequency=DEFAULT_LINE_FREQUENCY,
            temperature=values["inverter_temperature"],
        )

    async def get_house_data(self) -> HouseData:
        values = await self.read_group(GROUP_HOUSE)
        return HouseData(
            consumption=values["house_consumption"],
            backup_consumption=values["backup_consumption"],
        )

    async def get_grid_data(self) -> GridData:
        values = await self.read_group(GROUP_GRID)
        return GridData(
            active_power=values["grid_active_power"],
            inverter_power=values["inverter_ac_power"],
            imported_energy_total=values["grid_imported_energy"],
            exported_energy_total=values["grid_exported_energy"],
        )

    async def get_battery_data(self) -> BatteryData:
        values = await self.read_group(GROUP_BATTERY)
        return BatteryData(
            power=values["battery_power"],
            soc=values["battery_soc"],
            voltage=values["battery_voltage"],
            current=values["battery_current"],
        )

    async def get_all_data(self) -> InverterSnapshot:
        """Read every group and build a full snapshot.

        Groups are read in order. The first failing group stops the
        cycle; the groups read so far are attached to the error.

        Raises:
            SnapshotIncompleteError: If any group fails
        """
        readers: List[Tuple[str, Callable[[], Awaitable[Any]]]] = [
            (GROUP_STATUS, self.get_status),
            (GROUP_PV, self.get_pv_data),
            (GROUP_AC, self.get_ac_data),
            (GROUP_HOUSE, self.get_house_data),
            (GROUP_GRID, self.get_grid_data),
            (GROUP_BATTERY, self.get_battery_data),
        ]

        partial: Dict[str, Any] = {}
        for group, reader in readers:
            try:
                partial[group] = await reader()
            except SolisModbusError as err:
                _LOGGER.warning(
                    "Poll cycle stopped at group %s after %d group(s): %s",
                    group,
                    len(partial),
                    err,
                )
                raise SnapshotIncompleteError(group, partial, reason=str(err)) from err

        return InverterSnapshot(
            timestamp=datetime.now(timezone.utc),
            **partial,
        )

    async def test_connection(self) -> bool:
        """Check that the inverter answers a status read."""
        try:
            status = await self.get_status()
        except SolisModbusError as err:
            _LOGGER.warning("Inverter connection test failed: %s", err)
            return False

        _LOGGER.info("Inverter connection test passed (status: %s)", status.text)
        return True

    @staticmethod
    def _pv_string(voltage: Number, current: Number) -> PVStringData:
        return PVStringData(
            voltage=voltage,
            current=current,
            power=apply_precision(voltage * current),
        )
