"""Typed telemetry snapshots produced by the poll sequencer.

Each register group decodes into one immutable dataclass. Power values
are in W, energy totals in kWh, voltages in V, currents in A and
temperatures in degrees Celsius.

Sign conventions:
    GridData.active_power: positive = export to grid, negative = import
    GridData.inverter_power: positive = inverter feeding the grid
    BatteryData.power: positive = discharging, negative = charging
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Union

from .inverter_status import InverterStatus

Number = Union[int, float]


@dataclass(frozen=True)
class PVStringData:
    """One photovoltaic string (MPPT input)."""

    voltage: float
    current: float
    power: float


@dataclass(frozen=True)
class PVData:
    """Solar input: two strings plus the DC total reported by the inverter."""

    pv1: PVStringData
    pv2: PVStringData
    total_power_dc: Number


@dataclass(frozen=True)
class ACData:
    """Inverter AC output."""

    total_power_ac: Number
    frequency: Number
    temperature: float


@dataclass(frozen=True)
class HouseData:
    """Household consumption."""

    consumption: Number
    backup_consumption: Number


@dataclass(frozen=True)
class GridData:
    """Grid meter readings."""

    active_power: Number
    inverter_power: Number
    imported_energy_total: float
    exported_energy_total: float


@dataclass(frozen=True)
class BatteryData:
    """Battery state."""

    power: Number
    soc: Number
    voltage: float
    current: float


@dataclass(frozen=True)
class InverterSnapshot:
    """Result of one full poll cycle, immutable once produced."""

    status: InverterStatus
    timestamp: datetime
    pv: PVData
    ac: ACData
    house: HouseData
    grid: GridData
    battery: BatteryData

    def as_dict(self) -> Dict[str, Any]:
        """Plain-dict form with an ISO-8601 timestamp.

        Example:
            >>> snapshot.as_dict()["battery"]["soc"]
            85
        """
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data
