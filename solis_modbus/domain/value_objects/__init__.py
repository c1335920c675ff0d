"""Value Objects for the Solis Modbus domain.

Value Objects are immutable domain primitives that:
- Have no identity (equality based on value, not reference)
- Are immutable (cannot be changed after creation)
- Validate their invariants at construction
"""

from .exception_code import ExceptionCode
from .inverter_status import InverterStatus
from .request_frame import RequestFrame
from .response_frame import ResponseFrame
from .snapshots import (
    ACData,
    BatteryData,
    GridData,
    HouseData,
    InverterSnapshot,
    PVData,
    PVStringData,
)

__all__ = [
    "ExceptionCode",
    "InverterStatus",
    "RequestFrame",
    "ResponseFrame",
    "ACData",
    "BatteryData",
    "GridData",
    "HouseData",
    "InverterSnapshot",
    "PVData",
    "PVStringData",
]
