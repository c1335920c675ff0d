"""Modbus RTU telemetry engine for Solis hybrid inverters.

Example:
    >>> from solis_modbus import SolisInverterClient, load_settings
    >>> async with SolisInverterClient(load_settings()) as client:
    ...     snapshot = await client.get_all_data()
"""

from .config_loader import ConnectionSettings, load_register_map, load_settings
from .domain.exceptions import (
    CrcMismatchError,
    ExceptionResponseError,
    FrameError,
    InvalidParameterError,
    InverterConnectionError,
    MalformedFrameError,
    MalformedPayloadError,
    NotConnectedError,
    RequestInProgressError,
    ResponseTimeoutError,
    ShortFrameError,
    SnapshotIncompleteError,
    SolisModbusError,
)
from .domain.value_objects import InverterSnapshot, InverterStatus
from .presentation import SolisInverterClient

__version__ = "1.0.0"

__all__ = [
    "ConnectionSettings",
    "CrcMismatchError",
    "ExceptionResponseError",
    "FrameError",
    "InvalidParameterError",
    "InverterConnectionError",
    "InverterSnapshot",
    "InverterStatus",
    "MalformedFrameError",
    "MalformedPayloadError",
    "NotConnectedError",
    "RequestInProgressError",
    "ResponseTimeoutError",
    "ShortFrameError",
    "SnapshotIncompleteError",
    "SolisInverterClient",
    "SolisModbusError",
    "load_register_map",
    "load_settings",
]
