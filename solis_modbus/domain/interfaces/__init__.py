"""Domain interfaces for the Solis Modbus engine.

This module defines the contracts (interfaces) that infrastructure
implementations must fulfill, so the serial link can be swapped for a
simulated one without touching protocol or polling logic.
"""

from .i_crc import ICRC
from .i_protocol import IProtocol
from .i_transport import DataHandler, ErrorHandler, ITransport

__all__ = [
    "ICRC",
    "IProtocol",
    "ITransport",
    "DataHandler",
    "ErrorHandler",
]
