"""Custom exceptions for the Solis Modbus telemetry engine.

This module defines domain-specific exceptions that represent expected
error conditions in the Modbus RTU protocol and serial communication.
Every exception derives from SolisModbusError so callers can catch the
whole family at one point.
"""

from typing import Any, Dict, Optional


class SolisModbusError(Exception):
    """Base class for all engine errors."""


class InverterConnectionError(SolisModbusError, ConnectionError):
    """Transport could not be opened or failed while in use.

    A connection failure is terminal for the session: the client has to
    be closed and opened again.
    """


class NotConnectedError(SolisModbusError):
    """Operation attempted without a live session."""


class ResponseTimeoutError(SolisModbusError, TimeoutError):
    """No complete frame arrived before the overall deadline."""


class RequestInProgressError(SolisModbusError):
    """A request was issued while another one is still outstanding.

    Modbus RTU is half-duplex with no transaction identifiers, so at
    most one request may be in flight per transport.
    """


class InvalidParameterError(SolisModbusError, ValueError):
    """Request field outside its valid range (slave id, quantity, ...)."""


class FrameError(SolisModbusError):
    """Received bytes could not be turned into a trusted response."""


class CrcMismatchError(FrameError):
    """CRC16 of the received frame does not match its trailer.

    Example:
        >>> raise CrcMismatchError(received=0x1234, calculated=0xF685)
    """

    def __init__(self, received: int, calculated: int):
        self.received = received
        self.calculated = calculated
        super().__init__(
            f"CRC mismatch: received=0x{received:04X}, calculated=0x{calculated:04X}"
        )


class ExceptionResponseError(FrameError):
    """Device answered with a Modbus exception response.

    Attributes:
        code: One-byte Modbus exception code
        function_code: Function code of the failed request (high bit cleared)
    """

    def __init__(self, code: int, function_code: int = 0, description: str = ""):
        self.code = code
        self.function_code = function_code
        self.description = description
        message = f"Device exception 0x{code:02X}"
        if description:
            message = f"{message}: {description}"
        if function_code:
            message = f"{message} (function 0x{function_code:02X})"
        super().__init__(message)


class MalformedFrameError(FrameError):
    """Frame is structurally invalid (short or garbled)."""


class ShortFrameError(MalformedFrameError):
    """Fewer bytes than the smallest valid response."""


class MalformedPayloadError(MalformedFrameError):
    """Byte-count field disagrees with the payload actually received."""


class SnapshotIncompleteError(SolisModbusError):
    """A full poll cycle stopped because one group failed.

    Groups read before the failing one are kept in ``partial`` so the
    caller can decide whether a partial snapshot is still useful.

    Attributes:
        group: Name of the group that failed
        partial: Group name -> snapshot for every group read successfully
    """

    def __init__(
        self,
        group: str,
        partial: Optional[Dict[str, Any]] = None,
        reason: str = "",
    ):
        self.group = group
        self.partial = dict(partial or {})
        message = f"Poll cycle failed in group '{group}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
