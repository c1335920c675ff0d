"""Modbus exception codes."""

from enum import IntEnum


class ExceptionCode(IntEnum):
    """Modbus exception codes as defined by the Modbus application protocol.

    These codes are returned by the device (function code with the 0x80
    bit set) to indicate why a request could not be served.
    """

    ILLEGAL_FUNCTION = 0x01
    ILLEGAL_DATA_ADDRESS = 0x02
    ILLEGAL_DATA_VALUE = 0x03
    SLAVE_DEVICE_FAILURE = 0x04
    ACKNOWLEDGE = 0x05
    SLAVE_DEVICE_BUSY = 0x06
    MEMORY_PARITY_ERROR = 0x08
    GATEWAY_PATH_UNAVAILABLE = 0x0A
    GATEWAY_TARGET_NO_RESPONSE = 0x0B

    @classmethod
    def describe(cls, code: int) -> str:
        """Human-readable description for any exception code.

        Example:
            >>> ExceptionCode.describe(0x02)
            'Illegal data address'
            >>> ExceptionCode.describe(0x7F)
            'Unknown exception (0x7F)'
        """
        return _DESCRIPTIONS.get(code, f"Unknown exception (0x{code:02X})")


_DESCRIPTIONS = {
    ExceptionCode.ILLEGAL_FUNCTION: "Illegal function",
    ExceptionCode.ILLEGAL_DATA_ADDRESS: "Illegal data address",
    ExceptionCode.ILLEGAL_DATA_VALUE: "Illegal data value",
    ExceptionCode.SLAVE_DEVICE_FAILURE: "Slave device failure",
    ExceptionCode.ACKNOWLEDGE: "Acknowledge",
    ExceptionCode.SLAVE_DEVICE_BUSY: "Slave device busy",
    ExceptionCode.MEMORY_PARITY_ERROR: "Memory parity error",
    ExceptionCode.GATEWAY_PATH_UNAVAILABLE: "Gateway path unavailable",
    ExceptionCode.GATEWAY_TARGET_NO_RESPONSE: "Gateway target device failed to respond",
}
