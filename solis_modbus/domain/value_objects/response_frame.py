"""ResponseFrame value object.

Represents a decoded, CRC-validated Modbus RTU read response.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ResponseFrame:
    """Immutable, validated Modbus read response.

    Only built after the CRC has been verified and the byte count
    matched the payload, so every field can be trusted. Exception
    responses never become a ResponseFrame.

    Attributes:
        slave_id: Responding slave address
        function_code: Function code echoed by the device
        registers: Register words in order, big-endian decoded
        crc: CRC-16 trailer as received

    Example:
        >>> frame = ResponseFrame(0x01, 0x04, (2450,), 0x0000)
        >>> frame.register_count
        1
    """

    slave_id: int
    function_code: int
    registers: Tuple[int, ...]
    crc: int

    @property
    def register_count(self) -> int:
        """Number of register words carried by the frame."""
        return len(self.registers)

    @property
    def byte_count(self) -> int:
        """Payload size in bytes."""
        return 2 * len(self.registers)

    def __str__(self) -> str:
        return (
            f"ResponseFrame(slave={self.slave_id}, func=0x{self.function_code:02X}, "
            f"registers={len(self.registers)})"
        )
