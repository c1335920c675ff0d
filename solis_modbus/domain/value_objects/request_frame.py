"""RequestFrame value object.

Represents one immutable Modbus RTU read request.
"""

import struct
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestFrame:
    """Immutable Modbus RTU read request.

    Frame layout:
        [Slave][Func][Addr_H][Addr_L][Qty_H][Qty_L][CRC_L][CRC_H]

    Range validation is done by the codec before construction; the frame
    only guards against values that cannot be packed at all.

    Attributes:
        slave_id: Modbus slave address (1-247)
        function_code: Read function code (0x04 for input registers)
        start_address: First register address (0-65535)
        quantity: Number of registers to read (1-125)
        crc: CRC-16 over the six header bytes

    Example:
        >>> frame = RequestFrame(0x01, 0x04, 33095, 1, crc=0x1234)
        >>> frame.to_bytes().hex()
        '0104814700013412'
    """

    slave_id: int
    function_code: int
    start_address: int
    quantity: int
    crc: int

    def __post_init__(self) -> None:
        for name, value, upper in (
            ("slave_id", self.slave_id, 0xFF),
            ("function_code", self.function_code, 0xFF),
            ("start_address", self.start_address, 0xFFFF),
            ("quantity", self.quantity, 0xFFFF),
            ("crc", self.crc, 0xFFFF),
        ):
            if not isinstance(value, int) or not 0 <= value <= upper:
                raise ValueError(f"{name} must be 0-{upper}, got {value!r}")

    @property
    def header(self) -> bytes:
        """The six bytes covered by the CRC."""
        return struct.pack(
            ">BBHH",
            self.slave_id,
            self.function_code,
            self.start_address,
            self.quantity,
        )

    @property
    def expected_response_length(self) -> int:
        """Byte length of a normal (non-exception) response."""
        return 5 + 2 * self.quantity

    def to_bytes(self) -> bytes:
        """Convert frame to raw bytes, CRC low byte first."""
        return self.header + struct.pack("<H", self.crc)

    def __str__(self) -> str:
        return (
            f"RequestFrame(slave={self.slave_id}, func=0x{self.function_code:02X}, "
            f"addr={self.start_address}, qty={self.quantity})"
        )
