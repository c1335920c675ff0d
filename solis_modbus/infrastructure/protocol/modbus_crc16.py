"""Modbus CRC-16 implementation.

This module implements the CRC-16 checksum used by Modbus RTU framing:
polynomial 0xA001 (reflected 0x8005), initial value 0xFFFF, transmitted
low byte first.

The poll cycle sends the same 18 request headers over and over, so
results are cached with ``functools.lru_cache``.
"""

from functools import lru_cache
from typing import Union

from ...domain.interfaces import ICRC


@lru_cache(maxsize=128)
def _crc16(data: bytes) -> int:
    """Bitwise CRC-16/MODBUS over ``data``."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


class ModbusCRC16(ICRC):
    """Modbus CRC-16 checksum calculator.

    Example:
        >>> crc = ModbusCRC16()
        >>> hex(crc.calculate(bytes.fromhex("010300000001")))
        '0xa84'
    """

    def calculate(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """Calculate the CRC-16 of ``data``.

        Empty data is valid and yields the initial value 0xFFFF.

        Raises:
            ValueError: If data is None
        """
        if data is None:
            raise ValueError("Data cannot be None")
        # Mutable buffers are not hashable
        if not isinstance(data, bytes):
            data = bytes(data)
        return _crc16(data)
