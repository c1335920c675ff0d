"""Helpers for building raw Modbus RTU response frames in tests."""

import struct
from typing import Sequence

from solis_modbus.infrastructure.protocol import ModbusCRC16

_CRC = ModbusCRC16()


def with_crc(body: bytes) -> bytes:
    """Append the CRC16 trailer (low byte first) to ``body``."""
    return body + struct.pack("<H", _CRC.calculate(body))


def read_response(words: Sequence[int], slave_id: int = 1, function_code: int = 0x04) -> bytes:
    """Normal read response carrying ``words``."""
    body = struct.pack(
        f">BBB{len(words)}H", slave_id, function_code, 2 * len(words), *words
    )
    return with_crc(body)


def exception_response(code: int, slave_id: int = 1, function_code: int = 0x04) -> bytes:
    """Exception response for ``function_code``."""
    return with_crc(bytes([slave_id, function_code | 0x80, code]))
