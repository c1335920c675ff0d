"""Modbus RTU protocol: CRC, frame codec and response assembly."""

from .modbus_crc16 import ModbusCRC16
from .modbus_rtu_protocol import ModbusRTUProtocol
from .response_assembler import FramingMode, ResponseAssembler

__all__ = [
    "FramingMode",
    "ModbusCRC16",
    "ModbusRTUProtocol",
    "ResponseAssembler",
]
