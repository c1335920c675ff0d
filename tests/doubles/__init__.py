"""Test doubles for the solis_modbus engine."""

from .fake_transport import FakeTransport
from .frames import exception_response, read_response, with_crc

__all__ = ["FakeTransport", "exception_response", "read_response", "with_crc"]
