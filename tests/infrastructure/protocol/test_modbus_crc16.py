"""Tests for ModbusCRC16 implementation."""

import pytest

from solis_modbus.infrastructure.protocol import ModbusCRC16
from solis_modbus.infrastructure.protocol.modbus_crc16 import _crc16


class TestModbusCRC16Calculation:
    """Test CRC-16 calculation correctness."""

    @pytest.mark.parametrize(
        "data,expected_crc",
        [
            (bytes([0x01, 0x03, 0x01, 0x00, 0x00, 0x01]), 0xF685),
            (bytes([0x01, 0x03, 0x01, 0x00, 0x00, 0x02]), 0xF7C5),
            (bytes([0x01, 0x06, 0x01, 0x00, 0x01, 0x2C]), 0x7B88),
        ],
    )
    def test_calculate_known_values(self, data, expected_crc):
        """Verify CRC against known good values."""
        assert ModbusCRC16().calculate(data) == expected_crc

    def test_calculate_empty_data(self):
        """Empty data yields the initial value."""
        assert ModbusCRC16().calculate(b"") == 0xFFFF

    def test_calculate_none_raises_error(self):
        with pytest.raises(ValueError, match="cannot be None"):
            ModbusCRC16().calculate(None)

    def test_calculate_accepts_mutable_buffers(self):
        """bytearray and memoryview give the same result as bytes."""
        crc = ModbusCRC16()
        data = bytes([0x01, 0x04, 0x81, 0x47, 0x00, 0x01])

        assert crc.calculate(bytearray(data)) == crc.calculate(data)
        assert crc.calculate(memoryview(data)) == crc.calculate(data)

    def test_calculate_returns_uint16(self):
        result = ModbusCRC16().calculate(b"\x01")
        assert 0 <= result <= 0xFFFF

    def test_repeated_calculation_uses_cache(self):
        """The poll cycle repeats the same headers, so results are cached."""
        crc = ModbusCRC16()
        data = bytes([0x01, 0x04, 0x81, 0x39, 0x00, 0x01])
        crc.calculate(data)
        hits_before = _crc16.cache_info().hits

        crc.calculate(data)

        assert _crc16.cache_info().hits == hits_before + 1


class TestModbusCRC16Validation:
    """Test CRC validation helper."""

    def test_validate_matching_crc(self):
        assert ModbusCRC16().validate(bytes([0x01, 0x03, 0x01, 0x00, 0x00, 0x01]), 0xF685)

    def test_validate_mismatching_crc(self):
        assert not ModbusCRC16().validate(
            bytes([0x01, 0x03, 0x01, 0x00, 0x00, 0x01]), 0x1234
        )
