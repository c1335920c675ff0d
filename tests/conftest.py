"""Pytest configuration and fixtures for solis_modbus tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to Python path so we can import solis_modbus
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from solis_modbus.config_loader import load_register_map, load_settings
from solis_modbus.infrastructure.protocol import ModbusCRC16, ModbusRTUProtocol


@pytest.fixture
def register_map():
    """The packaged register table."""
    return load_register_map()


@pytest.fixture
def protocol():
    """Frame codec with the real CRC."""
    return ModbusRTUProtocol(ModbusCRC16())


@pytest.fixture
def fast_settings():
    """Settings with short timings so exchanges complete quickly."""
    return load_settings(
        {
            "port": "/dev/ttyTEST0",
            "response_timeout": 0.2,
            "quiet_window": 0.02,
            "command_delay": 0,
            "retry_count": 0,
            "retry_delay": 0,
        },
        environ={},
    )
