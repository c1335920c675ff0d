"""Tests for the session-scoped inverter client."""

import pytest

from solis_modbus import SolisInverterClient
from solis_modbus.config_loader import load_settings
from solis_modbus.domain.exceptions import InverterConnectionError, NotConnectedError
from solis_modbus.infrastructure.state_machines import ConnectionState
from tests.doubles import FakeTransport, read_response


@pytest.fixture
def simulated_settings():
    return load_settings(
        {
            "simulate": True,
            "response_timeout": 0.5,
            "command_delay": 0,
        },
        environ={},
    )


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager(self, simulated_settings, register_map):
        client = SolisInverterClient(simulated_settings, register_map)

        async with client:
            assert client.state == ConnectionState.CONNECTED
            battery = await client.get_battery_data()

        assert battery.soc == 85
        assert client.state == ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_full_snapshot(self, simulated_settings, register_map):
        async with SolisInverterClient(simulated_settings, register_map) as client:
            snapshot = await client.get_all_data()

        assert snapshot.status.code == 2
        assert snapshot.as_dict()["battery"]["power"] == -500

    @pytest.mark.asyncio
    async def test_open_passes_serial_settings(self, register_map):
        settings = load_settings(
            {"port": "/dev/ttyUSB3", "baud_rate": 19200, "parity": "even"},
            environ={},
        )
        transport = FakeTransport()
        client = SolisInverterClient(settings, register_map, transport)

        await client.open()
        await client.open()

        assert transport.open_calls == [
            {
                "port": "/dev/ttyUSB3",
                "baudrate": 19200,
                "bytesize": 8,
                "stopbits": 1,
                "parity": "even",
            }
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, fast_settings, register_map):
        transport = FakeTransport()
        client = SolisInverterClient(fast_settings, register_map, transport)

        await client.open()
        await client.close()
        await client.close()

        assert client.state == ConnectionState.DISCONNECTED
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_reads_require_open_session(self, fast_settings, register_map):
        client = SolisInverterClient(fast_settings, register_map, FakeTransport())

        with pytest.raises(NotConnectedError):
            await client.get_all_data()
        with pytest.raises(NotConnectedError):
            await client.read_registers(33139)


class TestFailures:
    @pytest.mark.asyncio
    async def test_open_failure(self, fast_settings, register_map):
        transport = FakeTransport(fail_open=InverterConnectionError("no such port"))
        client = SolisInverterClient(fast_settings, register_map, transport)

        with pytest.raises(InverterConnectionError):
            await client.open()

        assert client.state == ConnectionState.FAILED
        assert transport.close_calls == 1

    @pytest.mark.asyncio
    async def test_lost_connection_needs_close_before_reopen(
        self, fast_settings, register_map
    ):
        transport = FakeTransport()
        client = SolisInverterClient(fast_settings, register_map, transport)
        await client.open()

        transport.lose_connection()

        assert client.state == ConnectionState.FAILED
        with pytest.raises(NotConnectedError):
            await client.get_status()
        with pytest.raises(InverterConnectionError):
            await client.open()

        await client.close()
        await client.open()

        assert client.is_connected
        await client.close()

    @pytest.mark.asyncio
    async def test_write_failure_ends_session(self, fast_settings, register_map):
        transport = FakeTransport()
        client = SolisInverterClient(fast_settings, register_map, transport)
        await client.open()
        transport.queue_reply(InverterConnectionError("adapter unplugged"))

        with pytest.raises(InverterConnectionError):
            await client.get_status()

        assert client.state == ConnectionState.FAILED
        with pytest.raises(NotConnectedError):
            await client.get_status()
        await client.close()
        assert client.state == ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_raw_register_read(self, fast_settings, register_map):
        transport = FakeTransport()
        transport.queue_reply(read_response([0x0000, 0x0384]))

        async with SolisInverterClient(fast_settings, register_map, transport) as client:
            assert await client.read_registers(33149, 2) == (0x0000, 0x0384)

    @pytest.mark.asyncio
    async def test_connection_check_on_silent_inverter(
        self, fast_settings, register_map
    ):
        async with SolisInverterClient(
            fast_settings, register_map, FakeTransport()
        ) as client:
            assert await client.test_connection() is False
