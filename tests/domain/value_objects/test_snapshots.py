"""Tests for telemetry snapshot value objects."""

from datetime import datetime, timezone

from solis_modbus.domain.value_objects import (
    ACData,
    BatteryData,
    GridData,
    HouseData,
    InverterSnapshot,
    InverterStatus,
    PVData,
    PVStringData,
)


def make_snapshot():
    return InverterSnapshot(
        status=InverterStatus.from_code(2),
        timestamp=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
        pv=PVData(
            pv1=PVStringData(voltage=390.0, current=5.8, power=2262.0),
            pv2=PVStringData(voltage=385.0, current=5.8, power=2233.0),
            total_power_dc=4500,
        ),
        ac=ACData(total_power_ac=4300.0, frequency=50, temperature=32.5),
        house=HouseData(consumption=800, backup_consumption=0),
        grid=GridData(
            active_power=3200,
            inverter_power=4275,
            imported_energy_total=1500.0,
            exported_energy_total=800.0,
        ),
        battery=BatteryData(power=-500, soc=85, voltage=49.0, current=10.2),
    )


class TestInverterSnapshot:
    def test_as_dict_nests_groups(self):
        data = make_snapshot().as_dict()

        assert data["status"] == {"code": 2, "text": "Normal"}
        assert data["pv"]["pv1"]["voltage"] == 390.0
        assert data["battery"]["soc"] == 85
        assert data["grid"]["active_power"] == 3200

    def test_as_dict_iso_timestamp(self):
        assert make_snapshot().as_dict()["timestamp"] == "2024-06-01T12:00:00+00:00"
