"""Tests for the RegisterMap entity and the packaged register table."""

import pytest

from solis_modbus.const import POLL_GROUPS
from solis_modbus.domain.entities import RegisterDefinition, RegisterMap


class TestPackagedRegisterTable:
    """The register table drives every read; it must match the device."""

    def test_eighteen_quantities(self, register_map):
        assert len(register_map) == 18

    def test_groups_in_poll_order(self, register_map):
        assert register_map.groups == list(POLL_GROUPS)

    @pytest.mark.parametrize(
        "group,count",
        [("status", 1), ("pv", 5), ("ac", 2), ("house", 2), ("grid", 4), ("battery", 4)],
    )
    def test_reads_per_group(self, register_map, group, count):
        assert len(register_map.group(group)) == count

    @pytest.mark.parametrize(
        "name,address,span,divisor,multiplier,signed",
        [
            ("inverter_status", 33095, 1, 1, 1, False),
            ("pv1_voltage", 33049, 1, 10, 1, False),
            ("pv1_current", 33050, 1, 10, 1, False),
            ("pv2_voltage", 33051, 1, 10, 1, False),
            ("pv2_current", 33052, 1, 10, 1, False),
            ("pv_total_power", 33057, 2, 1, 1, False),
            ("ac_total_power", 33079, 1, 100, 1000, False),
            ("inverter_temperature", 33093, 1, 10, 1, False),
            ("house_consumption", 33147, 1, 1, 1, False),
            ("backup_consumption", 33148, 1, 1, 1, False),
            ("grid_active_power", 33130, 2, 1, 1, True),
            ("inverter_ac_power", 33151, 2, 1, 1, True),
            ("grid_imported_energy", 33169, 2, 1000, 1, False),
            ("grid_exported_energy", 33173, 2, 1000, 1, False),
            ("battery_power", 33149, 2, 1, 1, True),
            ("battery_soc", 33139, 1, 1, 1, False),
            ("battery_voltage", 33133, 1, 10, 1, False),
            ("battery_current", 33134, 1, 10, 1, False),
        ],
    )
    def test_register_entry(
        self, register_map, name, address, span, divisor, multiplier, signed
    ):
        definition = register_map[name]
        assert (
            definition.address,
            definition.span,
            definition.divisor,
            definition.multiplier,
            definition.signed,
        ) == (address, span, divisor, multiplier, signed)

    def test_battery_group_order(self, register_map):
        assert [d.name for d in register_map.group("battery")] == [
            "battery_power",
            "battery_soc",
            "battery_voltage",
            "battery_current",
        ]


class TestRegisterMap:
    def _definitions(self):
        return [
            RegisterDefinition(name="a", group="pv", address=10),
            RegisterDefinition(name="b", group="ac", address=11),
            RegisterDefinition(name="c", group="pv", address=12, span=2),
        ]

    def test_lookup_by_name(self):
        register_map = RegisterMap(self._definitions())
        assert register_map["c"].address == 12
        assert "a" in register_map
        assert "z" not in register_map

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Unknown register"):
            RegisterMap(self._definitions())["z"]

    def test_group_keeps_table_order(self):
        register_map = RegisterMap(self._definitions())
        assert [d.name for d in register_map.group("pv")] == ["a", "c"]
        assert register_map.groups == ["pv", "ac"]
        assert register_map.group("battery") == []

    def test_iteration_order(self):
        assert [d.name for d in RegisterMap(self._definitions())] == ["a", "b", "c"]

    def test_duplicate_name_rejected(self):
        definitions = self._definitions() + [
            RegisterDefinition(name="a", group="pv", address=99)
        ]
        with pytest.raises(ValueError, match="Duplicate register name"):
            RegisterMap(definitions)

    def test_duplicate_address_rejected(self):
        definitions = self._definitions() + [
            RegisterDefinition(name="d", group="pv", address=10)
        ]
        with pytest.raises(ValueError, match="Duplicate register address"):
            RegisterMap(definitions)
