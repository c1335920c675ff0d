"""Tests for the RegisterDefinition entity."""

import dataclasses

import pytest

from solis_modbus.domain.entities import RegisterDefinition


class TestRegisterDefinitionValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"address": -1},
            {"address": 70000},
            {"address": 65535, "span": 2},
            {"span": 0},
            {"span": 3},
            {"divisor": 0},
            {"multiplier": -1},
        ],
    )
    def test_invalid_definitions(self, kwargs):
        fields = {"name": "x", "group": "pv", "address": 33049}
        fields.update(kwargs)
        with pytest.raises(ValueError):
            RegisterDefinition(**fields)

    def test_frozen(self):
        definition = RegisterDefinition(name="battery_soc", group="battery", address=33139)
        with pytest.raises(dataclasses.FrozenInstanceError):
            definition.address = 1

    def test_last_address(self):
        definition = RegisterDefinition(name="p", group="pv", address=33057, span=2)
        assert definition.last_address == 33058
        assert str(definition) == "p@33057"


class TestRegisterDefinitionDecode:
    def test_scaled_single_word(self):
        pv1_voltage = RegisterDefinition(
            name="pv1_voltage", group="pv", address=33049, divisor=10, unit="V"
        )
        assert pv1_voltage.decode([2450]) == 245.0

    def test_divisor_and_multiplier(self):
        ac_power = RegisterDefinition(
            name="ac_total_power", group="ac", address=33079, divisor=100, multiplier=1000
        )
        assert ac_power.decode([45]) == 450.0

    def test_signed_pair(self):
        battery = RegisterDefinition(
            name="battery_power", group="battery", address=33149, span=2, signed=True
        )
        assert battery.decode([0xFFFF, 0xFFFE]) == -2

    def test_word_count_must_match_span(self):
        battery = RegisterDefinition(
            name="battery_power", group="battery", address=33149, span=2, signed=True
        )
        with pytest.raises(ValueError):
            battery.decode([0x0384])


class TestRegisterDefinitionEncode:
    def test_signed_negative(self):
        battery = RegisterDefinition(
            name="battery_power", group="battery", address=33149, span=2, signed=True
        )
        assert battery.encode(-500) == (0xFFFF, 0xFE0C)
        assert battery.decode(battery.encode(-500)) == -500

    def test_scaled(self):
        voltage = RegisterDefinition(name="v", group="pv", address=1, divisor=10)
        assert voltage.encode(245.0) == (2450,)

    def test_unsigned_rejects_negative(self):
        soc = RegisterDefinition(name="battery_soc", group="battery", address=33139)
        with pytest.raises(ValueError):
            soc.encode(-1)

    def test_rejects_overflow(self):
        soc = RegisterDefinition(name="battery_soc", group="battery", address=33139)
        with pytest.raises(ValueError):
            soc.encode(70000)
