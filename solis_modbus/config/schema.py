"""Voluptuous schemas for connection settings and the register table."""

import voluptuous as vol

from ..const import (
    DEFAULT_BAUD_RATE,
    DEFAULT_COMMAND_DELAY,
    DEFAULT_DATA_BITS,
    DEFAULT_PARITY,
    DEFAULT_PORT,
    DEFAULT_QUIET_WINDOW,
    DEFAULT_RESPONSE_TIMEOUT,
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    DEFAULT_SIMULATION_SCENARIO,
    DEFAULT_SLAVE_ID,
    DEFAULT_STOP_BITS,
    FRAMING_LENGTH,
    FRAMING_QUIET_WINDOW,
    MAX_REGISTER_ADDRESS,
    MAX_SLAVE_ID,
    MIN_SLAVE_ID,
    PARITY_MAP,
    POLL_GROUPS,
    SIMULATION_SCENARIOS,
    STANDARD_BAUD_RATES,
)

# Durations are seconds; the upper bounds catch values given in milliseconds
_DURATION = vol.All(vol.Coerce(float), vol.Range(min=0, max=60))
_POSITIVE_DURATION = vol.All(
    vol.Coerce(float), vol.Range(min=0, max=60, min_included=False)
)

SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional("port", default=DEFAULT_PORT): vol.All(str, vol.Length(min=1)),
        vol.Optional("baud_rate", default=DEFAULT_BAUD_RATE): vol.All(
            vol.Coerce(int), vol.In(STANDARD_BAUD_RATES)
        ),
        vol.Optional("data_bits", default=DEFAULT_DATA_BITS): vol.All(
            vol.Coerce(int), vol.In((5, 6, 7, 8))
        ),
        vol.Optional("stop_bits", default=DEFAULT_STOP_BITS): vol.All(
            vol.Coerce(int), vol.In((1, 2))
        ),
        vol.Optional("parity", default=DEFAULT_PARITY): vol.All(
            str, vol.Lower, vol.In(tuple(PARITY_MAP))
        ),
        vol.Optional("slave_id", default=DEFAULT_SLAVE_ID): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_SLAVE_ID, max=MAX_SLAVE_ID)
        ),
        vol.Optional(
            "response_timeout", default=DEFAULT_RESPONSE_TIMEOUT
        ): _POSITIVE_DURATION,
        vol.Optional("quiet_window", default=DEFAULT_QUIET_WINDOW): _POSITIVE_DURATION,
        vol.Optional("command_delay", default=DEFAULT_COMMAND_DELAY): _DURATION,
        vol.Optional("retry_count", default=DEFAULT_RETRY_COUNT): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=10)
        ),
        vol.Optional("retry_delay", default=DEFAULT_RETRY_DELAY): _DURATION,
        vol.Optional("framing_mode", default=FRAMING_LENGTH): vol.All(
            str, vol.Lower, vol.In((FRAMING_LENGTH, FRAMING_QUIET_WINDOW))
        ),
        vol.Optional("simulate", default=False): vol.Boolean(),
        vol.Optional(
            "simulation_scenario", default=DEFAULT_SIMULATION_SCENARIO
        ): vol.All(str, vol.Lower, vol.In(SIMULATION_SCENARIOS)),
    }
)

REGISTER_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(str, vol.Length(min=1)),
        vol.Required("group"): vol.In(POLL_GROUPS),
        vol.Required("address"): vol.All(
            int, vol.Range(min=0, max=MAX_REGISTER_ADDRESS)
        ),
        vol.Optional("span", default=1): vol.In((1, 2)),
        vol.Optional("divisor", default=1): vol.All(int, vol.Range(min=1)),
        vol.Optional("multiplier", default=1): vol.All(int, vol.Range(min=1)),
        vol.Optional("signed", default=False): bool,
        vol.Optional("unit", default=""): str,
        vol.Optional("description", default=""): str,
    }
)

REGISTER_TABLE_SCHEMA = vol.Schema(
    {
        vol.Required("version"): vol.Coerce(str),
        vol.Optional("device", default=""): str,
        vol.Required("registers"): vol.All([REGISTER_SCHEMA], vol.Length(min=1)),
    }
)
