"""Configuration loading: connection settings and the register table.

Settings come from ``SOLIS_*`` environment variables, optionally
overridden by explicit values, and are validated with voluptuous. The
register table is a YAML file shipped with the package.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import voluptuous as vol
import yaml
from voluptuous.humanize import humanize_error

from .config.schema import REGISTER_TABLE_SCHEMA, SETTINGS_SCHEMA
from .const import ENV_PREFIX, REGISTER_TABLE_FILE
from .domain.entities import RegisterDefinition, RegisterMap
from .domain.exceptions import InvalidParameterError

_LOGGER = logging.getLogger(__name__)

DEFAULT_REGISTER_TABLE = Path(__file__).parent / "config" / REGISTER_TABLE_FILE

# Environment variable -> settings key
ENV_VARIABLES = {
    f"{ENV_PREFIX}PORT": "port",
    f"{ENV_PREFIX}BAUD_RATE": "baud_rate",
    f"{ENV_PREFIX}DATA_BITS": "data_bits",
    f"{ENV_PREFIX}STOP_BITS": "stop_bits",
    f"{ENV_PREFIX}PARITY": "parity",
    f"{ENV_PREFIX}SLAVE_ID": "slave_id",
    f"{ENV_PREFIX}RESPONSE_TIMEOUT": "response_timeout",
    f"{ENV_PREFIX}QUIET_WINDOW": "quiet_window",
    f"{ENV_PREFIX}COMMAND_DELAY": "command_delay",
    f"{ENV_PREFIX}RETRY_COUNT": "retry_count",
    f"{ENV_PREFIX}RETRY_DELAY": "retry_delay",
    f"{ENV_PREFIX}FRAMING_MODE": "framing_mode",
    f"{ENV_PREFIX}SIMULATE_DATA": "simulate",
    f"{ENV_PREFIX}SIMULATION_SCENARIO": "simulation_scenario",
}


@dataclass(frozen=True)
class ConnectionSettings:
    """Validated settings for one inverter session.

    Durations are in seconds.
    """

    port: str
    baud_rate: int
    data_bits: int
    stop_bits: int
    parity: str
    slave_id: int
    response_timeout: float
    quiet_window: float
    command_delay: float
    retry_count: int
    retry_delay: float
    framing_mode: str
    simulate: bool
    simulation_scenario: str


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConnectionSettings:
    """Build settings from the environment plus explicit overrides.

    Empty environment values are ignored. Overrides whose value is None
    are ignored too, so unset CLI-style options fall through to the
    environment and then to the defaults.

    Raises:
        InvalidParameterError: If any value fails validation
    """
    if environ is None:
        environ = os.environ

    raw = {
        key: environ[variable]
        for variable, key in ENV_VARIABLES.items()
        if environ.get(variable, "") != ""
    }
    raw.update({key: value for key, value in (overrides or {}).items() if value is not None})

    try:
        validated = SETTINGS_SCHEMA(raw)
    except vol.Invalid as err:
        raise InvalidParameterError(
            f"Invalid configuration: {humanize_error(raw, err)}"
        ) from err

    settings = ConnectionSettings(**validated)
    _LOGGER.debug("Loaded settings: %s", settings)
    return settings


def load_register_map(path: Optional[Union[str, Path]] = None) -> RegisterMap:
    """Load and validate the register table.

    Args:
        path: YAML file to load (defaults to the packaged table)

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidParameterError: If the table is malformed
    """
    table_file = Path(path) if path is not None else DEFAULT_REGISTER_TABLE
    if not table_file.exists():
        raise FileNotFoundError(f"Register table not found: {table_file}")

    try:
        content = yaml.safe_load(table_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise InvalidParameterError(f"Invalid YAML in {table_file}: {err}") from err

    if not content:
        raise InvalidParameterError(f"Register table {table_file} is empty")

    try:
        table = REGISTER_TABLE_SCHEMA(content)
    except vol.Invalid as err:
        raise InvalidParameterError(
            f"Invalid register table {table_file}: {humanize_error(content, err)}"
        ) from err

    try:
        register_map = RegisterMap(
            RegisterDefinition(**entry) for entry in table["registers"]
        )
    except ValueError as err:
        raise InvalidParameterError(f"Invalid register table {table_file}: {err}") from err

    _LOGGER.info(
        "Loaded register table %s (version %s): %d registers",
        table_file.name,
        table["version"],
        len(register_map),
    )
    return register_map
