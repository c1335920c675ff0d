"""Constants for the Solis Modbus RTU telemetry engine.

This file contains only the constants needed by the engine code.
Register definitions are stored in the YAML register table
(``config/registers.yaml``).
"""

from __future__ import annotations

# Modbus addressing
DEFAULT_SLAVE_ID = 1
MIN_SLAVE_ID = 1
MAX_SLAVE_ID = 247
MIN_READ_QUANTITY = 1
MAX_READ_QUANTITY = 125
MAX_REGISTER_ADDRESS = 0xFFFF

# Modbus function codes
FUNC_READ_COILS = 0x01
FUNC_READ_DISCRETE_INPUTS = 0x02
FUNC_READ_HOLDING = 0x03
FUNC_READ_INPUT = 0x04
READ_FUNCTION_CODES = (
    FUNC_READ_COILS,
    FUNC_READ_DISCRETE_INPUTS,
    FUNC_READ_HOLDING,
    FUNC_READ_INPUT,
)
EXCEPTION_FLAG = 0x80

# Frame layout
MIN_RESPONSE_LENGTH = 5  # slave + func + byte count/exception + CRC16
EXCEPTION_RESPONSE_LENGTH = 5
RESPONSE_HEADER_LENGTH = 3  # slave + func + byte count
CRC_LENGTH = 2

# Serial port settings
DEFAULT_PORT = "/dev/ttyUSB0"
DEFAULT_BAUD_RATE = 9600
DEFAULT_DATA_BITS = 8
DEFAULT_STOP_BITS = 1
DEFAULT_PARITY = "none"
PARITY_MAP = {
    "none": "N",
    "even": "E",
    "odd": "O",
    "mark": "M",
    "space": "S",
}

# Timing constants (in seconds)
DEFAULT_QUIET_WINDOW = 0.2  # Silence that marks end of frame when length unknown
DEFAULT_RESPONSE_TIMEOUT = 2.0  # Overall deadline per exchange
DEFAULT_COMMAND_DELAY = 0.2  # Device turnaround between exchanges
DEFAULT_RETRY_COUNT = 0
DEFAULT_RETRY_DELAY = 0.5
TRANSPORT_OPEN_TIMEOUT = 5.0

# Framing modes
FRAMING_LENGTH = "length"
FRAMING_QUIET_WINDOW = "quiet_window"

# Fixed grid frequency for this device/region (not read from a register)
DEFAULT_LINE_FREQUENCY = 50

# Register groups, in poll order
GROUP_STATUS = "status"
GROUP_PV = "pv"
GROUP_AC = "ac"
GROUP_HOUSE = "house"
GROUP_GRID = "grid"
GROUP_BATTERY = "battery"
POLL_GROUPS = (
    GROUP_STATUS,
    GROUP_PV,
    GROUP_AC,
    GROUP_HOUSE,
    GROUP_GRID,
    GROUP_BATTERY,
)

# Inverter status register values
INVERTER_STATUS_TEXT = {
    0: "Standby",
    1: "Checking",
    2: "Normal",
    3: "Fault",
    4: "Permanent Fault",
}
UNKNOWN_STATUS_TEXT = "Unknown"

# Simulation
DEFAULT_SIMULATION_SCENARIO = "high_power"
SIMULATION_SCENARIOS = (
    "full_power",
    "high_power",
    "medium_power",
    "low_power",
    "no_power",
)

# Configuration
STANDARD_BAUD_RATES = (1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200)
ENV_PREFIX = "SOLIS_"
REGISTER_TABLE_FILE = "registers.yaml"
