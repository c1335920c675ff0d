"""Transport implementations: RS485 serial and an in-process simulator."""

from .serial_transport import SerialTransport
from .simulated_transport import SCENARIOS, SimulatedTransport, scenario_values

__all__ = [
    "SCENARIOS",
    "SerialTransport",
    "SimulatedTransport",
    "scenario_values",
]
