"""RegisterDecoder service.

Turns raw register words into physical values using the register
table's scaling and sign rules.
"""

import logging
from typing import Sequence, Union

from ...domain.entities import RegisterDefinition
from ...domain.exceptions import MalformedFrameError
from ...domain.helpers import process_register_value
from ...domain.value_objects import InverterStatus

_LOGGER = logging.getLogger(__name__)

Number = Union[int, float]


class RegisterDecoder:
    """Decode register words into physical quantities.

    Example:
        >>> decoder = RegisterDecoder()
        >>> decoder.decode(register_map["pv1_voltage"], [2450])
        245.0
        >>> decoder.decode(register_map["battery_power"], [0x0000, 0x0384])
        900
    """

    def __init__(self, precision: int = 3):
        self._precision = precision

    def decode(self, definition: RegisterDefinition, words: Sequence[int]) -> Number:
        """Decode the words read for ``definition``.

        An empty word list yields 0 with a warning. Any other word count
        that does not match the register span is a malformed response.

        Raises:
            MalformedFrameError: If the word count does not match the span
        """
        if not words:
            _LOGGER.warning(
                "No register data for %s (address %d), using 0",
                definition.name,
                definition.address,
            )
            return 0

        if len(words) != definition.span:
            raise MalformedFrameError(
                f"{definition.name}: expected {definition.span} register(s), "
                f"got {len(words)}"
            )

        return process_register_value(
            words,
            signed=definition.signed,
            divisor=definition.divisor,
            multiplier=definition.multiplier,
            precision=self._precision,
        )

    @staticmethod
    def decode_status(code: int) -> InverterStatus:
        """Map the raw status register to an InverterStatus."""
        status = InverterStatus.from_code(code)
        if status.is_fault:
            _LOGGER.warning("Inverter reports %s (code %d)", status.text, code)
        return status
