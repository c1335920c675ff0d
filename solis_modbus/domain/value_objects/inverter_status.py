"""InverterStatus value object."""

from dataclasses import dataclass

from ...const import INVERTER_STATUS_TEXT, UNKNOWN_STATUS_TEXT


@dataclass(frozen=True)
class InverterStatus:
    """Operating state reported by the status register.

    Example:
        >>> InverterStatus.from_code(2)
        InverterStatus(code=2, text='Normal')
        >>> InverterStatus.from_code(99).text
        'Unknown'
    """

    code: int
    text: str

    @classmethod
    def from_code(cls, code: int) -> "InverterStatus":
        """Map a raw status register value to its text."""
        return cls(code=code, text=INVERTER_STATUS_TEXT.get(code, UNKNOWN_STATUS_TEXT))

    @property
    def is_fault(self) -> bool:
        """True for Fault and Permanent Fault."""
        return self.code in (3, 4)
