"""RegisterDefinition entity.

A RegisterDefinition describes one logical quantity of the device:
where it lives, how many words it spans and how its raw value turns
into a physical value. Definitions are loaded from the static register
table and never derived at runtime.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from ..helpers.transformations import process_register_value


@dataclass(frozen=True)
class RegisterDefinition:
    """Static description of one device quantity.

    Attributes:
        name: Unique quantity name (e.g. "battery_power")
        group: Poll group the quantity belongs to (e.g. "battery")
        address: First register address
        span: Number of consecutive registers (1 or 2, high word first)
        divisor: Raw value is divided by this (1, 10, 100, 1000)
        multiplier: Applied after the divisor (AC power uses 1000)
        signed: Interpret the composed value as two's complement
        unit: Unit of measurement (e.g. "V", "A", "W", "kWh")
        description: Human-readable description

    Example:
        >>> pv1_voltage = RegisterDefinition(
        ...     name="pv1_voltage", group="pv", address=33049, divisor=10, unit="V"
        ... )
        >>> pv1_voltage.decode([2450])
        245.0
    """

    name: str
    group: str
    address: int
    span: int = 1
    divisor: int = 1
    multiplier: int = 1
    signed: bool = False
    unit: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFFFF:
            raise ValueError(f"Register address must be 0-65535, got {self.address}")
        if self.span not in (1, 2):
            raise ValueError(f"Register span must be 1 or 2, got {self.span}")
        if self.address + self.span - 1 > 0xFFFF:
            raise ValueError(
                f"Register {self.name} spans past 0xFFFF (address={self.address})"
            )
        if self.divisor <= 0 or self.multiplier <= 0:
            raise ValueError(
                f"Register {self.name}: divisor and multiplier must be positive"
            )

    @property
    def last_address(self) -> int:
        """Address of the last register covered by this quantity."""
        return self.address + self.span - 1

    def decode(self, words: Sequence[int]) -> Union[int, float]:
        """Decode exactly ``span`` words into the physical value.

        Raises:
            ValueError: If the word count does not match the span
        """
        if len(words) != self.span:
            raise ValueError(
                f"Register {self.name} expects {self.span} word(s), got {len(words)}"
            )
        return process_register_value(
            words,
            signed=self.signed,
            divisor=self.divisor,
            multiplier=self.multiplier,
        )

    def encode(self, value: Union[int, float]) -> Tuple[int, ...]:
        """Convert a physical value back into register words, high word first.

        Raises:
            ValueError: If the value does not fit the register
        """
        raw = int(round(value * self.divisor / self.multiplier))
        bits = 16 * self.span
        if self.signed:
            if not -(1 << (bits - 1)) <= raw < (1 << (bits - 1)):
                raise ValueError(f"{value} out of range for {self.name}")
            raw &= (1 << bits) - 1
        elif not 0 <= raw < (1 << bits):
            raise ValueError(f"{value} out of range for {self.name}")

        if self.span == 1:
            return (raw,)
        return ((raw >> 16) & 0xFFFF, raw & 0xFFFF)

    def __str__(self) -> str:
        return f"{self.name}@{self.address}"
