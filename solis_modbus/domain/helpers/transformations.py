"""Value transformation helper functions.

This module provides utilities for transforming register words into
physical values: multi-register composition, two's complement sign
handling, scaling and precision rounding.
"""

from typing import Sequence, Union


def combine_registers(high: int, low: int) -> int:
    """Combine two 16-bit registers, high word first, into 32 bits.

    Examples:
        >>> combine_registers(0x0001, 0x0002)
        65538
        >>> combine_registers(0xFFFF, 0xFFFE)
        4294967294
    """
    return ((high & 0xFFFF) << 16) | (low & 0xFFFF)


def convert_to_signed_int16(value: int) -> int:
    """Convert unsigned 16-bit to signed 16-bit.

    Uses two's complement representation. Values >= 0x8000 are negative.

    Examples:
        >>> convert_to_signed_int16(0x7FFF)
        32767
        >>> convert_to_signed_int16(0x8000)
        -32768
        >>> convert_to_signed_int16(0xFFFF)
        -1
    """
    if value >= 0x8000:
        return value - 0x10000
    return value


def convert_to_signed_int32(value: int) -> int:
    """Convert unsigned 32-bit to signed 32-bit.

    Examples:
        >>> convert_to_signed_int32(0x00000384)
        900
        >>> convert_to_signed_int32(0xFFFFFFFE)
        -2
        >>> convert_to_signed_int32(0x80000000)
        -2147483648
    """
    if value >= 0x80000000:
        return value - 0x100000000
    return value


def compose_words(words: Sequence[int], signed: bool = False) -> int:
    """Turn one or two register words into a single integer.

    Args:
        words: One word, or two words high first
        signed: Reinterpret the result as two's complement

    Raises:
        ValueError: If more than two words are given
    """
    if len(words) == 1:
        value = words[0] & 0xFFFF
        return convert_to_signed_int16(value) if signed else value
    if len(words) == 2:
        value = combine_registers(words[0], words[1])
        return convert_to_signed_int32(value) if signed else value
    raise ValueError(f"Expected 1 or 2 register words, got {len(words)}")


def apply_scaling(
    value: int, divisor: int = 1, multiplier: int = 1
) -> Union[int, float]:
    """Scale a raw integer into its physical unit.

    The value stays an int when no scaling applies.

    Examples:
        >>> apply_scaling(2450, 10)
        245.0
        >>> apply_scaling(150, 100, 1000)
        1500.0
        >>> apply_scaling(85)
        85
    """
    if divisor == 1 and multiplier == 1:
        return value
    return value / divisor * multiplier


def apply_precision(value: float, precision: int = 3) -> float:
    """Round value to specified precision.

    Examples:
        >>> apply_precision(12.3456)
        12.346
        >>> apply_precision(12.3456, 1)
        12.3
    """
    return round(value, precision)


def process_register_value(
    words: Sequence[int],
    signed: bool = False,
    divisor: int = 1,
    multiplier: int = 1,
    precision: int = 3,
) -> Union[int, float]:
    """Process raw register words with all transformations.

    Applies transformations in this order:
    1. Composition (one word, or two words high first)
    2. Sign reinterpretation (16 or 32 bit two's complement)
    3. Scaling (divide, then multiply)
    4. Precision rounding (if result is float)

    Examples:
        >>> process_register_value([2450], divisor=10)
        245.0
        >>> process_register_value([0xFFFF, 0xFC18], signed=True)
        -1000
        >>> process_register_value([0x0000, 0x3039], divisor=1000)
        12.345
    """
    value = apply_scaling(compose_words(words, signed), divisor, multiplier)

    if isinstance(value, float) and precision is not None:
        value = apply_precision(value, precision)

    return value
