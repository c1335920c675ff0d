"""Pure helper functions for the domain layer."""

from .transformations import (
    apply_precision,
    apply_scaling,
    combine_registers,
    compose_words,
    convert_to_signed_int16,
    convert_to_signed_int32,
    process_register_value,
)

__all__ = [
    "apply_precision",
    "apply_scaling",
    "combine_registers",
    "compose_words",
    "convert_to_signed_int16",
    "convert_to_signed_int32",
    "process_register_value",
]
